"""
Recorder Facade - Lazy singleton access to the installed metrics recorder.

Generated accessors never hold a recorder themselves; every call looks up
the process-wide recorder here. Until one is installed explicitly, the
first lookup builds the default chosen by ``METRICGEN_RECORDER``
(``prometheus`` -> PrometheusRecorder on the global registry, ``noop`` ->
NoopRecorder).

Usage:
    from prometheus_client import CollectorRegistry
    from metricgen.metrics.facade import install_recorder
    from metricgen.metrics.prometheus_recorder import PrometheusRecorder

    install_recorder(PrometheusRecorder(CollectorRegistry()))
"""

import logging
import threading
from typing import TYPE_CHECKING

from metricgen.config.env_config import get_recorder_kind
from metricgen.metrics.prometheus_recorder import NoopRecorder, PrometheusRecorder

if TYPE_CHECKING:
    from metricgen.interfaces import RecorderProtocol

logger = logging.getLogger(__name__)

# Singleton state
_recorder_instance: "RecorderProtocol | None" = None
_recorder_lock = threading.Lock()


def _build_default_recorder() -> "RecorderProtocol":
    kind = get_recorder_kind()
    logger.debug("installing default %s recorder", kind)
    if kind == "noop":
        return NoopRecorder()
    return PrometheusRecorder()


def get_recorder_lazy() -> "RecorderProtocol":
    """
    Get recorder singleton with lazy initialization.

    Thread-safe with double-checked locking.

    Returns:
        RecorderProtocol instance (installed or default recorder)
    """
    global _recorder_instance

    # Fast path: already initialized
    if _recorder_instance is not None:
        return _recorder_instance

    # Slow path: need to initialize (thread-safe)
    with _recorder_lock:
        # Double-check after acquiring lock
        if _recorder_instance is not None:
            return _recorder_instance
        _recorder_instance = _build_default_recorder()
        return _recorder_instance


def install_recorder(recorder: "RecorderProtocol") -> None:
    """Replace the process-wide recorder."""
    global _recorder_instance
    if recorder is None:
        raise ValueError("recorder must not be None; use reset_recorder_lazy() to restore the default")
    with _recorder_lock:
        _recorder_instance = recorder
    logger.debug("installed recorder %s", type(recorder).__name__)


def reset_recorder_lazy() -> None:
    """
    Reset the lazy singleton (for testing).

    The next lookup builds the default recorder again.
    """
    global _recorder_instance
    with _recorder_lock:
        _recorder_instance = None


__all__ = [
    "get_recorder_lazy",
    "install_recorder",
    "reset_recorder_lazy",
]
