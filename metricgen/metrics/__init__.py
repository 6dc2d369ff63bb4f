"""
Metrics package - runtime side of metricgen.

Generated modules import ``metricgen.metrics.recording``; applications pick
the backend once at startup:

    from metricgen.metrics import PrometheusRecorder, install_recorder
    install_recorder(PrometheusRecorder())
"""

from .facade import get_recorder_lazy, install_recorder, reset_recorder_lazy
from .prometheus_recorder import NoopRecorder, PrometheusRecorder
from .units import Unit

__all__ = [
    "get_recorder_lazy",
    "install_recorder",
    "reset_recorder_lazy",
    "NoopRecorder",
    "PrometheusRecorder",
    "Unit",
]
