"""Recorder backends: Prometheus (prometheus_client) and no-op.

``PrometheusRecorder`` creates collectors lazily, on the first record for a
name. The label names of that first record fix the collector's label
schema; later records must use the same keys in the same order. A
description registered before the first record becomes the collector's
help text (and its unit the collector unit); a description that arrives
later cannot change an existing collector and is only logged.
"""
from __future__ import annotations

import logging
import threading
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram  # type: ignore

from metricgen.interfaces import CounterLike, GaugeLike, HistogramLike, Labels
from metricgen.metrics.units import unit_suffix

logger = logging.getLogger(__name__)


class _NullSink:
    """Absorbs every write."""

    def inc(self, amount: float | int = 1) -> None:
        pass

    def dec(self, amount: float | int = 1) -> None:
        pass

    def set(self, value: float | int) -> None:
        pass

    def observe(self, amount: float | int) -> None:
        pass


_NULL_SINK = _NullSink()


class NoopRecorder:
    """Recorder that discards everything."""

    def register_counter(self, name: str, labels: Labels) -> CounterLike:
        return _NULL_SINK

    def register_gauge(self, name: str, labels: Labels) -> GaugeLike:
        return _NULL_SINK

    def register_histogram(self, name: str, labels: Labels) -> HistogramLike:
        return _NULL_SINK

    def describe_counter(self, name: str, unit: Any, description: str) -> None:
        pass

    def describe_gauge(self, name: str, unit: Any, description: str) -> None:
        pass

    def describe_histogram(self, name: str, unit: Any, description: str) -> None:
        pass


class PrometheusRecorder:
    """Recorder backed by a ``prometheus_client.CollectorRegistry``."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry if registry is not None else REGISTRY
        # name -> (collector type, label keys, collector)
        self._collectors: dict[str, tuple[type, tuple[str, ...], Any]] = {}
        # name -> (unit suffix, help text)
        self._descriptions: dict[str, tuple[str, str]] = {}
        self._lock = threading.Lock()

    # describe
    def _describe(self, name: str, unit: Any, description: str) -> None:
        with self._lock:
            if name in self._collectors:
                logger.debug("metric %s already created; description ignored", name)
                return
            if name in self._descriptions:
                return
            self._descriptions[name] = (unit_suffix(unit), str(description))

    def describe_counter(self, name: str, unit: Any, description: str) -> None:
        self._describe(name, unit, description)

    def describe_gauge(self, name: str, unit: Any, description: str) -> None:
        self._describe(name, unit, description)

    def describe_histogram(self, name: str, unit: Any, description: str) -> None:
        self._describe(name, unit, description)

    # register
    def _child(self, ctor: type, name: str, labels: Labels) -> Any:
        keys = tuple(k for k, _ in labels)
        values = [v for _, v in labels]
        with self._lock:
            entry = self._collectors.get(name)
            if entry is None:
                unit, help_text = self._descriptions.get(name, ("", name))
                kwargs: dict[str, Any] = {"registry": self.registry}
                if unit:
                    kwargs["unit"] = unit
                collector = ctor(name, help_text, list(keys), **kwargs)
                entry = (ctor, keys, collector)
                self._collectors[name] = entry
                logger.debug("created %s collector %s labels=%s", ctor.__name__.lower(), name, keys)

        registered_ctor, registered_keys, collector = entry
        if registered_ctor is not ctor:
            raise ValueError(
                f"metric {name!r} is a {registered_ctor.__name__.lower()}, not a {ctor.__name__.lower()}"
            )
        if registered_keys != keys:
            raise ValueError(f"metric {name!r} expects labels {registered_keys}, got {keys}")
        return collector.labels(*values) if keys else collector

    def register_counter(self, name: str, labels: Labels) -> CounterLike:
        return self._child(Counter, name, labels)

    def register_gauge(self, name: str, labels: Labels) -> GaugeLike:
        return self._child(Gauge, name, labels)

    def register_histogram(self, name: str, labels: Labels) -> HistogramLike:
        return self._child(Histogram, name, labels)


__all__ = ["NoopRecorder", "PrometheusRecorder"]
