"""Recording API called by generated metric accessors.

Per kind there is a "record" operation returning a handle and a
"describe" operation:

    counter(name, labels=None) -> Counter        describe_counter(name, [unit,] description)
    gauge(name, labels=None) -> Gauge            describe_gauge(name, [unit,] description)
    histogram(name, labels=None) -> Histogram    describe_histogram(name, [unit,] description)

``labels`` is an ordered collection of ``(key, value)`` pairs. The unit,
when given, is the middle argument of ``describe_*``; the description is
always last. All calls go to the recorder installed through
``metricgen.metrics.facade``.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from metricgen.interfaces import CounterLike, GaugeLike, HistogramLike
from metricgen.metrics.facade import get_recorder_lazy
from metricgen.metrics.units import Unit


class Counter:
    """Handle for a monotonically increasing value."""

    __slots__ = ("_sink",)

    def __init__(self, sink: CounterLike):
        self._sink = sink

    def increment(self, value: float | int = 1) -> None:
        self._sink.inc(value)


class Gauge:
    """Handle for a value that can go up and down."""

    __slots__ = ("_sink",)

    def __init__(self, sink: GaugeLike):
        self._sink = sink

    def set(self, value: float | int) -> None:
        self._sink.set(value)

    def increment(self, value: float | int = 1) -> None:
        self._sink.inc(value)

    def decrement(self, value: float | int = 1) -> None:
        self._sink.dec(value)


class Histogram:
    """Handle for a distribution of observed values."""

    __slots__ = ("_sink",)

    def __init__(self, sink: HistogramLike):
        self._sink = sink

    def record(self, value: float | int) -> None:
        self._sink.observe(value)


def _label_pairs(labels: Iterable[tuple[str, Any]] | Mapping[str, Any] | None) -> tuple[tuple[str, str], ...]:
    if labels is None:
        return ()
    items = labels.items() if isinstance(labels, Mapping) else labels
    return tuple((str(k), str(v)) for k, v in items)


def _describe_args(op: str, args: tuple[Any, ...]) -> tuple[Any, str]:
    """Split ``([unit,] description)`` into (unit, description)."""
    if len(args) == 1:
        return None, args[0]
    if len(args) == 2:
        return args[0], args[1]
    raise TypeError(f"{op}() takes a name, an optional unit and a description ({len(args) + 1} arguments given)")


# record
def counter(name: str, labels: Iterable[tuple[str, Any]] | Mapping[str, Any] | None = None) -> Counter:
    return Counter(get_recorder_lazy().register_counter(name, _label_pairs(labels)))


def gauge(name: str, labels: Iterable[tuple[str, Any]] | Mapping[str, Any] | None = None) -> Gauge:
    return Gauge(get_recorder_lazy().register_gauge(name, _label_pairs(labels)))


def histogram(name: str, labels: Iterable[tuple[str, Any]] | Mapping[str, Any] | None = None) -> Histogram:
    return Histogram(get_recorder_lazy().register_histogram(name, _label_pairs(labels)))


# describe
def describe_counter(name: str, *args: Any) -> None:
    unit, description = _describe_args("describe_counter", args)
    get_recorder_lazy().describe_counter(name, unit, description)


def describe_gauge(name: str, *args: Any) -> None:
    unit, description = _describe_args("describe_gauge", args)
    get_recorder_lazy().describe_gauge(name, unit, description)


def describe_histogram(name: str, *args: Any) -> None:
    unit, description = _describe_args("describe_histogram", args)
    get_recorder_lazy().describe_histogram(name, unit, description)


__all__ = [
    "Counter",
    "Gauge",
    "Histogram",
    "Unit",
    "counter",
    "gauge",
    "histogram",
    "describe_counter",
    "describe_gauge",
    "describe_histogram",
]
