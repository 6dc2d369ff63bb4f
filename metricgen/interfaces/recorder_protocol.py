"""
Recorder Protocol - Interface between generated accessors and a metrics backend.

Generated code only talks to ``metricgen.metrics.recording``; that module
forwards every call to whatever object satisfies ``RecorderProtocol``.
Backends (Prometheus, no-op, test doubles) plug in through
``metricgen.metrics.install_recorder`` without the generated code or the
compiler importing them.

Label collections are ordered ``(key, value)`` string pairs; the order is
the order the parameters were declared in.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

Labels = Sequence[tuple[str, str]]


@runtime_checkable
class CounterLike(Protocol):
    def inc(self, amount: float | int = 1) -> None: ...


@runtime_checkable
class GaugeLike(Protocol):
    def set(self, value: float | int) -> None: ...
    def inc(self, amount: float | int = 1) -> None: ...
    def dec(self, amount: float | int = 1) -> None: ...


@runtime_checkable
class HistogramLike(Protocol):
    def observe(self, amount: float | int) -> None: ...


@runtime_checkable
class RecorderProtocol(Protocol):
    """
    Protocol for metric recorders.

    ``register_*`` returns the backend object values are written to for
    the given name and label collection. ``describe_*`` attaches a unit
    (may be None) and help text to a name; it is idempotent by name.
    """

    def register_counter(self, name: str, labels: Labels) -> CounterLike:
        ...

    def register_gauge(self, name: str, labels: Labels) -> GaugeLike:
        ...

    def register_histogram(self, name: str, labels: Labels) -> HistogramLike:
        ...

    def describe_counter(self, name: str, unit: Any, description: str) -> None:
        ...

    def describe_gauge(self, name: str, unit: Any, description: str) -> None:
        ...

    def describe_histogram(self, name: str, unit: Any, description: str) -> None:
        ...


__all__ = [
    "Labels",
    "CounterLike",
    "GaugeLike",
    "HistogramLike",
    "RecorderProtocol",
]
