"""
Interfaces package for metricgen.

Protocol definitions shared by the recording facade and its backends.

Key Principles:
- Protocols are import-free (only use typing and stdlib)
- No runtime dependencies on other metricgen modules
- Can be imported anywhere without circular risk

Usage:
    from metricgen.interfaces import RecorderProtocol

    def attach(recorder: RecorderProtocol) -> None:
        recorder.register_counter("requests", [("route", "/")]).inc()
"""

from .recorder_protocol import CounterLike, GaugeLike, HistogramLike, Labels, RecorderProtocol

__all__ = [
    "Labels",
    "CounterLike",
    "GaugeLike",
    "HistogramLike",
    "RecorderProtocol",
]
