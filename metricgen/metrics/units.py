"""Units that can be attached to a metric description.

Values are the Prometheus-style name suffixes passed to the backend;
``COUNT`` has no suffix.
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class Unit(Enum):
    COUNT = ""
    PERCENT = "percent"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    MICROSECONDS = "microseconds"
    NANOSECONDS = "nanoseconds"
    TEBIBYTES = "tebibytes"
    GIBIBYTES = "gibibytes"
    MEBIBYTES = "mebibytes"
    KIBIBYTES = "kibibytes"
    BYTES = "bytes"
    TERABITS_PER_SECOND = "terabits_per_second"
    GIGABITS_PER_SECOND = "gigabits_per_second"
    MEGABITS_PER_SECOND = "megabits_per_second"
    KILOBITS_PER_SECOND = "kilobits_per_second"
    BITS_PER_SECOND = "bits_per_second"
    COUNT_PER_SECOND = "count_per_second"


def unit_suffix(unit: Any) -> str:
    """Backend suffix for a ``Unit``, a plain string, or None."""
    if unit is None:
        return ""
    if isinstance(unit, Unit):
        return unit.value
    return str(unit)


__all__ = ["Unit", "unit_suffix"]
