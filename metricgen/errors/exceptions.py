"""
Compile-time error taxonomy for metricgen.

Every error carries the source location of the offending token and aborts
the whole compilation call at the first point of detection. Errors are
never collected or recovered from inside the compiler.

Hierarchy:
    MetricgenError
    ├── DeclarationSyntaxError          (token stream does not match the grammar)
    ├── UnknownKindError                (return kind not Counter/Gauge/Histogram)
    ├── DuplicateAttributeError         (second description or unit)
    ├── MissingDescriptionForUnitError  (unit without description)
    └── UnrecognizedAttributeError      (attribute outside the allow-list)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(Enum):
    """Error categories for classification."""
    SYNTAX = "syntax"
    VALIDATION = "validation"


@dataclass(frozen=True)
class Location:
    """1-based line/column position in the declaration source."""
    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.col}"


class MetricgenError(Exception):
    """Base class for all located compile errors."""

    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(self, message: str, location: Location | None = None):
        super().__init__(message)
        self.message = message
        self.location = location

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.message} (line {self.location.line}, col {self.location.col})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetricgenError):
            return NotImplemented
        return (type(self), self.message, self.location) == (type(other), other.message, other.location)

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.location))


class DeclarationSyntaxError(MetricgenError):
    category = ErrorCategory.SYNTAX


class UnknownKindError(MetricgenError):
    pass


class DuplicateAttributeError(MetricgenError):
    pass


class MissingDescriptionForUnitError(MetricgenError):
    pass


class UnrecognizedAttributeError(MetricgenError):
    pass


def format_error(error: MetricgenError, path: str = "<input>") -> str:
    """Render ``path:line:col: ErrorName: message`` for terminal output."""
    if error.location is None:
        return f"{path}: {error.kind}: {error.message}"
    return f"{path}:{error.location.line}:{error.location.col}: {error.kind}: {error.message}"


__all__ = [
    "ErrorCategory",
    "Location",
    "MetricgenError",
    "DeclarationSyntaxError",
    "UnknownKindError",
    "DuplicateAttributeError",
    "MissingDescriptionForUnitError",
    "UnrecognizedAttributeError",
    "format_error",
]
