"""
Errors package - located compile errors raised by the metricgen compiler.

Usage:
    from metricgen.errors import MetricgenError, format_error

    try:
        text = compile_source(source)
    except MetricgenError as e:
        print(format_error(e, "metrics.decl"))
"""

from .exceptions import (
    DeclarationSyntaxError,
    DuplicateAttributeError,
    ErrorCategory,
    Location,
    MetricgenError,
    MissingDescriptionForUnitError,
    UnknownKindError,
    UnrecognizedAttributeError,
    format_error,
)

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
