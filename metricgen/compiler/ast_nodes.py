# AST structures for metric declaration blocks

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from metricgen.errors import Location


class MetricKind(Enum):
    """Closed set of metric kinds; the value is the only accepted spelling."""
    COUNTER = "Counter"
    GAUGE = "Gauge"
    HISTOGRAM = "Histogram"


class AttrForm(Enum):
    WORD = auto()         # #[path]
    LIST = auto()         # #[path(...)]
    NAME_VALUE = auto()   # #[path = expr]
    DOC_COMMENT = auto()  # /// text


@dataclass(frozen=True)
class RawAttribute:
    """One attribute as written, before validation."""
    path: str                  # "doc", "cfg", "description", "unit", or a qualified path like "a::b"
    form: AttrForm
    value: str | None          # expression text, list contents, or doc fragment
    text: str                  # full verbatim source, e.g. "#[cfg(DEBUG)]"
    location: Location
    value_location: Location | None = None


@dataclass(frozen=True)
class Metadata:
    passthrough: tuple[str, ...] = ()   # cfg conditions, verbatim
    documentation: str = ""
    description: str | None = None
    unit: str | None = None


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str   # opaque type expression text


@dataclass(frozen=True)
class Declaration:
    metadata: Metadata
    visibility: str   # "" when absent
    name: str
    parameters: tuple[Parameter, ...]
    kind: MetricKind
    location: Location

    @property
    def label_keys(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters)

    @property
    def exported(self) -> bool:
        return self.visibility.startswith("pub")


@dataclass(frozen=True)
class Module:
    name: str
    visibility: str = ""
    attributes: tuple[str, ...] = ()    # outer #[...] attributes, verbatim
    documentation: str = ""             # outer doc comments, concatenated
    declarations: tuple[Declaration, ...] = field(default_factory=tuple)


__all__ = [
    "MetricKind",
    "AttrForm",
    "RawAttribute",
    "Metadata",
    "Parameter",
    "Declaration",
    "Module",
]
