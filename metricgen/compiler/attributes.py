"""Attribute validation for metric declarations.

Turns the raw attribute list of one declaration into a ``Metadata`` record.
The scan is a single left-to-right loop over explicit state:

  passthrough  cfg conditions, in order
  doc          concatenated doc fragments, verbatim
  description  first description expression, or None
  unit         first unit expression, or None (unit_attr keeps its location)

A second ``description`` or ``unit`` fails immediately. "unit requires
description" is checked once, after the loop, so ``#[unit]`` may precede
``#[description]`` in source order.
"""
from __future__ import annotations

from collections.abc import Iterable

from metricgen.compiler.ast_nodes import AttrForm, Metadata, RawAttribute
from metricgen.compiler.expressions import check_expression, string_literal_value
from metricgen.errors import (
    DeclarationSyntaxError,
    DuplicateAttributeError,
    MissingDescriptionForUnitError,
    UnrecognizedAttributeError,
)

FN_ATTR_ERROR = "Only `#[cfg]` and `#[doc]` are allowed on functions"
DESCRIPTION_SET_ERROR = "Metric description has already been set"
UNIT_SET_ERROR = "Metric unit has already been set"
UNIT_WITHOUT_DESCRIPTION_ERROR = "Cannot set metric unit without setting metric description"

PASSTHROUGH_ALLOWLIST = ("cfg",)


def _require_name_value(attr: RawAttribute) -> str:
    if attr.form is not AttrForm.NAME_VALUE or attr.value is None:
        raise DeclarationSyntaxError(f"Expected `#[{attr.path} = ...]`", attr.location)
    return attr.value


def _read_doc(attr: RawAttribute) -> str:
    """Doc fragment of a ``///`` line or a ``#[doc = "..."]`` attribute.

    A ``doc`` value that is not a plain string literal contributes nothing.
    """
    if attr.form is AttrForm.DOC_COMMENT:
        return attr.value or ""
    value = string_literal_value(_require_name_value(attr))
    return value if value is not None else ""


def validate_attributes(attrs: Iterable[RawAttribute]) -> Metadata:
    passthrough: list[str] = []
    doc = ""
    description: str | None = None
    unit: str | None = None
    unit_attr: RawAttribute | None = None

    for attr in attrs:
        if attr.path in PASSTHROUGH_ALLOWLIST:
            if attr.form is not AttrForm.LIST or attr.value is None:
                raise DeclarationSyntaxError(f"Expected `#[{attr.path}(<condition>)]`", attr.location)
            passthrough.append(check_expression(attr.value, attr.value_location, f"`#[{attr.path}]` condition").strip())
        elif attr.path == "doc":
            doc += _read_doc(attr)
        elif attr.path == "description":
            if description is not None:
                raise DuplicateAttributeError(DESCRIPTION_SET_ERROR, attr.location)
            description = check_expression(_require_name_value(attr), attr.value_location, "metric description").strip()
        elif attr.path == "unit":
            if unit is not None:
                raise DuplicateAttributeError(UNIT_SET_ERROR, attr.location)
            unit = check_expression(_require_name_value(attr), attr.value_location, "metric unit").strip()
            unit_attr = attr
        else:
            raise UnrecognizedAttributeError(FN_ATTR_ERROR, attr.location)

    if unit_attr is not None and description is None:
        raise MissingDescriptionForUnitError(UNIT_WITHOUT_DESCRIPTION_ERROR, unit_attr.location)

    return Metadata(
        passthrough=tuple(passthrough),
        documentation=doc,
        description=description,
        unit=unit,
    )


__all__ = [
    "FN_ATTR_ERROR",
    "PASSTHROUGH_ALLOWLIST",
    "validate_attributes",
]
