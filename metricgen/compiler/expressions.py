"""Syntax checks for the opaque Python fragments embedded in declarations.

Fragments are never evaluated; they only have to parse so that the
generated module is valid Python. They are pasted into the output as
written, so a fragment must also stay a single expression wherever it
lands: no top-level commas (an unparenthesised tuple would turn into extra
call arguments) and no ``#`` comments (which would swallow the rest of the
generated line).
"""
from __future__ import annotations

import ast
import io
import keyword
import tokenize
from collections.abc import Collection

from metricgen.errors import DeclarationSyntaxError, Location

_OPENERS = "([{"
_CLOSERS = ")]}"


def _pasting_hazard(text: str) -> str | None:
    """Name the first token kind that breaks verbatim pasting, if any."""
    depth = 0
    for tok in tokenize.generate_tokens(io.StringIO(text).readline):
        if tok.type == tokenize.COMMENT:
            return "a comment"
        if tok.type != tokenize.OP:
            continue
        if tok.string in _OPENERS:
            depth += 1
        elif tok.string in _CLOSERS:
            depth -= 1
        elif tok.string == "," and depth == 0:
            return "an unparenthesised tuple"
    return None


def check_expression(text: str, location: Location | None, what: str) -> str:
    """Return ``text`` unchanged if it is one pasteable Python expression."""
    source = text.strip()
    if not source:
        raise DeclarationSyntaxError(f"Expected an expression for {what}", location)
    try:
        ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise DeclarationSyntaxError(f"Invalid Python expression for {what}: {e.msg}", location) from None

    hazard = _pasting_hazard(source)
    if hazard is not None:
        raise DeclarationSyntaxError(f"Expected a single expression for {what}, found {hazard}", location)
    return text


def check_identifier(
    name: str, location: Location | None, what: str, reserved: Collection[str] = ()
) -> str:
    """Reject Python keywords and names the generated module binds itself."""
    if keyword.iskeyword(name):
        raise DeclarationSyntaxError(f"`{name}` is a Python keyword and cannot be used as {what}", location)
    if name in reserved:
        raise DeclarationSyntaxError(f"`{name}` is used by the generated module and cannot be used as {what}", location)
    return name


def string_literal_value(text: str) -> str | None:
    """Value of a plain string literal, or None for anything else."""
    try:
        value = ast.literal_eval(text.strip())
    except (ValueError, TypeError, SyntaxError):
        return None
    return value if isinstance(value, str) else None


__all__ = ["check_expression", "check_identifier", "string_literal_value"]
