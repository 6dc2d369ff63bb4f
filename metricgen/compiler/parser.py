# Declaration block parser

from __future__ import annotations

import logging

from metricgen.compiler.ast_nodes import (
    AttrForm,
    Declaration,
    MetricKind,
    Module,
    Parameter,
    RawAttribute,
)
from metricgen.compiler.attributes import validate_attributes
from metricgen.compiler.codegen import GENERATED_NAMES
from metricgen.compiler.expressions import check_expression, check_identifier, string_literal_value
from metricgen.compiler.lexer import TokenCursor, TokType
from metricgen.errors import DeclarationSyntaxError, UnknownKindError

logger = logging.getLogger(__name__)

METRIC_KIND_ERROR = (
    "Only `Counter`, `Gauge`, and `Histogram` (verbatim, no qualified paths) "
    "are allowed as return types on functions"
)

_KINDS_BY_SPELLING = {kind.value: kind for kind in MetricKind}


# -----------------------------
# Attributes and visibility

def parse_attribute(cursor: TokenCursor) -> RawAttribute:
    """Parse ``#[path]``, ``#[path(...)]`` or ``#[path = expr]``."""
    hash_tok = cursor.expect_punct("#", "to start an attribute")
    inner = cursor.sub_cursor("[", "in attribute")
    text = cursor.source[hash_tok.start:cursor.previous().end]

    path_tok = inner.expect_ident("as attribute name")
    path = path_tok.value
    while inner.maybe_punct("::"):
        path += "::" + inner.expect_ident("in attribute path").value

    if inner.is_empty():
        return RawAttribute(path, AttrForm.WORD, None, text, hash_tok.location)

    if inner.maybe_punct("="):
        value_toks = inner.collect_until((), "in attribute value", allow_eof=True)
        if not value_toks:
            raise inner.error(f"Expected a value after `{path} =`")
        value = inner.text_between(value_toks[0], value_toks[-1])
        return RawAttribute(path, AttrForm.NAME_VALUE, value, text, hash_tok.location, value_toks[0].location)

    if inner.peek().is_punct("("):
        args = inner.sub_cursor("(", f"in `#[{path}(...)]`")
        arg_toks = args.collect_until((), f"in `#[{path}(...)]`", allow_eof=True)
        if not inner.is_empty():
            raise inner.error(f"Unexpected {inner.peek().describe()} after `#[{path}(...)]`")
        value = args.text_between(arg_toks[0], arg_toks[-1]) if arg_toks else None
        value_loc = arg_toks[0].location if arg_toks else None
        return RawAttribute(path, AttrForm.LIST, value, text, hash_tok.location, value_loc)

    raise inner.error(f"Expected `=` or `(` after attribute name, found {inner.peek().describe()}")


def parse_outer_attributes(cursor: TokenCursor) -> list[RawAttribute]:
    attrs: list[RawAttribute] = []
    while True:
        tok = cursor.peek()
        if tok.type is TokType.DOC:
            cursor.advance()
            attrs.append(RawAttribute("doc", AttrForm.DOC_COMMENT, tok.value, "///" + tok.value, tok.location))
        elif tok.is_punct("#"):
            attrs.append(parse_attribute(cursor))
        else:
            return attrs


def parse_visibility(cursor: TokenCursor) -> str:
    """``pub`` or ``pub(...)`` verbatim; empty string when absent."""
    if not cursor.peek().is_ident("pub"):
        return ""
    pub_tok = cursor.advance()
    if cursor.peek().is_punct("("):
        cursor.sub_cursor("(", "in visibility")
    return cursor.source[pub_tok.start:cursor.previous().end]


# -----------------------------
# Declarations

def parse_kind(cursor: TokenCursor) -> MetricKind:
    """Accept exactly one bare ``Counter``/``Gauge``/``Histogram`` identifier.

    Qualified paths, generic suffixes and parenthesised spellings are
    rejected even when the last segment names a valid kind.
    """
    first = cursor.peek()
    if first.type is TokType.EOF or first.is_punct(";"):
        raise cursor.error(f"Expected metric kind, found {first.describe()}")

    if first.type is not TokType.IDENT:
        cursor.collect_until((";",), "in metric kind", allow_eof=True)
        raise UnknownKindError(METRIC_KIND_ERROR, first.location)

    cursor.advance()
    bare = True
    while cursor.peek().is_punct("::") or cursor.peek().is_punct("."):
        cursor.advance()
        cursor.expect_ident("in metric kind path")
        bare = False
    if cursor.peek().is_punct("["):
        cursor.sub_cursor("[", "in metric kind")
        bare = False
    elif cursor.peek().is_punct("<"):
        # generic arguments; `<`/`>` are not brackets to the lexer
        cursor.collect_until((";",), "in metric kind", allow_eof=True)
        bare = False

    kind = _KINDS_BY_SPELLING.get(first.value) if bare else None
    if kind is None:
        raise UnknownKindError(METRIC_KIND_ERROR, first.location)
    return kind


def parse_parameters(cursor: TokenCursor) -> tuple[Parameter, ...]:
    args = cursor.sub_cursor("(", "for parameter list")
    params: list[Parameter] = []
    seen: set[str] = set()

    while not args.is_empty():
        name_tok = args.expect_ident("as parameter name")
        name = check_identifier(name_tok.value, name_tok.location, "a parameter name", GENERATED_NAMES)
        if name in seen:
            raise DeclarationSyntaxError(f"Duplicate parameter `{name}`", name_tok.location)
        seen.add(name)

        args.expect_punct(":", f"after parameter `{name}`")
        type_toks = args.collect_until((",",), f"in type of parameter `{name}`", allow_eof=True)
        if not type_toks:
            raise args.error(f"Expected a type for parameter `{name}`")
        type_text = check_expression(
            args.text_between(type_toks[0], type_toks[-1]),
            type_toks[0].location,
            f"type of parameter `{name}`",
        )
        params.append(Parameter(name, type_text))

        if args.is_empty():
            break
        args.expect_punct(",", "between parameters")

    return tuple(params)


def parse_declaration(cursor: TokenCursor) -> Declaration:
    """Parse one ``[attrs] [vis] fn name(params) -> Kind;`` declaration."""
    metadata = validate_attributes(parse_outer_attributes(cursor))
    visibility = parse_visibility(cursor)
    fn_tok = cursor.expect_ident("to start a metric declaration", value="fn")
    name_tok = cursor.expect_ident("as metric name")
    name = check_identifier(name_tok.value, name_tok.location, "a metric name", GENERATED_NAMES)
    parameters = parse_parameters(cursor)
    cursor.expect_punct("->", f"before the kind of metric `{name}`")
    kind = parse_kind(cursor)
    cursor.expect_punct(";", f"after the declaration of metric `{name}`")

    logger.debug(
        "parsed metric %s kind=%s labels=%s described=%s", name, kind.value, len(parameters), metadata.description is not None
    )
    return Declaration(
        metadata=metadata,
        visibility=visibility,
        name=name,
        parameters=parameters,
        kind=kind,
        location=fn_tok.location,
    )


# -----------------------------
# Module

def parse_module(cursor: TokenCursor) -> Module:
    """Parse ``[attrs] [vis] mod name { declaration* }``."""
    attributes: list[str] = []
    documentation = ""
    for attr in parse_outer_attributes(cursor):
        if attr.form is AttrForm.DOC_COMMENT:
            documentation += attr.value or ""
        elif attr.path == "doc" and attr.form is AttrForm.NAME_VALUE:
            documentation += string_literal_value(attr.value or "") or ""
        else:
            attributes.append(attr.text)

    visibility = parse_visibility(cursor)
    cursor.expect_ident("to start a declaration block", value="mod")
    name_tok = cursor.expect_ident("as block name")
    body = cursor.sub_cursor("{", f"for the body of `{name_tok.value}`")

    declarations: list[Declaration] = []
    seen: set[str] = set()
    while not body.is_empty():
        decl = parse_declaration(body)
        if decl.name in seen:
            # not rejected; the later definition wins when the output is imported
            logger.debug("metric %s declared more than once in block %s", decl.name, name_tok.value)
        seen.add(decl.name)
        declarations.append(decl)

    logger.debug("parsed block %s with %s declarations", name_tok.value, len(declarations))
    return Module(
        name=name_tok.value,
        visibility=visibility,
        attributes=tuple(attributes),
        documentation=documentation,
        declarations=tuple(declarations),
    )


def expect_end(cursor: TokenCursor) -> None:
    tok = cursor.peek()
    if tok.type is not TokType.EOF:
        raise cursor.error(f"Unexpected {tok.describe()} after the declaration block")


__all__ = [
    "METRIC_KIND_ERROR",
    "parse_attribute",
    "parse_outer_attributes",
    "parse_visibility",
    "parse_kind",
    "parse_parameters",
    "parse_declaration",
    "parse_module",
    "expect_end",
]
