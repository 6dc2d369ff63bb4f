"""Render a parsed declaration block as a Python module.

For every declaration, in source order, the output contains an accessor
function and, when a description was declared, a ``describe_<name>``
function. The result is byte-identical for equal ``Module`` values: all
iteration is over tuples and every literal goes through ``repr``.

Shape of one accessor::

    def requests(route: str, status: int) -> _recording.Counter:
        \"\"\" Requests served.\"\"\"
        labels = [('route', str(route)), ('status', str(status))]
        return _recording.counter('requests', labels)

A declaration without parameters calls ``_recording.counter('name')``
with no label argument at all.
"""
from __future__ import annotations

import logging

from metricgen.compiler.ast_nodes import Declaration, MetricKind, Module

logger = logging.getLogger(__name__)

DESCRIBE_PREFIX = "describe_"
RECORDING_ALIAS = "_recording"

HEADER = (
    "# Auto-generated by metricgen from block `{block}`.\n"
    "# DO NOT EDIT MANUALLY - re-run metricgen after modifying the declarations."
)

IMPORTS = (
    "from __future__ import annotations",
    "",
    f"from metricgen.metrics import recording as {RECORDING_ALIAS}",
    "from metricgen.metrics.recording import Unit  # noqa: F401",
)

# One entry per MetricKind; tests assert these cover the whole enum.
RECORD_FUNCTIONS = {
    MetricKind.COUNTER: "counter",
    MetricKind.GAUGE: "gauge",
    MetricKind.HISTOGRAM: "histogram",
}
DESCRIBE_FUNCTIONS = {
    MetricKind.COUNTER: "describe_counter",
    MetricKind.GAUGE: "describe_gauge",
    MetricKind.HISTOGRAM: "describe_histogram",
}
HANDLE_TYPES = {
    MetricKind.COUNTER: "Counter",
    MetricKind.GAUGE: "Gauge",
    MetricKind.HISTOGRAM: "Histogram",
}

# Names the generated module binds or calls itself. A metric or parameter
# with one of these names would shadow them inside the accessors.
GENERATED_NAMES = frozenset({
    RECORDING_ALIAS,
    "Unit",
    "str",
    "BLOCK_NAME",
    "BLOCK_VISIBILITY",
    "BLOCK_ATTRIBUTES",
    "_EXPORTS",
})

_INDENT = "    "


def describe_function_name(decl: Declaration) -> str:
    return DESCRIBE_PREFIX + decl.name


def _docstring(text: str) -> str:
    plain = all(ch.isprintable() or ch in "\n\t" for ch in text)
    if plain and '"""' not in text and "\\" not in text and not text.endswith('"'):
        return f'"""{text}"""'
    return repr(text)


def _def_line(decl: Declaration, signature: str) -> str:
    line = f"def {signature}:"
    if decl.visibility not in ("", "pub"):
        line += f"  # visibility: {decl.visibility}"
    return line


def render_accessor(decl: Declaration) -> list[str]:
    params = ", ".join(f"{p.name}: {p.type}" for p in decl.parameters)
    handle = f"{RECORDING_ALIAS}.{HANDLE_TYPES[decl.kind]}"
    record = f"{RECORDING_ALIAS}.{RECORD_FUNCTIONS[decl.kind]}"

    lines = [_def_line(decl, f"{decl.name}({params}) -> {handle}")]
    if decl.metadata.documentation:
        lines.append(_INDENT + _docstring(decl.metadata.documentation))
    if decl.parameters:
        pairs = ", ".join(f"({p.name!r}, str({p.name}))" for p in decl.parameters)
        lines.append(f"{_INDENT}labels = [{pairs}]")
        lines.append(f"{_INDENT}return {record}({decl.name!r}, labels)")
    else:
        lines.append(f"{_INDENT}return {record}({decl.name!r})")
    return lines


def render_description(decl: Declaration) -> list[str]:
    """``describe_<name>()``; only meaningful when a description is set."""
    meta = decl.metadata
    if meta.description is None:
        raise ValueError(f"metric {decl.name!r} has no description to render")
    describe = f"{RECORDING_ALIAS}.{DESCRIBE_FUNCTIONS[decl.kind]}"

    # unit, when present, is always the middle argument; description is last
    args = [repr(decl.name)]
    if meta.unit is not None:
        args.append(meta.unit)
    args.append(meta.description)

    return [
        _def_line(decl, f"{describe_function_name(decl)}() -> None"),
        _INDENT + _docstring(f"Describes the metric `{decl.name}`."),
        f"{_INDENT}{describe}({', '.join(args)})",
    ]


def render_declaration(decl: Declaration) -> list[str]:
    functions = [render_accessor(decl)]
    if decl.metadata.description is not None:
        functions.append(render_description(decl))

    lines: list[str] = []
    if decl.metadata.passthrough:
        condition = " and ".join(f"({cfg})" for cfg in decl.metadata.passthrough)
        lines.append(f"if {condition}:")
        for i, fn_lines in enumerate(functions):
            if i:
                lines.append("")
            lines.extend(_INDENT + line if line else line for line in fn_lines)
        return lines

    for i, fn_lines in enumerate(functions):
        if i:
            lines.extend(["", ""])
        lines.extend(fn_lines)
    return lines


def exported_names(module: Module) -> tuple[str, ...]:
    names: list[str] = []
    for decl in module.declarations:
        if not decl.exported:
            continue
        names.append(decl.name)
        if decl.metadata.description is not None:
            names.append(describe_function_name(decl))
    return tuple(names)


def render_module(module: Module) -> str:
    block = " ".join(part for part in (module.visibility, "mod", module.name) if part)
    lines = [HEADER.format(block=block)]
    if module.documentation:
        lines.append(_docstring(module.documentation))
    lines.extend(IMPORTS)
    lines.extend([
        "",
        f"BLOCK_NAME = {module.name!r}",
        f"BLOCK_VISIBILITY = {module.visibility!r}",
        f"BLOCK_ATTRIBUTES = {tuple(module.attributes)!r}",
        f"_EXPORTS = {exported_names(module)!r}",
    ])

    for decl in module.declarations:
        lines.extend(["", ""])
        lines.extend(render_declaration(decl))

    lines.extend(["", "", "__all__ = [name for name in _EXPORTS if name in globals()]"])
    text = "\n".join(lines) + "\n"
    logger.debug("rendered block %s: %s declarations, %s bytes", module.name, len(module.declarations), len(text))
    return text


__all__ = [
    "DESCRIBE_PREFIX",
    "GENERATED_NAMES",
    "RECORD_FUNCTIONS",
    "DESCRIBE_FUNCTIONS",
    "HANDLE_TYPES",
    "describe_function_name",
    "render_accessor",
    "render_description",
    "render_declaration",
    "exported_names",
    "render_module",
]
