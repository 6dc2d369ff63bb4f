"""Tests for compiler.codegen module."""
from __future__ import annotations

import ast

import pytest

from metricgen.compiler import MetricKind, compile_source, parse_source
from metricgen.compiler.codegen import (
    DESCRIBE_FUNCTIONS,
    HANDLE_TYPES,
    RECORD_FUNCTIONS,
    exported_names,
    render_description,
    render_declaration,
)
from tests.fixtures import make_block

PREAMBLE = [
    "# Auto-generated by metricgen from block `pub mod metrics`.",
    "# DO NOT EDIT MANUALLY - re-run metricgen after modifying the declarations.",
    "from __future__ import annotations",
    "",
    "from metricgen.metrics import recording as _recording",
    "from metricgen.metrics.recording import Unit  # noqa: F401",
    "",
    "BLOCK_NAME = 'metrics'",
    "BLOCK_VISIBILITY = 'pub'",
    "BLOCK_ATTRIBUTES = ('#[metrics]',)",
]
FOOTER = ["", "", "__all__ = [name for name in _EXPORTS if name in globals()]"]


def _expected(exports, *body):
    return "\n".join([*PREAMBLE, f"_EXPORTS = {exports!r}", *body, *FOOTER]) + "\n"


def _decl_lines(snippet):
    return render_declaration(parse_source(make_block(snippet)).declarations[0])


class TestRenderModule:
    """Test whole-module output."""

    def test_counter_without_labels(self):
        """Test a bare counter: no label argument, no describe function."""
        output = compile_source(make_block("fn counter() -> Counter;"))
        assert output == _expected(
            (),
            "",
            "",
            "def counter() -> _recording.Counter:",
            "    return _recording.counter('counter')",
        )

    def test_counter_with_one_label(self):
        """Test one parameter gives a one-entry label list."""
        output = compile_source(make_block("pub fn counter(label_key: str) -> Counter;"))
        assert output == _expected(
            ("counter",),
            "",
            "",
            "def counter(label_key: str) -> _recording.Counter:",
            "    labels = [('label_key', str(label_key))]",
            "    return _recording.counter('counter', labels)",
        )

    def test_histogram_with_description_and_unit(self):
        """Test description plus unit emits a three-argument describe call."""
        output = compile_source(make_block(
            '#[description = "d"] #[unit = Unit.SECONDS] pub fn histogram() -> Histogram;'
        ))
        assert output == _expected(
            ("histogram", "describe_histogram"),
            "",
            "",
            "def histogram() -> _recording.Histogram:",
            "    return _recording.histogram('histogram')",
            "",
            "",
            "def describe_histogram() -> None:",
            '    """Describes the metric `histogram`."""',
            "    _recording.describe_histogram('histogram', Unit.SECONDS, \"d\")",
        )

    def test_empty_module(self):
        """Test a block without declarations keeps its header constants."""
        assert compile_source(make_block()) == _expected(())

    def test_module_docstring(self):
        """Test block docs become the module docstring."""
        output = compile_source("/// Service metrics.\nmod svc {}\n")
        lines = output.splitlines()
        assert lines[0] == "# Auto-generated by metricgen from block `mod svc`."
        assert lines[2] == '""" Service metrics."""'
        assert ast.get_docstring(ast.parse(output), clean=False) == " Service metrics."

    def test_output_is_deterministic(self):
        """Test compiling the same input twice gives identical text."""
        source = make_block(
            "/// A.\n#[description = \"a\"]\npub fn a(x: int) -> Gauge;",
            "#[cfg(DEBUG)]\nfn b() -> Counter;",
        )
        assert compile_source(source) == compile_source(source)

    def test_output_parses(self):
        """Test generated text is valid Python for a mixed block."""
        source = make_block(
            '/// Doc with "quotes" and a \\ backslash.\npub fn a(x: int, y: str) -> Gauge;',
            '#[cfg(DEBUG)]\n#[description = "b"]\n#[unit = Unit.BYTES]\nfn b() -> Counter;',
            "pub(crate) fn c() -> Histogram;",
        )
        ast.parse(compile_source(source))


class TestRenderDeclaration:
    """Test per-declaration output."""

    def test_labels_in_declared_order(self):
        """Test N parameters give N label pairs keyed by parameter name."""
        lines = _decl_lines("fn c(b: str, a: int, c: float) -> Counter;")
        assert lines[1] == "    labels = [('b', str(b)), ('a', str(a)), ('c', str(c))]"
        assert lines[2] == "    return _recording.counter('c', labels)"

    def test_description_only_has_two_arguments(self):
        """Test describe call without a unit."""
        lines = _decl_lines('#[description = "Queue depth"]\nfn depth() -> Gauge;')
        assert lines[-1] == "    _recording.describe_gauge('depth', \"Queue depth\")"

    def test_description_expression_verbatim(self):
        """Test the description expression is emitted as written."""
        lines = _decl_lines('#[description = PREFIX + " total"]\nfn t() -> Counter;')
        assert lines[-1] == "    _recording.describe_counter('t', PREFIX + \" total\")"

    def test_docstring_from_doc_comments(self):
        """Test doc fragments become the accessor docstring."""
        lines = _decl_lines("/// Line one.\n/// Line two.\nfn g() -> Gauge;")
        assert lines[1] == '    """ Line one. Line two."""'

    def test_awkward_docstring_uses_repr(self):
        """Test docs that cannot be triple-quoted fall back to repr."""
        lines = _decl_lines('/// ends with a quote "\nfn g() -> Gauge;')
        assert lines[1] == "    ' ends with a quote \"'"

    def test_cfg_guard(self):
        """Test cfg conditions wrap both functions in one if block."""
        lines = _decl_lines('#[cfg(DEBUG)]\n#[cfg(os.name == "nt")]\n#[description = "d"]\nfn c() -> Counter;')
        assert lines == [
            'if (DEBUG) and (os.name == "nt"):',
            "    def c() -> _recording.Counter:",
            "        return _recording.counter('c')",
            "",
            "    def describe_c() -> None:",
            '        """Describes the metric `c`."""',
            "        _recording.describe_counter('c', \"d\")",
        ]

    def test_render_description_without_description(self):
        """Test rendering a describe function for an undescribed metric is refused."""
        decl = parse_source(make_block("fn c() -> Counter;")).declarations[0]
        with pytest.raises(ValueError, match="no description"):
            render_description(decl)

    def test_tuple_description_is_one_argument(self):
        """Test a parenthesised tuple reaches describe as a single argument."""
        lines = _decl_lines('#[description = ("a", "b")]\nfn c() -> Counter;')
        assert lines[-1] == "    _recording.describe_counter('c', (\"a\", \"b\"))"

    def test_restricted_visibility_comment(self):
        """Test pub(...) visibility is recorded next to the definition."""
        lines = _decl_lines("pub(crate) fn x() -> Gauge;")
        assert lines[0] == "def x() -> _recording.Gauge:  # visibility: pub(crate)"


class TestExports:
    """Test exported_names()."""

    def test_only_pub_declarations_exported(self):
        """Test private declarations and their describe functions stay out."""
        module = parse_source(make_block(
            '#[description = "a"]\npub fn a() -> Counter;',
            '#[description = "b"]\nfn b() -> Counter;',
            "pub(crate) fn c() -> Gauge;",
        ))
        assert exported_names(module) == ("a", "describe_a", "c")


class TestKindTables:
    """Test every MetricKind has an entry in each dispatch table."""

    @pytest.mark.parametrize("table", [RECORD_FUNCTIONS, DESCRIBE_FUNCTIONS, HANDLE_TYPES])
    def test_table_is_exhaustive(self, table):
        assert set(table) == set(MetricKind)

    @pytest.mark.parametrize("kind", list(MetricKind))
    def test_kind_renders(self, kind):
        """Test each kind's accessor names its own handle and record function."""
        lines = _decl_lines(f"fn m() -> {kind.value};")
        assert lines[0] == f"def m() -> _recording.{kind.value}:"
        assert lines[1] == f"    return _recording.{kind.value.lower()}('m')"
