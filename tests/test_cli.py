"""Tests for the metricgen command line."""
from __future__ import annotations

import io

import pytest

from metricgen.cli import main
from tests.fixtures import make_block


@pytest.fixture
def decl_file(tmp_path):
    path = tmp_path / "metrics.decl"
    path.write_text(make_block('#[description = "Jobs"]\npub fn jobs(queue: str) -> Counter;'), encoding="utf-8")
    return path


class TestMain:
    """Test main() exit codes and output."""

    def test_compile_to_stdout(self, decl_file, capsys):
        """Test generated code is written to stdout by default."""
        assert main([str(decl_file)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("# Auto-generated by metricgen from block `pub mod metrics`.")
        assert "def describe_jobs() -> None:" in out

    def test_compile_to_file(self, decl_file, tmp_path, capsys):
        """Test -o writes the module, creating parent directories."""
        target = tmp_path / "out" / "pkg" / "metrics_generated.py"
        assert main([str(decl_file), "-o", str(target)]) == 0
        assert "def jobs(queue: str) -> _recording.Counter:" in target.read_text(encoding="utf-8")
        assert capsys.readouterr().out == ""

    def test_check_only(self, decl_file, capsys):
        """Test --check validates without printing."""
        assert main(["--check", str(decl_file)]) == 0
        assert capsys.readouterr().out == ""

    def test_compile_error(self, tmp_path, capsys):
        """Test a compile error is reported as path:line:col and exits 1."""
        path = tmp_path / "bad.decl"
        path.write_text(make_block("fn x() -> some::Path;"), encoding="utf-8")
        assert main([str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith(f"{path}:2:15: UnknownKindError: Only `Counter`")

    def test_missing_input(self, tmp_path, capsys):
        """Test an unreadable path exits 1."""
        missing = tmp_path / "nope.decl"
        assert main([str(missing)]) == 1
        assert "cannot read input" in capsys.readouterr().err

    def test_undecodable_input(self, tmp_path, capsys):
        """Test a file that is not UTF-8 exits 1 with a message instead of a traceback."""
        path = tmp_path / "latin.decl"
        path.write_bytes(b"\xff\xfe mod m {}\n")
        assert main([str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert f"{path}: cannot read input:" in captured.err

    def test_stdin(self, monkeypatch, capsys):
        """Test '-' reads the declarations from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO(make_block("fn x() -> Gauge;")))
        assert main(["-"]) == 0
        assert "def x() -> _recording.Gauge:" in capsys.readouterr().out

    def test_stdin_error_path(self, monkeypatch, capsys):
        """Test errors on stdin input are reported against <stdin>."""
        monkeypatch.setattr("sys.stdin", io.StringIO(make_block("#[unit = Unit.SECONDS]\nfn x() -> Gauge;")))
        assert main(["-"]) == 1
        assert capsys.readouterr().err.startswith("<stdin>:2:5: MissingDescriptionForUnitError: ")

    def test_usage_error(self, capsys):
        """Test missing arguments exit 2 via argparse."""
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2

    def test_version(self, monkeypatch, capsys):
        """Test --version prints the configured version."""
        monkeypatch.setenv("METRICGEN_VERSION", "1.2.3")
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "metricgen 1.2.3" in capsys.readouterr().out
