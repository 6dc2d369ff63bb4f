"""Tests for config.env_config and version modules."""
from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from metricgen.config.env_config import EnvConfig, get_log_level, get_recorder_kind
from metricgen.version import __version__, get_version


class TestEnvConfig:
    """Test EnvConfig typed access."""

    def test_get_int(self):
        with patch.dict(os.environ, {"METRICGEN_TEST_INT": "42"}):
            assert EnvConfig.get_int("METRICGEN_TEST_INT", 0) == 42

    def test_get_int_invalid_uses_default(self):
        """Test unparseable integers fall back to the default."""
        with patch.dict(os.environ, {"METRICGEN_TEST_INT": "forty"}):
            assert EnvConfig.get_int("METRICGEN_TEST_INT", 7) == 7

    @pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("ON", True), ("0", False), ("off", False)])
    def test_get_bool(self, raw, expected):
        with patch.dict(os.environ, {"METRICGEN_TEST_BOOL": raw}):
            assert EnvConfig.get_bool("METRICGEN_TEST_BOOL") is expected

    def test_get_float(self):
        with patch.dict(os.environ, {"METRICGEN_TEST_FLOAT": "2.5"}):
            assert EnvConfig.get_float("METRICGEN_TEST_FLOAT", 0.0) == 2.5

    def test_get_list(self):
        """Test comma separated values are split and trimmed."""
        with patch.dict(os.environ, {"METRICGEN_TEST_LIST": " a, b ,,c "}):
            assert EnvConfig.get_list("METRICGEN_TEST_LIST") == ["a", "b", "c"]

    def test_values_are_cached(self):
        """Test a cached value survives an environment change until clear_cache()."""
        with patch.dict(os.environ, {"METRICGEN_TEST_STR": "one"}):
            assert EnvConfig.get_str("METRICGEN_TEST_STR") == "one"
        with patch.dict(os.environ, {"METRICGEN_TEST_STR": "two"}):
            assert EnvConfig.get_str("METRICGEN_TEST_STR") == "one"
            EnvConfig.clear_cache()
            assert EnvConfig.get_str("METRICGEN_TEST_STR") == "two"

    def test_require(self, monkeypatch):
        """Test require() raises for missing variables."""
        monkeypatch.delenv("METRICGEN_TEST_REQUIRED", raising=False)
        with pytest.raises(RuntimeError, match="METRICGEN_TEST_REQUIRED"):
            EnvConfig.require("METRICGEN_TEST_REQUIRED")
        monkeypatch.setenv("METRICGEN_TEST_REQUIRED", "x")
        assert EnvConfig.require("METRICGEN_TEST_REQUIRED") == "x"
        assert EnvConfig.is_set("METRICGEN_TEST_REQUIRED")

    def test_get_all(self, monkeypatch):
        monkeypatch.setenv("METRICGEN_TEST_ALL", "1")
        assert EnvConfig.get_all()["METRICGEN_TEST_ALL"] == "1"

    def test_get_choice_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("METRICGEN_RECORDER", " NoOp ")
        assert get_recorder_kind() == "noop"


class TestConvenience:
    """Test module-level helpers."""

    def test_log_level_default(self, monkeypatch):
        monkeypatch.delenv("METRICGEN_LOG_LEVEL", raising=False)
        assert get_log_level() == "WARNING"

    def test_log_level_upper_cased(self, monkeypatch):
        monkeypatch.setenv("METRICGEN_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"

    def test_version_override(self, monkeypatch):
        """Test METRICGEN_VERSION overrides the packaged version."""
        monkeypatch.delenv("METRICGEN_VERSION", raising=False)
        assert get_version() == __version__
        EnvConfig.clear_cache()
        monkeypatch.setenv("METRICGEN_VERSION", "9.9.9")
        assert get_version() == "9.9.9"
