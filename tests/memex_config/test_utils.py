"""
Tests for memex_config.utils and memex_config.validators.
"""

import pytest

from memex_config.utils import load_yaml_file, resolve_path, safe_bool, safe_int
from memex_config.validators import validate_directory, validate_file, validate_positive_int


class TestLoadYamlFile:
    """Tests for load_yaml_file."""

    def test_loads_mapping(self, tmp_path):
        path = tmp_path / "memex.yaml"
        path.write_text("memex:\n  token_budget: 4000\n")
        assert load_yaml_file(path) == {"memex": {"token_budget": 4000}}

    def test_missing_file(self, tmp_path):
        assert load_yaml_file(tmp_path / "nope.yaml") == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed\n")
        assert load_yaml_file(path) == {}

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert load_yaml_file(path) == {}


class TestSafeParsers:
    """Tests for safe_int and safe_bool."""

    @pytest.mark.parametrize("value,expected", [("42", 42), (7, 7), (None, 5), ("abc", 5), (True, 5)])
    def test_safe_int(self, value, expected):
        assert safe_int(value, 5) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("true", True), ("YES", True), ("on", True), ("1", True), ("false", False), ("off", False), (True, True)],
    )
    def test_safe_bool(self, value, expected):
        assert safe_bool(value, not expected) is expected

    def test_safe_bool_unrecognized_uses_default(self):
        assert safe_bool("maybe", True) is True
        assert safe_bool(None, False) is False


class TestResolvePath:
    """Tests for resolve_path."""

    def test_relative_to_base(self, tmp_path):
        assert resolve_path("docs", tmp_path) == (tmp_path / "docs").resolve()

    def test_absolute_kept(self, tmp_path):
        assert resolve_path(tmp_path / "x", tmp_path / "other") == (tmp_path / "x").resolve()

    def test_expands_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_path("~/docs", tmp_path / "other") == (tmp_path / "docs").resolve()


class TestValidators:
    """Tests for the validator functions."""

    @pytest.mark.parametrize("value", [1, 200])
    def test_positive_int_valid(self, value):
        assert validate_positive_int(value, "token_budget") == (True, None)

    @pytest.mark.parametrize("value", [0, -3, "10", True, None])
    def test_positive_int_invalid(self, value):
        is_valid, error = validate_positive_int(value, "token_budget")
        assert not is_valid
        assert "token_budget" in error

    def test_directory(self, tmp_path):
        assert validate_directory(tmp_path, "docs_root") == (True, None)
        assert validate_directory(None, "docs_root") == (False, "docs_root is not set")
        assert "does not exist" in validate_directory(tmp_path / "nope", "docs_root")[1]

        file_path = tmp_path / "file.md"
        file_path.write_text("x")
        assert "not a directory" in validate_directory(file_path, "docs_root")[1]

    def test_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: []\n")
        assert validate_file(path, "rules_file") == (True, None)
        assert "does not exist" in validate_file(tmp_path / "nope.yaml", "rules_file")[1]
        assert "not a file" in validate_file(tmp_path, "rules_file")[1]
