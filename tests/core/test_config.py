"""
Tests for RuntimeConfig loading.

Verifies:
1. Values are read from ``[tool.junit_switcheroo]`` in the nearest pyproject.toml.
2. Explicit arguments override the file.
3. Validation of recipe names and indentation.
4. Unreadable TOML falls back to defaults.
"""

import pytest
from pydantic import ValidationError

from junit_switcheroo.config import RuntimeConfig


def _write_pyproject(root, body):
  (root / "pyproject.toml").write_text(body, encoding="utf-8")


def test_defaults():
  config = RuntimeConfig()
  assert config.recipes == ["parameterized", "expected_exception"]
  assert config.indent is None
  assert config.workers == 1
  assert config.include == "**/*.java"
  assert config.strict_mode is False


def test_load_from_pyproject_in_parent(tmp_path):
  _write_pyproject(
    tmp_path,
    '[tool.junit_switcheroo]\nrecipes = ["expected_exception"]\nworkers = 3\nindent = "\\t"\nstrict_mode = true\n',
  )
  nested = tmp_path / "src" / "test"
  nested.mkdir(parents=True)

  config = RuntimeConfig.load(search_path=nested)

  assert config.recipes == ["expected_exception"]
  assert config.workers == 3
  assert config.indent == "\t"
  assert config.strict_mode is True


def test_explicit_arguments_win(tmp_path):
  _write_pyproject(tmp_path, '[tool.junit_switcheroo]\nrecipes = ["expected_exception"]\nstrict_mode = true\n')

  config = RuntimeConfig.load(recipes=["Parameterized"], strict_mode=False, include="*Test.java", search_path=tmp_path)

  assert config.recipes == ["parameterized"]
  assert config.strict_mode is False
  assert config.include == "*Test.java"


def test_other_tool_sections_are_ignored(tmp_path):
  _write_pyproject(tmp_path, "[tool.other]\nworkers = 9\n")
  assert RuntimeConfig.load(search_path=tmp_path).workers == 1


def test_unknown_recipe_from_file_is_rejected(tmp_path):
  _write_pyproject(tmp_path, '[tool.junit_switcheroo]\nrecipes = ["spring"]\n')
  with pytest.raises(ValidationError, match="Unknown recipe: 'spring'"):
    RuntimeConfig.load(search_path=tmp_path)


def test_recipes_are_deduplicated():
  config = RuntimeConfig(recipes=["expected_exception", " EXPECTED_EXCEPTION", "parameterized"])
  assert config.recipes == ["expected_exception", "parameterized"]


@pytest.mark.parametrize("indent", ["", "ab", " x "])
def test_invalid_indent(indent):
  with pytest.raises(ValidationError, match="Indentation"):
    RuntimeConfig(indent=indent)


def test_workers_must_be_positive():
  with pytest.raises(ValidationError):
    RuntimeConfig(workers=0)


def test_malformed_toml_falls_back_to_defaults(tmp_path, caplog):
  _write_pyproject(tmp_path, "[tool.junit_switcheroo\nworkers = \n")
  config = RuntimeConfig.load(search_path=tmp_path)
  assert config.workers == 1
  assert "Ignoring unreadable" in caplog.text
