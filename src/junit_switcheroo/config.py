"""
Runtime Configuration Store.

Settings come from the ``[tool.junit_switcheroo]`` table of the nearest
``pyproject.toml`` and are overridden by explicit (CLI) arguments.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from junit_switcheroo.recipes import available_recipes

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

logger = logging.getLogger(__name__)

CONFIG_SECTION = "junit_switcheroo"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the migration engine.
  """

  recipes: List[str] = Field(
    default_factory=available_recipes,
    description="Enabled recipe names, applied in this order.",
  )
  indent: Optional[str] = Field(
    None,
    description="Indentation unit for synthesized code. Detected per unit when unset.",
  )
  workers: int = Field(1, ge=1, description="Number of worker processes for batch conversion.")
  include: str = Field("**/*.java", description="Glob selecting files when converting a directory.")
  strict_mode: bool = Field(False, description="If True, recipe warnings fail the conversion.")

  @field_validator("recipes")
  @classmethod
  def validate_recipes(cls, v: List[str]) -> List[str]:
    """
    Ensures every recipe is registered.

    Args:
        v (List[str]): Recipe names to validate.

    Returns:
        List[str]: The normalized (lowercase, de-duplicated) names.

    Raises:
        ValueError: If a recipe is not found in the registry.
    """
    known = available_recipes()
    cleaned = []
    for name in v:
      key = name.lower().strip()
      if key not in known:
        raise ValueError(f"Unknown recipe: '{key}'. Available recipes: {known}")
      if key not in cleaned:
        cleaned.append(key)
    return cleaned

  @field_validator("indent")
  @classmethod
  def validate_indent(cls, v: Optional[str]) -> Optional[str]:
    if v is not None and (not v or v.strip(" \t")):
      raise ValueError(f"Indentation must be non-empty spaces or tabs, got {v!r}")
    return v

  @classmethod
  def load(
    cls,
    recipes: Optional[List[str]] = None,
    indent: Optional[str] = None,
    workers: Optional[int] = None,
    include: Optional[str] = None,
    strict_mode: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        recipes (Optional[List[str]]): Override for enabled recipes.
        indent (Optional[str]): Override for the indentation unit.
        workers (Optional[int]): Override for the worker count.
        include (Optional[str]): Override for the directory glob.
        strict_mode (Optional[bool]): Override for strict mode.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    values: Dict[str, Any] = {}
    for key, override in (
      ("recipes", recipes),
      ("indent", indent),
      ("workers", workers),
      ("include", include),
      ("strict_mode", strict_mode),
    ):
      if override is not None:
        values[key] = override
      elif key in toml_config:
        values[key] = toml_config[key]
    return cls(**values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches parents for 'pyproject.toml' and extracts the tool section.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Ignoring unreadable {toml_path}: {e}")
        return {}, None
      return data.get("tool", {}).get(CONFIG_SECTION, {}), parent

  return {}, None
