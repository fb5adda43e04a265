"""
Recipes Package.

Discovers and registers recipes by importing the ``recipe`` module of every
sub-package. Dropping a new sub-package with a ``recipe.py`` that uses
``@register_recipe`` is enough to make it available to the engine and CLI.
"""

import importlib
import logging
import pkgutil
from pathlib import Path
from typing import List

from junit_switcheroo.recipes.base import Recipe, get_recipe, register_recipe, registered_recipes


def _auto_register_recipes() -> None:
  pkg_path = str(Path(__file__).parent)
  for _, module_name, is_pkg in pkgutil.iter_modules([pkg_path]):
    if not is_pkg:
      continue
    try:
      importlib.import_module(f".{module_name}.recipe", package=__name__)
    except ImportError as e:
      logging.warning(f"⚠️  Failed to load recipe package '{module_name}': {e}. This recipe will not be available.")


_auto_register_recipes()


def available_recipes() -> List[str]:
  """
  Returns registered recipe names in pipeline order.

  Returns:
      List[str]: e.g. ``['parameterized', 'expected_exception']``.
  """
  return registered_recipes()


__all__ = ["Recipe", "available_recipes", "get_recipe", "register_recipe"]
