"""
Recipe protocol and registry.

A recipe migrates one JUnit 4 idiom. It is detected by its marker type,
collects facts bottom-up, plans per class and rewrites top-down.
Recipes register themselves with ``@register_recipe``.
"""

import abc
from typing import Dict, List, Optional, Type

from junit_switcheroo.core.context import MigrationContext
from junit_switcheroo.core.scanners import uses_type
from junit_switcheroo.core.tree import SourceUnit


class Recipe(abc.ABC):
  """
  Base class for migrations.

  Attributes:
      name (str): Registry key, set by ``register_recipe``.
      display_name (str): Human readable title.
      description (str): One line summary for ``junit-switcheroo recipes``.
      marker_type (str): Qualified type whose presence triggers the recipe.
      order (int): Position in the default pipeline (lower runs first).
  """

  name: str = ""
  display_name: str = ""
  description: str = ""
  marker_type: str = ""
  order: int = 100

  def applies_to(self, unit: SourceUnit) -> bool:
    return uses_type(unit, self.marker_type)

  @abc.abstractmethod
  def apply(self, unit: SourceUnit, context: MigrationContext) -> SourceUnit:
    """
    Migrates a unit.

    Args:
        unit: The compilation unit.
        context: Collaborators for this unit.

    Returns:
        SourceUnit: The rewritten unit, or ``unit`` itself if nothing matched.
    """


_RECIPE_REGISTRY: Dict[str, Type[Recipe]] = {}


def register_recipe(name: str):
  def wrapper(cls):
    cls.name = name
    _RECIPE_REGISTRY[name] = cls
    return cls

  return wrapper


def get_recipe(name: str) -> Optional[Recipe]:
  cls = _RECIPE_REGISTRY.get(name)
  if cls:
    return cls()
  return None


def registered_recipes() -> List[str]:
  return sorted(_RECIPE_REGISTRY, key=lambda n: (_RECIPE_REGISTRY[n].order, n))
