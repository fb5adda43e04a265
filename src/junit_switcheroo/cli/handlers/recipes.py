"""
Recipes Command Handler.

Lists the registered recipes in pipeline order.
"""

from rich.table import Table

from junit_switcheroo.recipes import available_recipes, get_recipe
from junit_switcheroo.utils.console import console


def handle_recipes() -> int:
  table = Table(title="junit-switcheroo Recipes")
  table.add_column("Name", style="cyan")
  table.add_column("Recipe")
  table.add_column("Marker Type", style="magenta")
  table.add_column("Rewrite")

  for name in available_recipes():
    recipe = get_recipe(name)
    table.add_row(name, recipe.display_name, recipe.marker_type, recipe.description)

  console.print(table)
  return 0
