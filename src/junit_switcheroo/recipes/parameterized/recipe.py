"""
Parameterized runner migration.

``@RunWith(Parameterized.class)`` classes become classes of
``@ParameterizedTest`` methods fed by ``@MethodSource``.
"""

import logging
from types import MappingProxyType

from junit_switcheroo.core.context import MigrationContext
from junit_switcheroo.core.matchers import PARAMETERIZED_TYPE, TypeResolver
from junit_switcheroo.core.tree import SourceUnit
from junit_switcheroo.recipes.base import Recipe, register_recipe
from junit_switcheroo.recipes.parameterized.collector import RECIPE_NAME, ParameterizedFactCollector
from junit_switcheroo.recipes.parameterized.rewriter import ParameterizedRewriter

logger = logging.getLogger(__name__)

IMPORTS_TO_REMOVE = (
  "org.junit.Test",
  "org.junit.runner.RunWith",
  "org.junit.runners.Parameterized",
  "org.junit.runners.Parameterized.Parameters",
  "org.junit.runners.Parameterized.Parameter",
  "org.junit.jupiter.api.Test",
)
IMPORTS_TO_ADD = (
  "org.junit.jupiter.params.ParameterizedTest",
  "org.junit.jupiter.params.provider.MethodSource",
)
# Public types of org.junit.runners, for pruning an on-demand import of it.
RUNNERS_PACKAGE = "org.junit.runners"
RUNNERS_TYPES = (
  "AllTests",
  "BlockJUnit4ClassRunner",
  "JUnit4",
  "MethodSorters",
  "Parameterized",
  "ParentRunner",
  "Suite",
)


@register_recipe(RECIPE_NAME)
class ParameterizedRecipe(Recipe):
  display_name = "JUnit 4 Parameterized runner"
  description = "@RunWith(Parameterized.class) -> @ParameterizedTest + @MethodSource"
  marker_type = PARAMETERIZED_TYPE
  order = 10

  def apply(self, unit: SourceUnit, context: MigrationContext) -> SourceUnit:
    if not self.applies_to(unit):
      return unit

    resolver = TypeResolver.for_unit(unit)

    context.tracer.start_phase("Collect", "Parameterized fact collection")
    collector = ParameterizedFactCollector(resolver, context)
    collector.walk(unit)
    context.tracer.end_phase()

    if not collector.plans:
      return unit

    context.tracer.start_phase("Rewrite", f"{len(collector.plans)} parameterized class(es)")
    rewriter = ParameterizedRewriter(MappingProxyType(collector.plans), resolver, context)
    result = rewriter.transform(unit)
    context.tracer.end_phase()

    if not rewriter.rewritten:
      return unit

    context.tracer.start_phase("Imports", "Parameterized import maintenance")
    for name in IMPORTS_TO_REMOVE:
      result = context.imports.remove_import_if_unused(result, name)
    result = context.imports.remove_wildcard_if_unused(result, RUNNERS_PACKAGE, RUNNERS_TYPES)
    for name in IMPORTS_TO_ADD:
      result = context.imports.ensure_import(result, name)
    context.tracer.end_phase()

    logger.debug(f"Migrated parameterized classes: {', '.join(rewriter.rewritten)}")
    return result
