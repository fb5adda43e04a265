"""
Expected-exception migration.

``@Rule ExpectedException`` fields and their ``expect*`` calls become
``assertThrows`` (plus Hamcrest ``assertThat`` checks for matchers).
"""

import logging
from types import MappingProxyType

from junit_switcheroo.core.context import MigrationContext
from junit_switcheroo.core.matchers import EXPECTED_EXCEPTION_TYPE, TypeResolver
from junit_switcheroo.core.tree import SourceUnit
from junit_switcheroo.recipes.base import Recipe, register_recipe
from junit_switcheroo.recipes.expected_exception.rewriter import ExpectedExceptionRewriter
from junit_switcheroo.recipes.expected_exception.scanner import RECIPE_NAME, ExpectedExceptionCollector

logger = logging.getLogger(__name__)

IMPORTS_TO_REMOVE = (
  "org.junit.Rule",
  "org.junit.ClassRule",
  EXPECTED_EXCEPTION_TYPE,
)
ASSERT_THROWS = "org.junit.jupiter.api.Assertions.assertThrows"
ASSERT_THAT = "org.hamcrest.MatcherAssert.assertThat"
# Public types of org.junit.rules, for pruning an on-demand import of it.
RULES_PACKAGE = "org.junit.rules"
RULES_TYPES = (
  "DisableOnDebug",
  "ErrorCollector",
  "ExpectedException",
  "ExternalResource",
  "MethodRule",
  "RuleChain",
  "Stopwatch",
  "TemporaryFolder",
  "TestName",
  "TestRule",
  "TestWatcher",
  "TestWatchman",
  "Timeout",
  "Verifier",
)


@register_recipe(RECIPE_NAME)
class ExpectedExceptionRecipe(Recipe):
  display_name = "JUnit 4 ExpectedException rule"
  description = "@Rule ExpectedException + expect*() -> assertThrows(...)"
  marker_type = EXPECTED_EXCEPTION_TYPE
  order = 20

  def apply(self, unit: SourceUnit, context: MigrationContext) -> SourceUnit:
    if not self.applies_to(unit):
      return unit

    context.tracer.start_phase("Collect", "Expected-exception scan")
    collector = ExpectedExceptionCollector(TypeResolver.for_unit(unit), context)
    collector.walk(unit)
    context.tracer.end_phase()

    if not collector.plans:
      return unit

    context.tracer.start_phase("Rewrite", f"{len(collector.plans)} class(es) with ExpectedException")
    rewriter = ExpectedExceptionRewriter(MappingProxyType(collector.plans), context)
    result = rewriter.transform(unit)
    context.tracer.end_phase()

    if not rewriter.rewritten:
      return unit

    context.tracer.start_phase("Imports", "Expected-exception import maintenance")
    for name in IMPORTS_TO_REMOVE:
      result = context.imports.remove_import_if_unused(result, name)
    result = context.imports.remove_wildcard_if_unused(result, RULES_PACKAGE, RULES_TYPES)
    if rewriter.uses_matchers:
      result = context.imports.ensure_import(result, ASSERT_THAT, static=True)
    if rewriter.uses_assert_throws:
      result = context.imports.ensure_import(result, ASSERT_THROWS, static=True)
    context.tracer.end_phase()

    logger.debug(f"Migrated ExpectedException rules in: {', '.join(rewriter.rewritten)}")
    return result
