"""
Orchestration Engine for JUnit migrations.

This module provides the `MigrationEngine`, the driver that converts one Java
compilation unit at a time.

The pipeline consists of:

1.  **Parsing**: The tree-sitter front end builds an immutable ``SourceUnit``.
    Syntax errors end the run with ``success=False`` and the input unchanged.
2.  **Recipes**: Every enabled recipe is applied in order. Each one detects its
    marker type first and returns the very same unit object when it has
    nothing to do; otherwise it runs its collect/plan/rewrite passes and its
    import maintenance.
3.  **Printing**: A unit no recipe touched is returned as the original text;
    a rewritten one is printed from the tree.

Recipe warnings (conflicting factories, malformed patterns, reverted classes)
are reported in ``ConversionResult.errors``. In strict mode they fail the
conversion and the input is returned unchanged.
"""

import logging
from typing import List, Optional

from junit_switcheroo.config import RuntimeConfig
from junit_switcheroo.core.context import MigrationContext
from junit_switcheroo.core.conversion_result import ConversionResult
from junit_switcheroo.core.errors import JavaSyntaxError
from junit_switcheroo.core.tracer import TraceLogger
from junit_switcheroo.core.tree import SourceUnit
from junit_switcheroo.frontend.java import JavaFrontend
from junit_switcheroo.recipes import Recipe, get_recipe

logger = logging.getLogger(__name__)


class MigrationEngine:
  """
  Converts Java source units.

  The engine itself is stateless between runs: tracer, message buses and
  contexts are created per unit.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, frontend: Optional[JavaFrontend] = None):
    """
    Initializes the Engine.

    Args:
        config (RuntimeConfig, optional): Runtime configuration. Loaded from
            the nearest pyproject.toml if None.
        frontend (JavaFrontend, optional): Parser to use. Created if None.
    """
    self.config = config or RuntimeConfig.load()
    self.frontend = frontend or JavaFrontend()
    self.recipes: List[Recipe] = [get_recipe(name) for name in self.config.recipes]
    self.strict_mode = self.config.strict_mode

  def parse(self, code: str, path: Optional[str] = None) -> SourceUnit:
    """
    Parses Java source into a ``SourceUnit``.

    Raises:
        JavaSyntaxError: If the code does not parse cleanly.
    """
    return self.frontend.parse(code, path)

  def run(self, code: str, path: Optional[str] = None) -> ConversionResult:
    """
    Executes the full migration pipeline on one unit.

    Args:
        code (str): Java source text.
        path (str, optional): Origin of the text, used in reports.

    Returns:
        ConversionResult: Migrated code, warnings and trace.
    """
    tracer = TraceLogger()
    label = path or "<string>"
    tracer.start_phase("Migration Pipeline", label)

    tracer.start_phase("Parsing", "Java source -> SourceUnit")
    try:
      unit = self.parse(code, path)
    except JavaSyntaxError as e:
      logger.warning(f"Cannot parse {label}: {e}")
      tracer.log_warning(f"Parse Error: {e}")
      tracer.end_phase()
      tracer.end_phase()
      return ConversionResult(
        code=code,
        path=path,
        errors=[f"Parse Error: {e}"],
        success=False,
        trace_events=tracer.export(),
      )
    tracer.end_phase()

    context = MigrationContext(self.frontend, unit, tracer, self.config.indent)
    applied: List[str] = []
    current = unit
    for recipe in self.recipes:
      tracer.start_phase(f"Recipe {recipe.name}", recipe.description)
      result = recipe.apply(current, context)
      tracer.end_phase()
      if result is not current:
        applied.append(recipe.name)
        current = result
    tracer.end_phase()

    errors = list(context.warnings)
    if self.strict_mode and errors:
      logger.error(f"Strict mode: {label} left unchanged ({len(errors)} warning(s))")
      return ConversionResult(code=code, path=path, errors=errors, success=False, trace_events=tracer.export())

    output = code if current is unit else current.print()
    if applied:
      logger.debug(f"{label}: applied {', '.join(applied)}")
    return ConversionResult(
      code=output,
      path=path,
      errors=errors,
      success=True,
      changed=output != code,
      applied_recipes=applied,
      trace_events=tracer.export(),
    )
