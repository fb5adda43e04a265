"""
Per-unit migration context.

Bundles the collaborators a recipe needs (front end, synthesizer, formatter,
import fixer, tracer) for exactly one source unit. Nothing in here is shared
across units.
"""

import logging
from typing import List, Optional

from junit_switcheroo.core.formatter import AutoFormatter
from junit_switcheroo.core.import_fixer import ImportFixer
from junit_switcheroo.core.synthesis import Synthesizer
from junit_switcheroo.core.tracer import TraceLogger
from junit_switcheroo.core.tree import SourceUnit
from junit_switcheroo.frontend.java import JavaFrontend

logger = logging.getLogger(__name__)


class MigrationContext:
  """
  Collaborators and diagnostics for one conversion.

  Attributes:
      frontend (JavaFrontend): Parser, also used for snippet synthesis.
      tracer (TraceLogger): Event log of this unit.
      formatter (AutoFormatter): Indentation of the unit.
      synthesizer (Synthesizer): Template rendering.
      imports (ImportFixer): Import maintenance.
  """

  def __init__(
    self,
    frontend: JavaFrontend,
    unit: SourceUnit,
    tracer: Optional[TraceLogger] = None,
    indent: Optional[str] = None,
  ):
    self.frontend = frontend
    self.tracer = tracer or TraceLogger()
    self.formatter = AutoFormatter.for_unit(unit, indent)
    self.synthesizer = Synthesizer(frontend, self.formatter)
    self.imports = ImportFixer(self.tracer)

  @property
  def warnings(self) -> List[str]:
    """Recipe warnings (conflicts, malformed patterns, reverted classes) recorded so far."""
    return self.tracer.warnings()

  def warn(self, message: str) -> None:
    """Records a recipe warning in the log, the trace and the result."""
    logger.warning(message)
    self.tracer.log_warning(message)

  def skip(self, target: str, reason: str) -> None:
    """Records that a candidate was left untouched."""
    logger.debug(f"Leaving {target} untouched: {reason}")
    self.tracer.log_inspection(target, "unchanged", reason)
