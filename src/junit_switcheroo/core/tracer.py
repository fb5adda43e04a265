"""
Migration Trace Logger.

Records the step-by-step execution of one conversion:
1. Lifecycle phases (parsing, detection, collection, rewriting, imports).
2. Pattern matches (``@RunWith(Parameterized.class)`` on class ``VetTests``).
3. Tree mutations (node printed before and after).
4. Import actions and decisions where nothing changed.

The output is a list of plain dictionaries suitable for JSON serialization.
One logger is created per source unit, so concurrent units never share state.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  MATCH_PATTERN = "match_pattern"
  AST_MUTATION = "ast_mutation"
  ANALYSIS_WARNING = "analysis_warning"
  IMPORT_ACTION = "import_action"
  INSPECTION = "inspection"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records migration events for one source unit.
  Injected into the engine and handed to every recipe through the context.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase (e.g. 'Recipe parameterized'). Returns the phase id."""
    phase_id = str(uuid.uuid4())
    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=self._current_parent(),
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self):
    """Ends the innermost active phase."""
    if not self._active_phases:
      return
    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_match(self, pattern: str, target: str, recipe: str):
    """Logs that a marker pattern matched a declaration."""
    self._log_simple(
      TraceEventType.MATCH_PATTERN,
      f"Matched {pattern} on {target}",
      {"pattern": pattern, "target": target, "recipe": recipe},
    )

  def log_mutation(self, node_type: str, before: str, after: str):
    """Logs a tree transformation."""
    self._log_simple(TraceEventType.AST_MUTATION, f"Transformed {node_type}", {"before": before, "after": after})

  def log_import(self, action: str, name: str, static: bool = False):
    prefix = "static " if static else ""
    self._log_simple(TraceEventType.IMPORT_ACTION, f"{action} import {prefix}{name}", {"action": action, "name": name})

  def log_warning(self, message: str):
    self._log_simple(TraceEventType.ANALYSIS_WARNING, message, {"level": "warning"})

  def log_inspection(self, target: str, outcome: str, detail: str = ""):
    """Logs a decision point where no change occurred."""
    self._log_simple(TraceEventType.INSPECTION, f"Inspecting '{target}'", {"outcome": outcome, "detail": detail})

  def warnings(self) -> List[str]:
    return [e.description for e in self._events if e.type == TraceEventType.ANALYSIS_WARNING]

  def _current_parent(self) -> Optional[str]:
    return self._active_phases[-1] if self._active_phases else None

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]):
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=evt_type,
        timestamp=time.time(),
        description=desc,
        parent_id=self._current_parent(),
        metadata=meta,
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns a list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]
