"""
Tests for the Tracing System.
"""

import json

from junit_switcheroo.core.tracer import TraceEventType, TraceLogger


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END
  assert events[3]["parent_id"] == p1


def test_end_phase_without_start_is_noop():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.export() == []


def test_match_logging_metadata():
  """Verify log_match records correct metadata."""
  logger = TraceLogger()
  logger.log_match("@org.junit.runner.RunWith", "VetTests", "parameterized")

  events = logger.export()
  assert len(events) == 1
  assert events[0]["type"] == TraceEventType.MATCH_PATTERN
  assert events[0]["metadata"] == {
    "pattern": "@org.junit.runner.RunWith",
    "target": "VetTests",
    "recipe": "parameterized",
  }


def test_warnings_and_inspections():
  logger = TraceLogger()
  phase = logger.start_phase("Recipe")
  logger.log_warning("duplicate factory")
  logger.log_inspection("Helper", "unchanged", "no factory")
  logger.log_import("add", "a.B", static=True)
  logger.log_mutation("ClassNode", "before", "after")

  assert logger.warnings() == ["duplicate factory"]
  events = logger.export()
  assert events[1]["type"] == TraceEventType.ANALYSIS_WARNING
  assert all(e["parent_id"] == phase for e in events[1:])
  assert events[2]["metadata"] == {"outcome": "unchanged", "detail": "no factory"}
  assert events[3]["description"] == "add import static a.B"
  assert events[4]["metadata"] == {"before": "before", "after": "after"}


def test_export_is_json_serializable():
  logger = TraceLogger()
  logger.start_phase("Parsing", "Java source -> SourceUnit")
  logger.log_warning("w")
  logger.end_phase()

  data = json.loads(json.dumps(logger.export()))
  assert data[0]["type"] == "phase_start"
  assert data[0]["metadata"]["detail"] == "Java source -> SourceUnit"
