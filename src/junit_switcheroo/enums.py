"""
Enumerations for junit-switcheroo.

This module defines the closed sets of tags shared across the tree model,
the recipes and the tracing layer.
"""

from enum import Enum


class ExpressionKind(str, Enum):
  """
  Coarse syntactic category of an expression.

  The front end only classifies what the recipes need to distinguish
  (e.g. ``expect(Foo.class)`` vs ``expect(isA(Foo.class))``).
  """

  INT = "int"
  STRING = "string"
  CLASS = "class"  # Foo.class
  CALL = "call"  # method invocation
  NEW = "new"  # object creation
  NAME = "name"  # identifier or field access
  CONCAT = "concat"  # binary '+' expression
  OTHER = "other"


class InjectionMode(str, Enum):
  """
  How a parameterized test class receives its parameter values.
  """

  CONSTRUCTOR = "constructor"
  FIELD = "field"
  NONE = "none"


class ScanState(str, Enum):
  """
  States of the expectation scanner walking one method body.
  """

  SCANNING = "scanning"  # before the first expectation call
  COLLECTING = "collecting"  # inside the contiguous run of expectation calls
  DONE = "done"  # remaining statements form the throwing body


class ExpectationKind(str, Enum):
  """
  Recognized ``ExpectedException`` calls, in normalized emission order.
  """

  TYPE = "type"  # expect(Foo.class)
  TYPE_MATCHER = "type_matcher"  # expect(isA(...))
  MESSAGE = "message"  # expectMessage("...")
  MESSAGE_MATCHER = "message_matcher"  # expectMessage(containsString(...))
  CAUSE_MATCHER = "cause_matcher"  # expectCause(nullValue())

  @property
  def is_matcher(self) -> bool:
    return self in (ExpectationKind.TYPE_MATCHER, ExpectationKind.MESSAGE_MATCHER, ExpectationKind.CAUSE_MATCHER)
