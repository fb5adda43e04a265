"""
Exception hierarchy.

Unmatched patterns are not errors (the affected class is simply left
untouched). The exceptions below cover the remaining failure modes:

- ``JavaSyntaxError``: the front end could not build a tree.
- ``MalformedPatternError``: a recognized pattern is structurally invalid
  (e.g. a non-literal ``@Parameter`` position). Aborts one class.
- ``SynthesisError``: a template failed to render or parse. Reverts one class.
"""


class JunitSwitcherooError(Exception):
  """Base class for all engine errors."""


class JavaSyntaxError(JunitSwitcherooError):
  """Raised when Java source text cannot be parsed without errors."""

  def __init__(self, message: str, line: int = 0, column: int = 0):
    super().__init__(f"{message} (line {line}, column {column})" if line else message)
    self.line = line
    self.column = column


class MalformedPatternError(JunitSwitcherooError):
  """Raised when a matched pattern violates a structural invariant."""


class SynthesisError(JunitSwitcherooError):
  """Raised when a code template cannot be bound or parsed."""
