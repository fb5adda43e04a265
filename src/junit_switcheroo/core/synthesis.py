"""
Code Synthesis.

Builds tree nodes from Java templates. ``#{}`` placeholders are bound in
order to:

- nodes, printed verbatim without their prefix,
- strings, inserted as is,
- sequences of either, joined with ``", "``.

The rendered text is shifted to the insertion column and parsed back
through the front end, so every synthesized node is an ordinary,
full-fidelity tree node.
"""

from typing import Any, Sequence

from junit_switcheroo.core.errors import SynthesisError
from junit_switcheroo.core.formatter import AutoFormatter
from junit_switcheroo.core.tree import AnnotationNode, Node, StatementNode, replace_prefix
from junit_switcheroo.frontend.java import JavaFrontend

PLACEHOLDER = "#{}"


class Synthesizer:
  """
  Renders templates into nodes.

  Attributes:
      frontend (JavaFrontend): Parser for rendered snippets.
      formatter (AutoFormatter): Column shifting of rendered snippets.
  """

  def __init__(self, frontend: JavaFrontend, formatter: AutoFormatter):
    self.frontend = frontend
    self.formatter = formatter

  def render(self, template: str, values: Sequence[Any]) -> str:
    """
    Binds placeholder values into a template.

    Args:
        template: Java text containing ``#{}`` placeholders.
        values: One value per placeholder, in order.

    Returns:
        str: The rendered text.

    Raises:
        SynthesisError: On a placeholder/value count mismatch or an unbindable value.
    """
    parts = template.split(PLACEHOLDER)
    if len(parts) - 1 != len(values):
      raise SynthesisError(f"Template expects {len(parts) - 1} values, got {len(values)}: {template!r}")
    rendered = [parts[0]]
    for value, part in zip(values, parts[1:]):
      rendered.append(self._bind(value))
      rendered.append(part)
    return "".join(rendered)

  def _bind(self, value: Any) -> str:
    if isinstance(value, Node):
      return value.print()[len(value.prefix) :]
    if isinstance(value, str):
      return value
    if isinstance(value, (list, tuple)):
      return ", ".join(self._bind(v) for v in value)
    raise SynthesisError(f"Cannot bind value of type {type(value).__name__}")

  def member(self, template: str, *values: Any, indent: str = "", prefix: str = "") -> Node:
    text = self.formatter.format_snippet(self.render(template, values), indent)
    return replace_prefix(self.frontend.parse_member(text), prefix)

  def statement(self, template: str, *values: Any, indent: str = "", prefix: str = "") -> StatementNode:
    text = self.formatter.format_snippet(self.render(template, values), indent)
    return replace_prefix(self.frontend.parse_statement(text), prefix)

  def annotation(self, template: str, *values: Any, prefix: str = "") -> AnnotationNode:
    return replace_prefix(self.frontend.parse_annotation(self.render(template, values)), prefix)
