"""
Indentation-aware formatting of synthesized code.

Templates are written at column zero with the unit's indentation for
nesting. Before a snippet is parsed it is shifted to the column of its
insertion point; statements moved into a lambda body are re-based from their
old column to one indentation unit inside the lambda.
"""

import re
from typing import Optional, Sequence

from junit_switcheroo.core.tree import ClassNode, MethodNode, Node, SourceUnit

DEFAULT_INDENT = "    "

_NON_EMPTY_LINE = re.compile(r"\n(?=[^\n])")


def indentation(prefix: str) -> str:
  """Leading whitespace of the last line of ``prefix``."""
  last_line = prefix.rsplit("\n", 1)[-1]
  return last_line[: len(last_line) - len(last_line.lstrip(" \t"))]


def reindent(text: str, indent: str) -> str:
  """Prepends ``indent`` to every non-empty line after the first."""
  if not indent:
    return text
  return _NON_EMPTY_LINE.sub("\n" + indent, text)


def rebase(text: str, old: str, new: str) -> str:
  """Moves lines indented by ``old`` to be indented by ``new`` instead."""
  if not old:
    return reindent(text, new)
  return text.replace("\n" + old, "\n" + new)


def detect_indent(unit: SourceUnit) -> str:
  """
  Infers the indentation unit of a compilation unit.

  Looks at the first class member (relative to its class) and then at the
  first method statement (relative to its method).

  Args:
      unit: The compilation unit.

  Returns:
      str: The detected unit, or four spaces.
  """
  for cls in (m for m in unit.members if isinstance(m, ClassNode)):
    class_indent = indentation(cls.decl_prefix if cls.annotations else cls.prefix)
    for member in cls.members:
      member_indent = indentation(member.prefix)
      if len(member_indent) > len(class_indent) and member_indent.startswith(class_indent):
        return member_indent[len(class_indent) :]
      if isinstance(member, MethodNode) and member.body and member.body.statements:
        stmt_indent = indentation(member.body.statements[0].prefix)
        if len(stmt_indent) > len(member_indent) and stmt_indent.startswith(member_indent):
          return stmt_indent[len(member_indent) :]
  return DEFAULT_INDENT


class AutoFormatter:
  """
  Computes insertion columns and shifts snippets to them.

  Attributes:
      unit (str): The indentation unit (e.g. four spaces or a tab).
  """

  def __init__(self, unit: str = DEFAULT_INDENT):
    self.unit = unit

  @classmethod
  def for_unit(cls, source: SourceUnit, override: Optional[str] = None) -> "AutoFormatter":
    return cls(override or detect_indent(source))

  def member_indent(self, cls: ClassNode) -> str:
    """Column of the members of ``cls``."""
    if cls.members:
      return indentation(cls.members[0].prefix)
    return indentation(cls.decl_prefix if cls.annotations else cls.prefix) + self.unit

  def statement_indent(self, method: MethodNode, member_indent: str) -> str:
    """Column of the statements of ``method``, one unit inside it for empty or one-line bodies."""
    if method.body is not None and method.body.statements and "\n" in method.body.statements[0].prefix:
      return indentation(method.body.statements[0].prefix)
    return member_indent + self.unit

  def format_snippet(self, text: str, indent: str) -> str:
    """Shifts a column-zero snippet to ``indent``."""
    return reindent(text, indent)

  def lambda_body(self, statements: Sequence[Node], statement_indent: str) -> str:
    """
    Renders statements as the body of a column-zero lambda block.

    Args:
        statements: Statements moved into the lambda, prefixes included.
        statement_indent: Their current column.

    Returns:
        str: Body text, each line indented by one unit, starting with a newline.
    """
    body = "".join(rebase(s.print(), statement_indent, self.unit) for s in statements)
    return re.sub(r"^\n+", "\n", body)
