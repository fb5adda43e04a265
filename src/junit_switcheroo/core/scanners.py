"""
Usage Scanners.

Read-only queries over a ``SourceUnit``: which identifiers are referenced,
and whether a unit uses a given type at all. Recipes use ``uses_type`` as a
cheap pre-check before running their passes.
"""

from typing import FrozenSet, Iterable

from junit_switcheroo.core.tree import AnnotationNode, FieldNode, ImportNode, Node, SourceUnit, walk


def collect_references(node: Node) -> FrozenSet[str]:
  """
  Unions the ``references`` of ``node`` and all of its descendants.

  Args:
      node: Root of the subtree.

  Returns:
      FrozenSet[str]: Identifiers mentioned anywhere in the subtree.
  """
  found = set()
  for current in walk(node):
    found.update(getattr(current, "references", ()))
  return frozenset(found)


def unit_references(unit: SourceUnit, exclude: Iterable[Node] = ()) -> FrozenSet[str]:
  """
  Identifiers referenced by the unit outside of its import declarations.

  Args:
      unit: The compilation unit.
      exclude: Top-level members to ignore.
  """
  skipped = {id(n) for n in exclude}
  found = set()
  for member in unit.members:
    if isinstance(member, ImportNode) or id(member) in skipped:
      continue
    found.update(collect_references(member))
  return frozenset(found)


def uses_type(unit: SourceUnit, qualified_name: str) -> bool:
  """
  Detects whether a unit uses a type.

  True if an import names the type (or a member nested in it), if a wildcard
  import covers its package and the simple name is referenced, or if the
  qualified name is written out in an annotation or field type.

  Args:
      unit: The compilation unit.
      qualified_name: e.g. ``org.junit.runners.Parameterized``.
  """
  package, _, simple = qualified_name.rpartition(".")
  nested_prefix = qualified_name + "."

  for imp in unit.imports:
    if imp.name == qualified_name or imp.name.startswith(nested_prefix):
      return True

  if any(imp.wildcard and not imp.static and imp.name == package for imp in unit.imports):
    if simple in unit_references(unit):
      return True

  for node in walk(unit):
    if isinstance(node, AnnotationNode) and qualified_name in node.text:
      return True
    if isinstance(node, FieldNode) and node.type.startswith(qualified_name):
      return True
  return False
