"""
Tree traversal.

Two traversal bases modelled on the libcst visitor protocol:

- ``TreeVisitor``: read-only walk. ``visit_<NodeType>(node)`` is called on the
  way down (returning ``False`` skips the children) and
  ``leave_<NodeType>(node)`` on the way up, so leave hooks see the subtree
  bottom-up.
- ``TreeTransformer``: rebuilding walk. ``leave_<NodeType>(original, updated)``
  returns the replacement node or ``REMOVE`` to drop it from its parent.

Both keep a cursor of ancestors, which replaces parent pointers in the
immutable tree.
"""

import dataclasses
from typing import List, Optional, Tuple, Type, TypeVar, Union

from junit_switcheroo.core.tree import Node

TNode = TypeVar("TNode", bound=Node)


class _RemovalSentinel:
  def __repr__(self) -> str:
    return "REMOVE"


REMOVE = _RemovalSentinel()


class _Cursor:
  """Ancestor stack shared by both traversal styles."""

  def __init__(self) -> None:
    self._ancestors: List[Node] = []

  @property
  def ancestors(self) -> Tuple[Node, ...]:
    """Ancestors of the node being visited, outermost first."""
    return tuple(self._ancestors)

  def nearest(self, node_type: Type[TNode]) -> Optional[TNode]:
    """
    Finds the closest enclosing node of a given type.

    Args:
        node_type: The node class to look for.

    Returns:
        The innermost matching ancestor, or None.
    """
    for ancestor in reversed(self._ancestors):
      if isinstance(ancestor, node_type):
        return ancestor
    return None


class TreeVisitor(_Cursor):
  """Read-only traversal with visit/leave hooks."""

  def walk(self, node: Node) -> None:
    type_name = type(node).__name__
    visit = getattr(self, f"visit_{type_name}", None)
    descend = visit(node) if visit is not None else True

    if descend is not False:
      self._ancestors.append(node)
      try:
        for child in node.children():
          self.walk(child)
      finally:
        self._ancestors.pop()

    leave = getattr(self, f"leave_{type_name}", None)
    if leave is not None:
      leave(node)


class TreeTransformer(_Cursor):
  """
  Rebuilding traversal.

  Untouched subtrees are returned as the same objects, so callers can
  detect "no change" with an identity check.
  """

  def transform(self, node: Node) -> Union[Node, _RemovalSentinel]:
    type_name = type(node).__name__
    visit = getattr(self, f"visit_{type_name}", None)
    descend = visit(node) if visit is not None else True

    updated = node
    if descend is not False:
      self._ancestors.append(node)
      try:
        updated = self._transform_children(node)
      finally:
        self._ancestors.pop()

    leave = getattr(self, f"leave_{type_name}", None)
    if leave is not None:
      return leave(node, updated)
    return updated

  def _transform_children(self, node: Node) -> Node:
    changes = {}
    for f in dataclasses.fields(node):
      value = getattr(node, f.name)
      if isinstance(value, Node):
        new_value = self.transform(value)
        if new_value is REMOVE:
          raise ValueError(f"Cannot remove required child '{f.name}' of {type(node).__name__}")
        if new_value is not value:
          changes[f.name] = new_value
      elif isinstance(value, tuple) and any(isinstance(item, Node) for item in value):
        items = []
        changed = False
        for item in value:
          new_item = self.transform(item) if isinstance(item, Node) else item
          if new_item is not item:
            changed = True
          if new_item is not REMOVE:
            items.append(new_item)
        if changed:
          changes[f.name] = tuple(items)
    return node.with_changes(**changes) if changes else node
