"""
Immutable Java Syntax Tree.

This module defines the node model the migration engine operates on. It is a
shallow, full-fidelity tree: only the declarations the recipes
need to reason about (imports, classes, annotations, fields, methods,
parameters, statements) are modelled structurally, everything else is kept
as verbatim text.

Fidelity Contract
-----------------
Every node owns the whitespace and comments that precede it (``prefix``) and
prints the exact text it was parsed from. Printing an unmodified tree yields
the original source byte for byte. Rewrites build new nodes through
``with_changes`` (structural sharing for untouched subtrees); nothing is ever
mutated in place.

Identity
--------
Each node carries a ``node_id`` assigned at construction. It survives
``with_changes`` and is excluded from equality, which makes it a stable key
for per-class accumulators such as the message bus.
"""

import dataclasses
import itertools
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Tuple, TypeVar, Union

from junit_switcheroo.enums import ExpressionKind

_ID_SEQUENCE = itertools.count(1)

TNode = TypeVar("TNode", bound="Node")


def _next_id() -> int:
  return next(_ID_SEQUENCE)


@dataclass(frozen=True, kw_only=True)
class Node:
  """
  Base class for all tree nodes.

  Attributes:
      prefix (str): Whitespace and comments preceding the node.
      node_id (int): Stable identifier, preserved across ``with_changes``.
  """

  prefix: str = ""
  node_id: int = field(default_factory=_next_id, compare=False, repr=False)

  def print(self) -> str:
    """
    Renders the node (including its prefix) back to source text.

    Returns:
        str: The source text.
    """
    raise NotImplementedError

  def with_changes(self: TNode, **changes: Any) -> TNode:
    """
    Returns a copy of the node with the given fields replaced.

    The ``node_id`` is carried over so the copy still identifies the same
    declaration.

    Args:
        **changes: Field values to replace.

    Returns:
        Node: The updated copy.
    """
    return dataclasses.replace(self, **changes)

  def children(self) -> Iterator["Node"]:
    """Yields direct child nodes in source order."""
    for f in dataclasses.fields(self):
      value = getattr(self, f.name)
      if isinstance(value, Node):
        yield value
      elif isinstance(value, tuple):
        for item in value:
          if isinstance(item, Node):
            yield item


@dataclass(frozen=True, kw_only=True)
class Expression(Node):
  """
  An expression kept as verbatim text plus a coarse classification.

  Attributes:
      text (str): Source text of the expression.
      kind (ExpressionKind): Syntactic category (literal, class literal, call...).
      value: Decoded literal value, class name for class literals or method
          name for invocations.
      references (frozenset): Identifiers mentioned by the expression.
  """

  text: str
  kind: ExpressionKind = ExpressionKind.OTHER
  value: Optional[Union[int, str]] = None
  references: frozenset = frozenset()

  def print(self) -> str:
    return self.prefix + self.text


@dataclass(frozen=True)
class AnnotationArgument:
  """A positional (``name is None``) or named annotation argument."""

  name: Optional[str]
  value: Expression


@dataclass(frozen=True)
class MethodCall:
  """
  Structural view of a statement of the form ``[target.]name(args...);``.

  Attributes:
      target (Optional[str]): Verbatim receiver text (``thrown``, ``this.thrown``).
      name (str): Invoked method name.
      arguments (Tuple[Expression, ...]): Call arguments in order.
  """

  target: Optional[str]
  name: str
  arguments: Tuple[Expression, ...] = ()


@dataclass(frozen=True, kw_only=True)
class AnnotationNode(Node):
  """
  A leading annotation such as ``@Parameters(name = "{index}")``.

  Attributes:
      text (str): Verbatim annotation text starting at ``@``.
      name (str): The type name as written (``Parameterized.Parameters``).
      arguments (Tuple[AnnotationArgument, ...]): Parsed arguments.
      references (frozenset): Identifiers used by the annotation.
  """

  text: str
  name: str
  arguments: Tuple[AnnotationArgument, ...] = ()
  references: frozenset = frozenset()

  @property
  def simple_name(self) -> str:
    return self.name.rsplit(".", 1)[-1]

  def argument(self, key: str = "value") -> Optional[Expression]:
    """
    Looks up an argument by name.

    A single positional argument is addressed as ``value``, mirroring Java
    annotation semantics.

    Args:
        key: Element name.

    Returns:
        Optional[Expression]: The argument expression, if present.
    """
    for arg in self.arguments:
      if arg.name == key or (arg.name is None and key == "value"):
        return arg.value
    return None

  def print(self) -> str:
    return self.prefix + self.text


@dataclass(frozen=True, kw_only=True)
class ImportNode(Node):
  """
  An import declaration.

  Attributes:
      text (str): Verbatim declaration text including the trailing ``;``.
      name (str): Imported name without ``.*`` (package or type for wildcards).
      static (bool): True for ``import static``.
      wildcard (bool): True for on-demand imports.
  """

  text: str
  name: str
  static: bool = False
  wildcard: bool = False

  @property
  def simple_name(self) -> str:
    return self.name.rsplit(".", 1)[-1]

  def print(self) -> str:
    return self.prefix + self.text


@dataclass(frozen=True, kw_only=True)
class RawNode(Node):
  """Any declaration or statement the engine does not model structurally."""

  text: str
  references: frozenset = frozenset()

  def print(self) -> str:
    return self.prefix + self.text


@dataclass(frozen=True, kw_only=True)
class StatementNode(Node):
  """
  A statement inside a method body.

  Attributes:
      text (str): Verbatim statement text.
      call (Optional[MethodCall]): Structural view when the statement is a
          bare method invocation.
      references (frozenset): Identifiers mentioned by the statement.
  """

  text: str
  call: Optional[MethodCall] = None
  references: frozenset = frozenset()

  def print(self) -> str:
    return self.prefix + self.text


@dataclass(frozen=True, kw_only=True)
class BlockNode(Node):
  """A ``{ ... }`` body. ``end`` is the text between the last statement and ``}``."""

  statements: Tuple[Node, ...] = ()
  end: str = ""

  def print(self) -> str:
    return self.prefix + "{" + "".join(s.print() for s in self.statements) + self.end + "}"


@dataclass(frozen=True, kw_only=True)
class ParameterNode(Node):
  """
  A formal parameter.

  Attributes:
      text (str): Verbatim parameter text (modifiers, type, name).
      type (str): Declared type text.
      name (str): Parameter name.
      suffix (str): Whitespace between the parameter and the next ``,`` or ``)``.
  """

  text: str
  type: str
  name: str
  suffix: str = ""
  references: frozenset = frozenset()

  def print(self) -> str:
    return self.prefix + self.text + self.suffix


@dataclass(frozen=True, kw_only=True)
class FieldNode(Node):
  """
  A field declaration.

  Attributes:
      annotations: Leading annotations.
      decl_prefix (str): Whitespace between the last annotation and the rest.
      text (str): Verbatim remainder (modifiers, type, declarators, ``;``).
      type (str): Declared type text.
      name (str): Name of the first declared variable.
      modifiers (Tuple[str, ...]): Modifier keywords.
      declarator_count (int): Number of variables declared.
  """

  annotations: Tuple[AnnotationNode, ...] = ()
  decl_prefix: str = ""
  text: str
  type: str
  name: str
  modifiers: Tuple[str, ...] = ()
  declarator_count: int = 1
  references: frozenset = frozenset()

  def print(self) -> str:
    return self.prefix + "".join(a.print() for a in self.annotations) + self.decl_prefix + self.text


@dataclass(frozen=True, kw_only=True)
class MethodNode(Node):
  """
  A method or constructor declaration.

  Attributes:
      annotations: Leading annotations.
      decl_prefix (str): Whitespace between the last annotation and the header.
      modifiers (str): Verbatim header text before the return type (or before
          the name for constructors), trailing whitespace included.
      return_type (Optional[str]): Return type text; None for constructors.
      type_space (str): Whitespace between return type and name.
      name (str): Method name.
      name_space (str): Whitespace between the name and ``(``.
      parameters: Formal parameters.
      params_space (str): Text between the parentheses of an empty list.
      throws (str): Verbatim text between ``)`` and the body.
      body (Optional[BlockNode]): Method body; None for abstract methods.
  """

  annotations: Tuple[AnnotationNode, ...] = ()
  decl_prefix: str = ""
  modifiers: str = ""
  return_type: Optional[str] = None
  type_space: str = " "
  name: str
  name_space: str = ""
  parameters: Tuple[ParameterNode, ...] = ()
  params_space: str = ""
  throws: str = ""
  body: Optional[BlockNode] = None
  references: frozenset = frozenset()

  @property
  def is_constructor(self) -> bool:
    return self.return_type is None

  def print(self) -> str:
    parts = ["".join(a.print() for a in self.annotations), self.decl_prefix, self.modifiers]
    if self.return_type is not None:
      parts.append(self.return_type + self.type_space)
    params = ",".join(p.print() for p in self.parameters) if self.parameters else self.params_space
    parts.append(f"{self.name}{self.name_space}({params}){self.throws}")
    if self.body is not None:
      parts.append(self.body.print())
    return self.prefix + "".join(parts)


@dataclass(frozen=True, kw_only=True)
class ClassNode(Node):
  """
  A class declaration.

  Attributes:
      annotations: Leading annotations.
      decl_prefix (str): Whitespace between the last annotation and the header.
      decl (str): Verbatim header text up to and including ``{``.
      name (str): Simple class name.
      members: Member declarations in source order.
      end (str): Text between the last member and the closing ``}``.
  """

  annotations: Tuple[AnnotationNode, ...] = ()
  decl_prefix: str = ""
  decl: str
  name: str
  members: Tuple[Node, ...] = ()
  end: str = ""
  references: frozenset = frozenset()

  def print(self) -> str:
    return (
      self.prefix
      + "".join(a.print() for a in self.annotations)
      + self.decl_prefix
      + self.decl
      + "".join(m.print() for m in self.members)
      + self.end
      + "}"
    )


@dataclass(frozen=True, kw_only=True)
class SourceUnit(Node):
  """
  The root of one compilation unit.

  Attributes:
      members: Top level nodes (package as ``RawNode``, imports, types).
      eof (str): Trailing whitespace and comments.
      path (Optional[str]): Origin of the source, informational only.
  """

  members: Tuple[Node, ...] = ()
  eof: str = ""
  path: Optional[str] = field(default=None, compare=False)

  @property
  def imports(self) -> Tuple[ImportNode, ...]:
    return tuple(m for m in self.members if isinstance(m, ImportNode))

  @property
  def package(self) -> Optional[str]:
    for member in self.members:
      if isinstance(member, RawNode) and member.text.startswith("package"):
        return member.text[len("package") :].strip().rstrip(";").strip()
    return None

  def print(self) -> str:
    return self.prefix + "".join(m.print() for m in self.members) + self.eof


def walk(node: Node) -> Iterator[Node]:
  """
  Yields ``node`` and all of its descendants in pre-order.

  Args:
      node: Root of the traversal.
  """
  yield node
  for child in node.children():
    yield from walk(child)


def replace_prefix(node: TNode, prefix: str) -> TNode:
  """Returns ``node`` with a new prefix, or ``node`` itself when unchanged."""
  if node.prefix == prefix:
    return node
  return node.with_changes(prefix=prefix)


def remove_member(members: list, index: int) -> Node:
  """
  Removes ``members[index]`` in place and repairs the layout.

  At the head of a sequence the next member inherits the removed prefix;
  elsewhere the next member keeps whichever of the two prefixes holds more
  line breaks, so blank-line separators survive.

  Args:
      members: A mutable list of sibling nodes.
      index: Position to remove.

  Returns:
      Node: The removed node.
  """
  removed = members.pop(index)
  if index < len(members):
    following = members[index]
    if index == 0 or removed.prefix.count("\n") > following.prefix.count("\n"):
      members[index] = replace_prefix(following, removed.prefix)
  return removed


def remove_annotation(decl: TNode, annotation: AnnotationNode) -> TNode:
  """
  Drops one leading annotation from a declaration.

  The element after the annotation (the next annotation, or the declaration
  header) inherits the annotation's prefix.

  Args:
      decl: A class, method or field node.
      annotation: One of ``decl.annotations``.

  Returns:
      The updated declaration.
  """
  annotations = list(decl.annotations)
  index = next(i for i, a in enumerate(annotations) if a.node_id == annotation.node_id)
  removed = annotations.pop(index)
  if index < len(annotations):
    annotations[index] = replace_prefix(annotations[index], removed.prefix)
    return decl.with_changes(annotations=tuple(annotations))
  return decl.with_changes(annotations=tuple(annotations), decl_prefix=removed.prefix)
