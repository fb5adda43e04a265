"""
Java front end using tree-sitter.

Walks the tree-sitter concrete syntax tree and builds the immutable
``junit_switcheroo.core.tree`` model. The conversion is loss-free: every
byte of the input lands in exactly one node's prefix or text, so printing an
unmodified ``SourceUnit`` reproduces the source.

Modelled structurally:
- Import declarations -> ``ImportNode``
- Class declarations (top level and nested) -> ``ClassNode``
- Leading annotations -> ``AnnotationNode`` with parsed arguments
- Fields, methods, constructors, parameters, method bodies
- Bare method-invocation statements (``MethodCall`` view)

Everything else (package declaration, interfaces, enums, initializer blocks,
arbitrary statements) is kept as verbatim text.
"""

import logging
import re
from typing import Iterator, List, Optional, Tuple

import tree_sitter
import tree_sitter_java

from junit_switcheroo.core.errors import JavaSyntaxError, SynthesisError
from junit_switcheroo.core.tree import (
  AnnotationArgument,
  AnnotationNode,
  BlockNode,
  ClassNode,
  Expression,
  FieldNode,
  ImportNode,
  MethodCall,
  MethodNode,
  Node,
  ParameterNode,
  RawNode,
  SourceUnit,
  StatementNode,
)
from junit_switcheroo.enums import ExpressionKind

logger = logging.getLogger(__name__)

_JAVA_LANGUAGE = tree_sitter.Language(tree_sitter_java.language())

COMMENT_TYPES = frozenset({"line_comment", "block_comment", "comment"})
ANNOTATION_TYPES = frozenset({"marker_annotation", "annotation"})
REFERENCE_TYPES = frozenset({"identifier", "type_identifier"})
PARAMETER_TYPES = frozenset({"formal_parameter", "spread_parameter", "receiver_parameter"})

# Wrappers used to parse synthesized snippets in a valid context.
_SNIPPET_CLASS = "__Synthesized__"
_SNIPPET_METHOD = "__synthesized__"


def _split_leading_ws(text: str) -> Tuple[str, str]:
  stripped = text.lstrip()
  return text[: len(text) - len(stripped)], stripped


class JavaFrontend:
  """
  tree-sitter based Java parser producing ``SourceUnit`` trees.

  Also parses small snippets (a class member, a statement, an annotation)
  on behalf of the ``Synthesizer``.
  """

  def __init__(self) -> None:
    self._parser = tree_sitter.Parser(_JAVA_LANGUAGE)

  def parse(self, text: str, path: Optional[str] = None) -> SourceUnit:
    """
    Parses a compilation unit.

    Args:
        text: Java source code.
        path: Optional origin, stored on the unit for reporting.

    Returns:
        SourceUnit: The full-fidelity tree.

    Raises:
        JavaSyntaxError: If tree-sitter reports an error or missing node.
    """
    source = text.encode("utf-8")
    tree = self._parser.parse(source)
    root = tree.root_node
    if root.has_error:
      line, column = _first_error_position(root)
      raise JavaSyntaxError("Invalid Java source", line, column)
    return _TreeBuilder(source).unit(root, path)

  def parse_member(self, snippet: str) -> Node:
    """
    Parses a single class member declaration.

    Raises:
        SynthesisError: If the snippet is invalid or declares more than one member.
    """
    cls = self._parse_snippet_class(f"class {_SNIPPET_CLASS} {{\n{snippet}\n}}\n")
    if len(cls.members) != 1:
      raise SynthesisError(f"Expected exactly one member, got {len(cls.members)}: {snippet!r}")
    return cls.members[0]

  def parse_statement(self, snippet: str) -> StatementNode:
    """
    Parses a single statement.

    Raises:
        SynthesisError: If the snippet is invalid or holds more than one statement.
    """
    cls = self._parse_snippet_class(f"class {_SNIPPET_CLASS} {{\nvoid {_SNIPPET_METHOD}() {{\n{snippet}\n}}\n}}\n")
    method = cls.members[0]
    statements = method.body.statements if isinstance(method, MethodNode) and method.body else ()
    if len(statements) != 1 or not isinstance(statements[0], StatementNode):
      raise SynthesisError(f"Expected exactly one statement, got {len(statements)}: {snippet!r}")
    return statements[0]

  def parse_annotation(self, snippet: str) -> AnnotationNode:
    """
    Parses a single annotation.

    Raises:
        SynthesisError: If the snippet is not exactly one annotation.
    """
    cls = self._parse_snippet_class(f"class {_SNIPPET_CLASS} {{\n{snippet}\nvoid {_SNIPPET_METHOD}() {{}}\n}}\n")
    method = cls.members[0] if len(cls.members) == 1 else None
    if not isinstance(method, MethodNode) or len(method.annotations) != 1:
      raise SynthesisError(f"Expected exactly one annotation: {snippet!r}")
    return method.annotations[0]

  def _parse_snippet_class(self, wrapped: str) -> ClassNode:
    try:
      unit = self.parse(wrapped)
    except JavaSyntaxError as e:
      raise SynthesisError(f"Template does not parse: {e}\n{wrapped}") from e
    classes = [m for m in unit.members if isinstance(m, ClassNode)]
    if len(classes) != 1:
      raise SynthesisError(f"Template does not parse to a single declaration:\n{wrapped}")
    return classes[0]


def _first_error_position(root: tree_sitter.Node) -> Tuple[int, int]:
  stack = [root]
  while stack:
    node = stack.pop()
    if node.type == "ERROR" or node.is_missing:
      return node.start_point.row + 1, node.start_point.column + 1
    stack.extend(reversed(node.children))
  return 0, 0


class _TreeBuilder:
  """
  Converts one tree-sitter tree into model nodes.

  Every ``prefix`` is the exact byte slice between the previous sibling (or
  the opening token) and the node, which is what makes printing lossless.
  """

  def __init__(self, source: bytes) -> None:
    self.source = source

  # =========================================================================
  # Text helpers
  # =========================================================================

  def slice(self, start: int, end: int) -> str:
    return self.source[start:end].decode("utf-8")

  def text(self, node: tree_sitter.Node) -> str:
    return self.slice(node.start_byte, node.end_byte)

  def references(self, node: tree_sitter.Node, skip: Tuple[str, ...] = ()) -> frozenset:
    """Collects identifier and type identifier texts below ``node``."""
    found = set()
    stack = [node]
    while stack:
      current = stack.pop()
      if current.type in REFERENCE_TYPES:
        found.add(self.text(current))
        continue
      stack.extend(c for c in current.children if c.type not in skip)
    return frozenset(found)

  @staticmethod
  def _child_of_type(node: tree_sitter.Node, type_name: str) -> Optional[tree_sitter.Node]:
    for child in node.children:
      if child.type == type_name:
        return child
    return None

  @staticmethod
  def _inner_children(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Children of a braced node without the braces and comments."""
    for child in node.children:
      if child.type in ("{", "}") or child.type in COMMENT_TYPES:
        continue
      yield child

  # =========================================================================
  # Compilation unit
  # =========================================================================

  def unit(self, root: tree_sitter.Node, path: Optional[str]) -> SourceUnit:
    members: List[Node] = []
    cursor = 0
    for child in root.children:
      if child.type in COMMENT_TYPES:
        continue
      prefix = self.slice(cursor, child.start_byte)
      if child.type == "import_declaration":
        members.append(self.import_decl(child, prefix))
      elif child.type == "class_declaration":
        members.append(self.class_decl(child, prefix))
      else:
        members.append(RawNode(prefix=prefix, text=self.text(child), references=self.references(child)))
      cursor = child.end_byte
    return SourceUnit(members=tuple(members), eof=self.slice(cursor, len(self.source)), path=path)

  def import_decl(self, node: tree_sitter.Node, prefix: str) -> ImportNode:
    name_node = next(c for c in node.named_children if c.type in ("scoped_identifier", "identifier"))
    return ImportNode(
      prefix=prefix,
      text=self.text(node),
      name=re.sub(r"\s+", "", self.text(name_node)),
      static=any(c.type == "static" for c in node.children),
      wildcard=any(c.type == "asterisk" for c in node.children),
    )

  # =========================================================================
  # Declarations
  # =========================================================================

  def leading_annotations(self, node: tree_sitter.Node) -> Tuple[Tuple[AnnotationNode, ...], int]:
    """
    Extracts annotations preceding every modifier keyword.

    Returns:
        Tuple: The annotations and the byte offset right after the last one
        (the node start when there are none).
    """
    pos = node.start_byte
    annotations = []
    modifiers = self._child_of_type(node, "modifiers")
    if modifiers is not None:
      for child in modifiers.children:
        if child.type in COMMENT_TYPES:
          continue
        if child.type not in ANNOTATION_TYPES:
          break
        annotations.append(self.annotation(child, self.slice(pos, child.start_byte)))
        pos = child.end_byte
    return tuple(annotations), pos

  def annotation(self, node: tree_sitter.Node, prefix: str) -> AnnotationNode:
    name_node = node.child_by_field_name("name")
    arguments = []
    args = node.child_by_field_name("arguments")
    if args is not None:
      for child in args.named_children:
        if child.type in COMMENT_TYPES:
          continue
        if child.type == "element_value_pair":
          key = child.child_by_field_name("key")
          value = child.child_by_field_name("value")
          arguments.append(AnnotationArgument(self.text(key), self.expression(value)))
        else:
          arguments.append(AnnotationArgument(None, self.expression(child)))
    return AnnotationNode(
      prefix=prefix,
      text=self.text(node),
      name=re.sub(r"\s+", "", self.text(name_node)),
      arguments=tuple(arguments),
      references=self.references(node),
    )

  def class_decl(self, node: tree_sitter.Node, prefix: str) -> ClassNode:
    annotations, pos = self.leading_annotations(node)
    body = node.child_by_field_name("body")
    decl_prefix, decl = _split_leading_ws(self.slice(pos, body.start_byte + 1))

    members: List[Node] = []
    cursor = body.start_byte + 1
    for child in self._inner_children(body):
      members.append(self.member(child, self.slice(cursor, child.start_byte)))
      cursor = child.end_byte

    return ClassNode(
      prefix=prefix,
      annotations=annotations,
      decl_prefix=decl_prefix,
      decl=decl,
      name=self.text(node.child_by_field_name("name")),
      members=tuple(members),
      end=self.slice(cursor, body.end_byte - 1),
      references=self.references(node, skip=("modifiers", "class_body")),
    )

  def member(self, node: tree_sitter.Node, prefix: str) -> Node:
    if node.type == "field_declaration":
      return self.field_decl(node, prefix)
    if node.type in ("method_declaration", "constructor_declaration"):
      return self.method_decl(node, prefix)
    if node.type == "class_declaration":
      return self.class_decl(node, prefix)
    return RawNode(prefix=prefix, text=self.text(node), references=self.references(node))

  def field_decl(self, node: tree_sitter.Node, prefix: str) -> FieldNode:
    annotations, pos = self.leading_annotations(node)
    decl_prefix, text = _split_leading_ws(self.slice(pos, node.end_byte))
    declarators = [c for c in node.children if c.type == "variable_declarator"]
    modifiers = self._child_of_type(node, "modifiers")
    keywords = ()
    if modifiers is not None:
      keywords = tuple(
        self.text(c) for c in modifiers.children if c.type not in ANNOTATION_TYPES and c.type not in COMMENT_TYPES
      )
    return FieldNode(
      prefix=prefix,
      annotations=annotations,
      decl_prefix=decl_prefix,
      text=text,
      type=self.text(node.child_by_field_name("type")),
      name=self.text(declarators[0].child_by_field_name("name")),
      modifiers=keywords,
      declarator_count=len(declarators),
      references=self.references(node, skip=("modifiers",)),
    )

  def method_decl(self, node: tree_sitter.Node, prefix: str) -> MethodNode:
    annotations, pos = self.leading_annotations(node)
    name_node = node.child_by_field_name("name")
    params_node = node.child_by_field_name("parameters")
    body_node = node.child_by_field_name("body")

    if node.type == "constructor_declaration":
      return_type = None
      type_space = " "
      header_end = name_node.start_byte
    else:
      type_node = node.child_by_field_name("type")
      return_type = self.text(type_node)
      type_space = self.slice(type_node.end_byte, name_node.start_byte)
      header_end = type_node.start_byte

    decl_prefix, modifiers = _split_leading_ws(self.slice(pos, header_end))
    parameters = self.parameters(params_node)
    tail_end = body_node.start_byte if body_node is not None else node.end_byte

    return MethodNode(
      prefix=prefix,
      annotations=annotations,
      decl_prefix=decl_prefix,
      modifiers=modifiers,
      return_type=return_type,
      type_space=type_space,
      name=self.text(name_node),
      name_space=self.slice(name_node.end_byte, params_node.start_byte),
      parameters=parameters,
      params_space="" if parameters else self.slice(params_node.start_byte + 1, params_node.end_byte - 1),
      throws=self.slice(params_node.end_byte, tail_end),
      body=self.block(body_node) if body_node is not None else None,
      references=self.references(node, skip=("modifiers", "block", "constructor_body")),
    )

  def parameters(self, node: tree_sitter.Node) -> Tuple[ParameterNode, ...]:
    params = []
    children = node.children
    cursor = node.start_byte + 1
    for index, child in enumerate(children):
      if child.type == ",":
        cursor = child.end_byte
        continue
      if child.type not in PARAMETER_TYPES:
        continue
      closer = next(c for c in children[index + 1 :] if c.type in (",", ")"))
      params.append(
        ParameterNode(
          prefix=self.slice(cursor, child.start_byte),
          text=self.text(child),
          type=self._parameter_type(child),
          name=self._parameter_name(child),
          suffix=self.slice(child.end_byte, closer.start_byte),
          references=self.references(child),
        )
      )
    return tuple(params)

  def _parameter_type(self, node: tree_sitter.Node) -> str:
    type_node = node.child_by_field_name("type")
    if type_node is None:
      type_node = next((c for c in node.named_children if c.type not in ("modifiers", "variable_declarator")), node)
    return self.text(type_node)

  def _parameter_name(self, node: tree_sitter.Node) -> str:
    name_node = node.child_by_field_name("name")
    if name_node is None:
      declarator = self._child_of_type(node, "variable_declarator")
      if declarator is not None:
        name_node = declarator.child_by_field_name("name")
    if name_node is None:
      return self.text(node).split()[-1]
    return self.text(name_node)

  # =========================================================================
  # Bodies
  # =========================================================================

  def block(self, node: tree_sitter.Node) -> BlockNode:
    statements = []
    cursor = node.start_byte + 1
    for child in self._inner_children(node):
      statements.append(self.statement(child, self.slice(cursor, child.start_byte)))
      cursor = child.end_byte
    return BlockNode(statements=tuple(statements), end=self.slice(cursor, node.end_byte - 1))

  def statement(self, node: tree_sitter.Node, prefix: str) -> StatementNode:
    call = None
    if node.type == "expression_statement":
      expr = next((c for c in node.named_children if c.type not in COMMENT_TYPES), None)
      if expr is not None and expr.type == "method_invocation":
        call = self.method_call(expr)
    return StatementNode(prefix=prefix, text=self.text(node), call=call, references=self.references(node))

  def method_call(self, node: tree_sitter.Node) -> MethodCall:
    target = node.child_by_field_name("object")
    args = node.child_by_field_name("arguments")
    arguments = ()
    if args is not None:
      arguments = tuple(self.expression(a) for a in args.named_children if a.type not in COMMENT_TYPES)
    return MethodCall(
      target=self.text(target) if target is not None else None,
      name=self.text(node.child_by_field_name("name")),
      arguments=arguments,
    )

  def expression(self, node: tree_sitter.Node) -> Expression:
    kind = ExpressionKind.OTHER
    value = None
    text = self.text(node)
    node_type = node.type

    if node_type.endswith("integer_literal"):
      kind, value = ExpressionKind.INT, _int_literal(node_type, text)
      if value is None:
        kind = ExpressionKind.OTHER
    elif node_type == "string_literal":
      kind = ExpressionKind.STRING
      value = text[3:-3] if text.startswith('"""') else text[1:-1]
    elif node_type == "class_literal":
      kind, value = ExpressionKind.CLASS, self.text(node.named_children[0])
    elif node_type == "method_invocation":
      kind, value = ExpressionKind.CALL, self.text(node.child_by_field_name("name"))
    elif node_type == "object_creation_expression":
      kind = ExpressionKind.NEW
    elif node_type in ("identifier", "field_access", "scoped_identifier"):
      kind = ExpressionKind.NAME
    elif node_type == "binary_expression" and any(c.type == "+" for c in node.children):
      kind = ExpressionKind.CONCAT

    return Expression(text=text, kind=kind, value=value, references=self.references(node))


def _int_literal(node_type: str, text: str) -> Optional[int]:
  clean = text.rstrip("lL").replace("_", "")
  try:
    if node_type == "octal_integer_literal":
      return int(clean, 8)
    if node_type == "decimal_integer_literal":
      return int(clean)
    return int(clean, 0)
  except ValueError:
    logger.debug("Unparseable integer literal %r", text)
    return None
