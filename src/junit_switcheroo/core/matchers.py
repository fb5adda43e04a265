"""
Annotation Matching.

Annotations are matched by qualified type, not by spelling: ``@Test``,
``@org.junit.Test`` and ``@Parameterized.Parameters`` are resolved through
the unit's imports before being compared.

Patterns are written as signatures::

    @org.junit.Test
    @org.junit.runner.RunWith(org.junit.runners.Parameterized.class)

The second form additionally constrains the ``value`` argument to a class
literal of the given type.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from junit_switcheroo.core.tree import AnnotationNode, ImportNode, SourceUnit
from junit_switcheroo.enums import ExpressionKind

PARAMETERIZED_TYPE = "org.junit.runners.Parameterized"
EXPECTED_EXCEPTION_TYPE = "org.junit.rules.ExpectedException"

_SIGNATURE_RE = re.compile(r"^@([\w$.]+)(?:\(\s*([\w$.]+)\.class\s*\))?$")


class TypeResolver:
  """
  Resolves type names as written in a unit to qualified names.

  Resolution order: single-type import (including members nested in an
  imported type), an already qualified name, on-demand (wildcard) imports,
  then the unit's own package.
  """

  def __init__(self, imports: Sequence[ImportNode] = (), package: Optional[str] = None):
    self._explicit: Dict[str, str] = {}
    self._wildcards: List[str] = []
    self._package = package
    for imp in imports:
      if imp.static:
        continue
      if imp.wildcard:
        self._wildcards.append(imp.name)
      else:
        self._explicit[imp.simple_name] = imp.name

  @classmethod
  def for_unit(cls, unit: SourceUnit) -> "TypeResolver":
    return cls(unit.imports, unit.package)

  def candidates(self, name: str) -> List[str]:
    """
    Lists the qualified names a written type name may denote.

    Args:
        name: The name as written, e.g. ``Parameterized.Parameters``.

    Returns:
        List[str]: Candidates, most specific first.
    """
    head, _, rest = name.partition(".")
    if head in self._explicit:
      qualified = self._explicit[head]
      return [f"{qualified}.{rest}" if rest else qualified]

    found = []
    if rest:
      found.append(name)
    found.extend(f"{pkg}.{name}" for pkg in self._wildcards)
    if self._package:
      found.append(f"{self._package}.{name}")
    elif not rest:
      found.append(name)
    return found

  def resolves_to(self, name: str, qualified: str) -> bool:
    return qualified in self.candidates(name)


@dataclass(frozen=True)
class AnnotationPattern:
  """
  A parsed annotation signature.

  Attributes:
      type_name (str): Qualified annotation type.
      class_argument (Optional[str]): Qualified type required as the class
          literal ``value`` argument, if any.
  """

  type_name: str
  class_argument: Optional[str] = None

  @classmethod
  def parse(cls, signature: str) -> "AnnotationPattern":
    """
    Parses an annotation signature.

    Args:
        signature: e.g. ``@org.junit.runner.RunWith(org.junit.runners.Parameterized.class)``.

    Returns:
        AnnotationPattern: The parsed pattern.

    Raises:
        ValueError: If the signature is malformed.
    """
    match = _SIGNATURE_RE.match(signature.strip())
    if not match:
      raise ValueError(f"Invalid annotation signature: {signature!r}")
    return cls(match.group(1), match.group(2))

  @property
  def simple_name(self) -> str:
    return self.type_name.rsplit(".", 1)[-1]

  def matches(self, annotation: AnnotationNode, resolver: TypeResolver) -> bool:
    if not resolver.resolves_to(annotation.name, self.type_name):
      return False
    if self.class_argument is None:
      return True
    value = annotation.argument("value")
    if value is None or value.kind != ExpressionKind.CLASS:
      return False
    return resolver.resolves_to(value.value, self.class_argument)

  def __str__(self) -> str:
    if self.class_argument:
      return f"@{self.type_name}({self.class_argument}.class)"
    return f"@{self.type_name}"


class Marker(Enum):
  """The closed set of annotations the recipes recognize."""

  RUNNER = AnnotationPattern.parse(f"@org.junit.runner.RunWith({PARAMETERIZED_TYPE}.class)")
  TEST = AnnotationPattern.parse("@org.junit.Test")
  JUPITER_TEST = AnnotationPattern.parse("@org.junit.jupiter.api.Test")
  PARAMETERS = AnnotationPattern.parse(f"@{PARAMETERIZED_TYPE}.Parameters")
  PARAMETER = AnnotationPattern.parse(f"@{PARAMETERIZED_TYPE}.Parameter")
  RULE = AnnotationPattern.parse("@org.junit.Rule")
  CLASS_RULE = AnnotationPattern.parse("@org.junit.ClassRule")

  def matches(self, annotation: AnnotationNode, resolver: TypeResolver) -> bool:
    return self.value.matches(annotation, resolver)


def find_annotation(
  annotations: Iterable[AnnotationNode], resolver: TypeResolver, *markers: Marker
) -> Optional[AnnotationNode]:
  """
  Returns the first annotation matching any of the markers.

  Args:
      annotations: Annotations of one declaration.
      resolver: Resolver of the enclosing unit.
      *markers: Accepted markers.
  """
  for annotation in annotations:
    if any(marker.matches(annotation, resolver) for marker in markers):
      return annotation
  return None
