"""
Facts gathered about one ``@RunWith(Parameterized.class)`` candidate class.

The collector publishes into a ``MessageBus`` keyed by the enclosing class's
``node_id``. An entry is created on first publish and polled exactly once
when the collector leaves the class.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from junit_switcheroo.core.tree import AnnotationNode, ClassNode, FieldNode, MethodNode, ParameterNode
from junit_switcheroo.enums import InjectionMode


@dataclass(frozen=True)
class ParameterSpec:
  """
  One parameter of the synthesized initializer.

  Attributes:
      position (int): Index in the factory's argument arrays.
      type (str): Declared type text.
      name (str): Parameter (and field) name.
      node (ParameterNode): Bare parameter node, no prefix or modifiers.
  """

  position: int
  type: str
  name: str
  node: ParameterNode


@dataclass
class MigrationFacts:
  """
  Mutable per-class accumulator.

  Attributes:
      class_name (str): Simple name of the class.
      factory_name (Optional[str]): Name of the first ``@Parameters`` method.
      factory_annotation (Optional[AnnotationNode]): Its ``@Parameters`` annotation.
      constructor (Optional[MethodNode]): The single constructor, if any.
      constructor_count (int): Number of constructors seen.
      field_parameters (Dict[int, FieldNode]): ``@Parameter`` fields by position.
      conflicts (List[str]): Ignored duplicates (extra factory methods).
      rejections (List[str]): Reasons the class cannot be migrated.
      malformed (List[str]): Structural violations of recognized patterns.
  """

  class_name: str
  factory_name: Optional[str] = None
  factory_annotation: Optional[AnnotationNode] = None
  constructor: Optional[MethodNode] = None
  constructor_count: int = 0
  field_parameters: Dict[int, FieldNode] = field(default_factory=dict)
  conflicts: List[str] = field(default_factory=list)
  rejections: List[str] = field(default_factory=list)
  malformed: List[str] = field(default_factory=list)

  @property
  def injection_mode(self) -> InjectionMode:
    if self.constructor is not None and self.constructor.parameters:
      return InjectionMode.CONSTRUCTOR
    if self.field_parameters:
      return InjectionMode.FIELD
    return InjectionMode.NONE

  @property
  def constructor_parameters(self) -> Tuple[ParameterNode, ...]:
    return self.constructor.parameters if self.constructor is not None else ()

  def record_factory(self, method: MethodNode, annotation: AnnotationNode) -> None:
    if self.factory_name is not None:
      self.conflicts.append(f"ignoring extra @Parameters method '{method.name}', using '{self.factory_name}'")
      return
    self.factory_name = method.name
    self.factory_annotation = annotation

  def record_constructor(self, method: MethodNode, delegating: bool) -> None:
    self.constructor_count += 1
    if self.constructor_count > 1:
      self.rejections.append("more than one constructor")
      return
    if delegating:
      self.rejections.append("constructor delegates via this(...) or super(...)")
    self.constructor = method

  def record_field(self, position: int, node: FieldNode) -> None:
    existing = self.field_parameters.get(position)
    if existing is not None:
      self.rejections.append(f"@Parameter position {position} used by both '{existing.name}' and '{node.name}'")
      return
    self.field_parameters[position] = node


class MessageBus:
  """Per-pass store of ``MigrationFacts`` keyed by class ``node_id``."""

  def __init__(self):
    self._facts: Dict[int, MigrationFacts] = {}

  def publish(self, cls: ClassNode) -> MigrationFacts:
    """Returns the entry of ``cls``, creating it on first use."""
    facts = self._facts.get(cls.node_id)
    if facts is None:
      facts = MigrationFacts(class_name=cls.name)
      self._facts[cls.node_id] = facts
    return facts

  def poll(self, cls: ClassNode) -> Optional[MigrationFacts]:
    """Removes and returns the entry of ``cls``, if any was published."""
    return self._facts.pop(cls.node_id, None)

  def __len__(self) -> int:
    return len(self._facts)
