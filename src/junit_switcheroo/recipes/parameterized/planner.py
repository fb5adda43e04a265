"""
Rewrite planning for parameterized classes.

``plan_rewrite`` is a pure function of the collected facts: it decides the
initializer name, the ordered parameter list and the initializer body, or
returns None when the class does not qualify.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from junit_switcheroo.core.errors import MalformedPatternError
from junit_switcheroo.core.tree import ParameterNode
from junit_switcheroo.enums import InjectionMode
from junit_switcheroo.recipes.parameterized.facts import MigrationFacts, ParameterSpec

_LEADING_MODIFIERS = re.compile(r"^(?:(?:final|@[\w$.]+(?:\([^)]*\))?)\s+)+")


@dataclass(frozen=True)
class RewritePlan:
  """
  Immutable rewrite instructions for one class.

  Attributes:
      class_name (str): Simple class name.
      injection_mode (InjectionMode): CONSTRUCTOR or FIELD.
      factory_name (str): Method referenced by ``@MethodSource``.
      init_method_name (str): ``init`` + class name.
      parameters (Tuple[ParameterSpec, ...]): Initializer parameters in order.
      initializer_body (Tuple[str, ...]): Assignment lines (FIELD mode only).
      name_template (Optional[str]): Expression text of the factory's ``name``.
      constructor_id (Optional[int]): Node id of the constructor to convert.
      field_ids (FrozenSet[int]): Node ids of ``@Parameter`` fields.
  """

  class_name: str
  injection_mode: InjectionMode
  factory_name: str
  init_method_name: str
  parameters: Tuple[ParameterSpec, ...]
  initializer_body: Tuple[str, ...] = ()
  name_template: Optional[str] = None
  constructor_id: Optional[int] = None
  field_ids: FrozenSet[int] = frozenset()

  @property
  def parameter_names(self) -> Tuple[str, ...]:
    return tuple(p.name for p in self.parameters)


def _bare_parameter(type_text: str, name: str, text: Optional[str] = None) -> ParameterNode:
  return ParameterNode(text=text or f"{type_text} {name}", type=type_text, name=name)


def plan_rewrite(facts: MigrationFacts) -> Optional[RewritePlan]:
  """
  Plans the migration of one class.

  Args:
      facts: Everything the collector published for the class.

  Returns:
      Optional[RewritePlan]: The plan, or None if the class does not qualify
      (rejected, no factory method, or nothing to inject).

  Raises:
      MalformedPatternError: If a recognized pattern is structurally invalid.
  """
  if facts.rejections:
    return None
  if facts.malformed:
    raise MalformedPatternError("; ".join(facts.malformed))
  if facts.factory_name is None:
    return None

  mode = facts.injection_mode
  constructor_id = None
  field_ids: FrozenSet[int] = frozenset()
  body: Tuple[str, ...] = ()

  if mode == InjectionMode.CONSTRUCTOR:
    specs = tuple(
      ParameterSpec(i, p.type, p.name, _bare_parameter(p.type, p.name, _LEADING_MODIFIERS.sub("", p.text)))
      for i, p in enumerate(facts.constructor_parameters)
    )
    constructor_id = facts.constructor.node_id
  elif mode == InjectionMode.FIELD:
    specs = []
    for position in sorted(facts.field_parameters):
      node = facts.field_parameters[position]
      if node.declarator_count != 1:
        raise MalformedPatternError(f"@Parameter field '{node.name}' declares {node.declarator_count} variables")
      if not node.type:
        raise MalformedPatternError(f"@Parameter field '{node.name}' has no declared type")
      specs.append(ParameterSpec(position, node.type, node.name, _bare_parameter(node.type, node.name)))
    specs = tuple(specs)
    field_ids = frozenset(n.node_id for n in facts.field_parameters.values())
    body = tuple(f"this.{s.name} = {s.name};" for s in specs)
  else:
    return None

  name_expr = facts.factory_annotation.argument("name") if facts.factory_annotation else None

  return RewritePlan(
    class_name=facts.class_name,
    injection_mode=mode,
    factory_name=facts.factory_name,
    init_method_name=f"init{facts.class_name}",
    parameters=specs,
    initializer_body=body,
    name_template=name_expr.text if name_expr is not None else None,
    constructor_id=constructor_id,
    field_ids=field_ids,
  )
