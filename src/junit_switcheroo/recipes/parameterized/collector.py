"""
Bottom-up fact collection for the parameterized recipe.

Walks the unit once. Factory methods, constructors and ``@Parameter``
fields publish facts for their nearest enclosing class; when the walk
leaves a class its facts are polled and planned immediately.
"""

import logging
import re
from typing import Dict

from junit_switcheroo.core.context import MigrationContext
from junit_switcheroo.core.errors import MalformedPatternError
from junit_switcheroo.core.matchers import Marker, TypeResolver, find_annotation
from junit_switcheroo.core.tree import BlockNode, ClassNode, FieldNode, MethodNode
from junit_switcheroo.core.visitor import TreeVisitor
from junit_switcheroo.enums import ExpressionKind
from junit_switcheroo.recipes.parameterized.facts import MessageBus
from junit_switcheroo.recipes.parameterized.planner import RewritePlan, plan_rewrite

logger = logging.getLogger(__name__)

RECIPE_NAME = "parameterized"

_DELEGATION = re.compile(r"^(?:this|super)\s*\(")


class ParameterizedFactCollector(TreeVisitor):
  """
  Collects facts and produces one ``RewritePlan`` per qualifying class.

  Attributes:
      plans (Dict[int, RewritePlan]): Plans keyed by class ``node_id``.
  """

  def __init__(self, resolver: TypeResolver, context: MigrationContext):
    super().__init__()
    self.resolver = resolver
    self.context = context
    self.bus = MessageBus()
    self.plans: Dict[int, RewritePlan] = {}

  def visit_BlockNode(self, node: BlockNode) -> bool:
    return False

  def leave_MethodNode(self, node: MethodNode) -> None:
    cls = self.nearest(ClassNode)
    if cls is None:
      return
    if node.is_constructor:
      statements = node.body.statements if node.body else ()
      delegating = any(_DELEGATION.match(getattr(s, "text", "")) for s in statements)
      self.bus.publish(cls).record_constructor(node, delegating)
      return
    annotation = find_annotation(node.annotations, self.resolver, Marker.PARAMETERS)
    if annotation is not None:
      self.bus.publish(cls).record_factory(node, annotation)

  def leave_FieldNode(self, node: FieldNode) -> None:
    annotation = find_annotation(node.annotations, self.resolver, Marker.PARAMETER)
    cls = self.nearest(ClassNode)
    if annotation is None or cls is None:
      return
    facts = self.bus.publish(cls)
    value = annotation.argument("value")
    if value is None:
      facts.record_field(0, node)
    elif value.kind == ExpressionKind.INT:
      facts.record_field(value.value, node)
    else:
      facts.malformed.append(f"@Parameter position '{value.text}' of field '{node.name}' is not an integer literal")

  def leave_ClassNode(self, node: ClassNode) -> None:
    facts = self.bus.poll(node)
    if find_annotation(node.annotations, self.resolver, Marker.RUNNER) is None:
      return

    self.context.tracer.log_match(str(Marker.RUNNER.value), node.name, RECIPE_NAME)
    if facts is None:
      self.context.skip(node.name, "no @Parameters factory method")
      return

    for conflict in facts.conflicts:
      self.context.warn(f"{node.name}: {conflict}")
    for rejection in facts.rejections:
      self.context.warn(f"{node.name}: not migrated, {rejection}")

    try:
      plan = plan_rewrite(facts)
    except MalformedPatternError as e:
      self.context.warn(f"{node.name}: malformed parameterized pattern: {e}")
      return

    if plan is None:
      if not facts.rejections:
        detail = f"factory: {facts.factory_name}, mode: {facts.injection_mode.value}"
        self.context.skip(node.name, f"incomplete pattern ({detail})")
      return

    logger.debug(f"Planned {plan.init_method_name} with parameters {plan.parameter_names}")
    self.plans[node.node_id] = plan
