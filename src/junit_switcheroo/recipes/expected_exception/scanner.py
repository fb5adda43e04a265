"""
Expectation scanning.

Finds the ``ExpectedException`` rule field of a class and plans every method
using it. A method body is read by a small state machine:

    SCANNING    statements before the first rule call, moved into the lambda
    COLLECTING  the contiguous run of expect/expectMessage/expectCause calls
    DONE        the remaining statements, which follow them into the lambda

The lambda wraps the whole body except the expectation calls.

Any use of the rule that does not fit this shape (a second run of calls, a
repeated call, an unknown rule method, a reference from another member)
makes the whole class ineligible.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from junit_switcheroo.core.context import MigrationContext
from junit_switcheroo.core.matchers import EXPECTED_EXCEPTION_TYPE, Marker, TypeResolver, find_annotation
from junit_switcheroo.core.scanners import collect_references
from junit_switcheroo.core.tree import (
  BlockNode,
  ClassNode,
  Expression,
  FieldNode,
  MethodCall,
  MethodNode,
  Node,
  StatementNode,
)
from junit_switcheroo.core.visitor import TreeVisitor
from junit_switcheroo.enums import ExpectationKind, ExpressionKind, ScanState

logger = logging.getLogger(__name__)

RECIPE_NAME = "expected_exception"

MATCHER_KINDS = (ExpressionKind.CALL, ExpressionKind.NEW)

# Emission order of the normalized expectations.
NORMALIZED_ORDER = (
  ExpectationKind.TYPE,
  ExpectationKind.TYPE_MATCHER,
  ExpectationKind.MESSAGE,
  ExpectationKind.MESSAGE_MATCHER,
  ExpectationKind.CAUSE_MATCHER,
)


class UnsupportedRuleUse(Exception):
  """The rule field is used in a way the rewrite cannot express."""


@dataclass(frozen=True)
class Expectation:
  kind: ExpectationKind
  argument: Expression
  statement: StatementNode


@dataclass(frozen=True)
class MethodPlan:
  """
  Rewrite instructions for one test method.

  Attributes:
      leading (Tuple[Node, ...]): Statements before the expectations, moved first into the lambda.
      expectations (Tuple[Expectation, ...]): In normalized order.
      body (Tuple[Node, ...]): Statements after the expectations, moved into the lambda.
      anchor (StatementNode): First rule call in source order.
  """

  leading: Tuple[Node, ...]
  expectations: Tuple[Expectation, ...]
  body: Tuple[Node, ...]
  anchor: StatementNode

  def get(self, kind: ExpectationKind) -> Optional[Expectation]:
    for expectation in self.expectations:
      if expectation.kind == kind:
        return expectation
    return None

  @property
  def uses_matchers(self) -> bool:
    return any(e.kind.is_matcher for e in self.expectations)


@dataclass(frozen=True)
class RulePlan:
  """
  Rewrite instructions for one class.

  Attributes:
      field_id (int): Node id of the rule field to remove.
      field_name (str): Name of the rule field.
      methods (Dict[int, MethodPlan]): Plans keyed by method ``node_id``.
  """

  field_id: int
  field_name: str
  methods: Dict[int, MethodPlan]


def classify(call: MethodCall) -> Optional[ExpectationKind]:
  """
  Maps a rule call to its expectation kind.

  Args:
      call: A call whose receiver is the rule field.

  Returns:
      Optional[ExpectationKind]: None for calls that cannot be migrated.
  """
  if len(call.arguments) != 1:
    return None
  kind = call.arguments[0].kind
  if call.name == "expect":
    return ExpectationKind.TYPE if kind == ExpressionKind.CLASS else ExpectationKind.TYPE_MATCHER
  if call.name == "expectMessage":
    return ExpectationKind.MESSAGE_MATCHER if kind in MATCHER_KINDS else ExpectationKind.MESSAGE
  if call.name == "expectCause":
    return ExpectationKind.CAUSE_MATCHER
  return None


def find_rule_field(cls: ClassNode, resolver: TypeResolver) -> Optional[FieldNode]:
  """Returns the single ``@Rule``/``@ClassRule`` ``ExpectedException`` field of ``cls``."""
  candidates = [
    m
    for m in cls.members
    if isinstance(m, FieldNode)
    and resolver.resolves_to(m.type, EXPECTED_EXCEPTION_TYPE)
    and find_annotation(m.annotations, resolver, Marker.RULE, Marker.CLASS_RULE) is not None
  ]
  if len(candidates) != 1 or candidates[0].declarator_count != 1:
    if candidates:
      logger.debug(f"{cls.name}: {len(candidates)} ExpectedException rule fields, not migrating")
    return None
  return candidates[0]


def scan_method(method: MethodNode, rule_name: str) -> Optional[MethodPlan]:
  """
  Plans one method.

  Args:
      method: A member of the rule's class.
      rule_name: Name of the rule field.

  Returns:
      Optional[MethodPlan]: None when the method does not use the rule.

  Raises:
      UnsupportedRuleUse: If the rule is used outside one contiguous run of
      distinct, recognized calls.
  """
  if method.body is None:
    return None

  targets = (rule_name, f"this.{rule_name}")
  state = ScanState.SCANNING
  leading: List[Node] = []
  found: Dict[ExpectationKind, Expectation] = {}
  called = set()
  body: List[Node] = []
  anchor = None

  for statement in method.body.statements:
    call = statement.call if isinstance(statement, StatementNode) else None
    is_rule_call = call is not None and call.target in targets
    uses_rule = rule_name in collect_references(statement)

    if state == ScanState.SCANNING:
      if not is_rule_call:
        if uses_rule:
          raise UnsupportedRuleUse(f"'{rule_name}' used before its expectations in '{method.name}'")
        leading.append(statement)
        continue
      state = ScanState.COLLECTING
      anchor = statement

    if state == ScanState.COLLECTING:
      if is_rule_call:
        kind = classify(call)
        if kind is None:
          raise UnsupportedRuleUse(f"unsupported call '{rule_name}.{call.name}' in '{method.name}'")
        if call.name in called:
          raise UnsupportedRuleUse(f"repeated call '{rule_name}.{call.name}' in '{method.name}'")
        called.add(call.name)
        found[kind] = Expectation(kind, call.arguments[0], statement)
        continue
      state = ScanState.DONE

    if uses_rule:
      raise UnsupportedRuleUse(f"'{rule_name}' used after the throwing statements began in '{method.name}'")
    body.append(statement)

  if not found:
    return None
  ordered = tuple(found[k] for k in NORMALIZED_ORDER if k in found)
  return MethodPlan(leading=tuple(leading), expectations=ordered, body=tuple(body), anchor=anchor)


def scan_class(cls: ClassNode, resolver: TypeResolver) -> Optional[RulePlan]:
  """
  Plans one class.

  Returns:
      Optional[RulePlan]: None if the class has no eligible rule field.

  Raises:
      UnsupportedRuleUse: If any member uses the rule in an unsupported way.
  """
  rule = find_rule_field(cls, resolver)
  if rule is None:
    return None

  methods: Dict[int, MethodPlan] = {}
  for member in cls.members:
    if member is rule:
      continue
    if isinstance(member, MethodNode):
      plan = scan_method(member, rule.name)
      if plan is not None:
        methods[member.node_id] = plan
    elif rule.name in collect_references(member):
      raise UnsupportedRuleUse(f"'{rule.name}' referenced outside of test methods")
  return RulePlan(field_id=rule.node_id, field_name=rule.name, methods=methods)


class ExpectedExceptionCollector(TreeVisitor):
  """
  Plans every class holding an ``ExpectedException`` rule.

  Attributes:
      plans (Dict[int, RulePlan]): Plans keyed by class ``node_id``.
  """

  def __init__(self, resolver: TypeResolver, context: MigrationContext):
    super().__init__()
    self.resolver = resolver
    self.context = context
    self.plans: Dict[int, RulePlan] = {}

  def visit_BlockNode(self, node: BlockNode) -> bool:
    return False

  def leave_ClassNode(self, node: ClassNode) -> None:
    try:
      plan = scan_class(node, self.resolver)
    except UnsupportedRuleUse as e:
      self.context.skip(node.name, str(e))
      return
    if plan is None:
      return
    self.context.tracer.log_match(
      f"@org.junit.Rule {EXPECTED_EXCEPTION_TYPE}", f"{node.name}.{plan.field_name}", RECIPE_NAME
    )
    self.plans[node.node_id] = plan
