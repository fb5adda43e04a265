"""
Top-down rewriting of ``ExpectedException`` rules.

The rule field is removed and each planned method body, minus its
expectation calls, becomes::

    assertThrows(X.class, () -> {
        ...
    }, "message");

When a matcher was expected the thrown exception is bound and checked::

    X exception = assertThrows(X.class, () -> {
        ...
    });
    assertThat(exception, isA(...));
    assertThat(exception.getMessage(), containsString(...));
    assertThat(exception.getCause(), nullValue());
"""

from typing import Iterable, List, Mapping

from junit_switcheroo.core.context import MigrationContext
from junit_switcheroo.core.errors import SynthesisError
from junit_switcheroo.core.formatter import rebase
from junit_switcheroo.core.scanners import collect_references
from junit_switcheroo.core.tree import ClassNode, MethodNode, Node, remove_member, replace_prefix
from junit_switcheroo.core.visitor import TreeTransformer
from junit_switcheroo.enums import ExpectationKind
from junit_switcheroo.recipes.expected_exception.scanner import MethodPlan, RulePlan

DEFAULT_EXCEPTION_TYPE = "Exception"
BINDING_NAME = "exception"

ASSERT_THROWS_TEMPLATE = "assertThrows(#{}.class, () -> {#{}\n}#{});"
BOUND_ASSERT_THROWS_TEMPLATE = "#{} #{} = assertThrows(#{}.class, () -> {#{}\n}#{});"
ASSERT_THAT_TEMPLATES = {
  ExpectationKind.TYPE_MATCHER: "assertThat(#{}, #{});",
  ExpectationKind.MESSAGE_MATCHER: "assertThat(#{}.getMessage(), #{});",
  ExpectationKind.CAUSE_MATCHER: "assertThat(#{}.getCause(), #{});",
}


def unique_name(base: str, taken: Iterable[str]) -> str:
  """Returns ``base``, or ``base1``, ``base2``... whichever is not taken."""
  taken = set(taken)
  if base not in taken:
    return base
  suffix = 1
  while f"{base}{suffix}" in taken:
    suffix += 1
  return f"{base}{suffix}"


class ExpectedExceptionRewriter(TreeTransformer):
  """
  Applies ``RulePlan`` objects to their classes.

  Attributes:
      plans (Mapping[int, RulePlan]): Read-only plans keyed by class ``node_id``.
      rewritten (List[str]): Names of the classes actually rewritten.
      uses_assert_throws (bool): Whether any ``assertThrows`` was emitted.
      uses_matchers (bool): Whether any ``assertThat`` was emitted.
  """

  def __init__(self, plans: Mapping[int, RulePlan], context: MigrationContext):
    super().__init__()
    self.plans = plans
    self.context = context
    self.rewritten: List[str] = []
    self.uses_assert_throws = False
    self.uses_matchers = False

  def leave_ClassNode(self, original: ClassNode, updated: ClassNode) -> ClassNode:
    plan = self.plans.get(original.node_id)
    if plan is None:
      return updated
    try:
      result = self._rewrite_class(updated, plan)
    except SynthesisError as e:
      self.context.warn(f"{original.name}: reverted, synthesis failed: {e}")
      return updated

    self.rewritten.append(original.name)
    self.uses_assert_throws |= bool(plan.methods)
    self.uses_matchers |= any(m.uses_matchers for m in plan.methods.values())
    self.context.tracer.log_mutation("ClassNode", updated.print(), result.print())
    return result

  def _rewrite_class(self, cls: ClassNode, plan: RulePlan) -> ClassNode:
    member_indent = self.context.formatter.member_indent(cls)
    members: List[Node] = list(cls.members)
    remove_member(members, next(i for i, m in enumerate(members) if m.node_id == plan.field_id))

    for index, member in enumerate(members):
      method_plan = plan.methods.get(member.node_id)
      if method_plan is not None:
        members[index] = self._rewrite_method(member, method_plan, member_indent)
    return cls.with_changes(members=tuple(members))

  def _rewrite_method(self, method: MethodNode, plan: MethodPlan, member_indent: str) -> MethodNode:
    formatter = self.context.formatter
    synth = self.context.synthesizer
    indent = formatter.statement_indent(method, member_indent)

    expected_type = plan.get(ExpectationKind.TYPE)
    exception_type = expected_type.argument.value if expected_type else DEFAULT_EXCEPTION_TYPE
    message = plan.get(ExpectationKind.MESSAGE)
    message_arg = f", {rebase(message.argument.text, indent, '')}" if message else ""
    moved = plan.leading + plan.body
    first = plan.leading[0] if plan.leading else plan.anchor
    if plan.leading:
      moved = (replace_prefix(moved[0], "\n" + indent),) + moved[1:]
    lambda_body = formatter.lambda_body(moved, indent)

    checks = []
    if plan.uses_matchers:
      taken = collect_references(method) | {p.name for p in method.parameters}
      binding = unique_name(BINDING_NAME, taken)
      throws = synth.statement(
        BOUND_ASSERT_THROWS_TEMPLATE,
        exception_type,
        binding,
        exception_type,
        lambda_body,
        message_arg,
        indent=indent,
        prefix=first.prefix,
      )
      for expectation in plan.expectations:
        if not expectation.kind.is_matcher:
          continue
        checks.append(
          synth.statement(
            ASSERT_THAT_TEMPLATES[expectation.kind],
            binding,
            rebase(expectation.argument.text, indent, ""),
            indent=indent,
            prefix="\n" + indent,
          )
        )
    else:
      throws = synth.statement(
        ASSERT_THROWS_TEMPLATE, exception_type, lambda_body, message_arg, indent=indent, prefix=first.prefix
      )

    statements = (throws,) + tuple(checks)
    return method.with_changes(body=method.body.with_changes(statements=statements))
