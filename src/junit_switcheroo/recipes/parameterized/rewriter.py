"""
Top-down rewriting of planned parameterized classes.

For each class with a plan:

1. ``@RunWith(Parameterized.class)`` is removed.
2. FIELD mode: ``@Parameter`` is removed from the fields and
   ``public void init<Class>(...)`` assigning them is appended.
   CONSTRUCTOR mode: the constructor becomes ``void init<Class>(...)``.
3. Every ``@Test`` method gets ``@MethodSource("<factory>")`` +
   ``@ParameterizedTest``, the planned parameter list and a leading
   ``init<Class>(...)`` call.
4. ``@Parameters`` is removed from the factory method.

A ``SynthesisError`` anywhere in a class leaves that class as it was.
"""

from typing import List, Mapping

from junit_switcheroo.core.context import MigrationContext
from junit_switcheroo.core.errors import SynthesisError
from junit_switcheroo.core.matchers import Marker, TypeResolver, find_annotation
from junit_switcheroo.core.tree import (
  ClassNode,
  FieldNode,
  MethodNode,
  Node,
  remove_annotation,
  replace_prefix,
)
from junit_switcheroo.core.visitor import TreeTransformer
from junit_switcheroo.enums import InjectionMode
from junit_switcheroo.recipes.parameterized.planner import RewritePlan

INIT_METHOD_TEMPLATE = "public void #{}(#{}) {#{}\n}"
INIT_CALL_TEMPLATE = "#{}(#{});"
METHOD_SOURCE_TEMPLATE = '@MethodSource("#{}")'
PARAMETERIZED_TEST_TEMPLATE = "@ParameterizedTest"
NAMED_PARAMETERIZED_TEST_TEMPLATE = "@ParameterizedTest(name = #{})"


class ParameterizedRewriter(TreeTransformer):
  """
  Applies ``RewritePlan`` objects to their classes.

  Attributes:
      plans (Mapping[int, RewritePlan]): Read-only plans keyed by class ``node_id``.
      rewritten (List[str]): Names of the classes actually rewritten.
  """

  def __init__(self, plans: Mapping[int, RewritePlan], resolver: TypeResolver, context: MigrationContext):
    super().__init__()
    self.plans = plans
    self.resolver = resolver
    self.context = context
    self.rewritten: List[str] = []

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
    self.context.tracer.log_mutation("ClassNode", updated.print(), result.print())
    return result

  def _rewrite_class(self, cls: ClassNode, plan: RewritePlan) -> ClassNode:
    runner = find_annotation(cls.annotations, self.resolver, Marker.RUNNER)
    if runner is not None:
      cls = remove_annotation(cls, runner)

    member_indent = self.context.formatter.member_indent(cls)
    members: List[Node] = []
    for member in cls.members:
      if isinstance(member, MethodNode):
        member = self._rewrite_method(member, plan, member_indent)
      elif isinstance(member, FieldNode) and member.node_id in plan.field_ids:
        member = remove_annotation(member, find_annotation(member.annotations, self.resolver, Marker.PARAMETER))
      members.append(member)

    if plan.injection_mode == InjectionMode.FIELD:
      unit = self.context.formatter.unit
      body = "".join(f"\n{unit}{line}" for line in plan.initializer_body)
      init_method = self.context.synthesizer.member(
        INIT_METHOD_TEMPLATE,
        plan.init_method_name,
        [p.node for p in plan.parameters],
        body,
        indent=member_indent,
        prefix="\n\n" + member_indent,
      )
      members.append(init_method)

    return cls.with_changes(members=tuple(members))

  def _rewrite_method(self, method: MethodNode, plan: RewritePlan, member_indent: str) -> MethodNode:
    if method.node_id == plan.constructor_id:
      return method.with_changes(return_type="void", type_space=" ", name=plan.init_method_name)

    factory = find_annotation(method.annotations, self.resolver, Marker.PARAMETERS)
    if factory is not None:
      return remove_annotation(method, factory)

    test = find_annotation(method.annotations, self.resolver, Marker.TEST, Marker.JUPITER_TEST)
    if test is not None:
      return self._rewrite_test(method, test, plan, member_indent)
    return method

  def _rewrite_test(self, method: MethodNode, test, plan: RewritePlan, member_indent: str) -> MethodNode:
    synth = self.context.synthesizer
    if test.arguments:
      self.context.warn(f"{plan.class_name}.{method.name}: dropping @Test arguments '{test.text}'")

    method_source = synth.annotation(METHOD_SOURCE_TEMPLATE, plan.factory_name, prefix=test.prefix)
    header_prefix = method.decl_prefix if "\n" in method.decl_prefix else " "
    if plan.name_template is not None:
      parameterized = synth.annotation(NAMED_PARAMETERIZED_TEST_TEMPLATE, plan.name_template, prefix=header_prefix)
    else:
      parameterized = synth.annotation(PARAMETERIZED_TEST_TEMPLATE, prefix=header_prefix)

    annotations = []
    for annotation in method.annotations:
      if annotation.node_id == test.node_id:
        annotations.extend((method_source, parameterized))
      else:
        annotations.append(annotation)

    parameters = tuple(replace_prefix(p.node, "" if i == 0 else " ") for i, p in enumerate(plan.parameters))
    changes = {"annotations": tuple(annotations), "parameters": parameters, "params_space": ""}

    if method.body is not None:
      body = method.body
      call_prefix = "\n" + self.context.formatter.statement_indent(method, member_indent)
      init_call = synth.statement(
        INIT_CALL_TEMPLATE, plan.init_method_name, list(plan.parameter_names), prefix=call_prefix
      )
      statements = body.statements
      if statements and "\n" not in statements[0].prefix:
        # One-line body: open it up so the call gets its own line.
        statements = (replace_prefix(statements[0], call_prefix),) + statements[1:]
      end = body.end if "\n" in body.end else "\n" + member_indent
      changes["body"] = body.with_changes(statements=(init_call,) + statements, end=end)

    return method.with_changes(**changes)
