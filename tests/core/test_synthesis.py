"""
Tests for template synthesis and indentation handling.
"""

import pytest

from junit_switcheroo.core.errors import SynthesisError
from junit_switcheroo.core.formatter import AutoFormatter, detect_indent, indentation, rebase, reindent
from junit_switcheroo.core.synthesis import Synthesizer
from junit_switcheroo.core.tree import MethodNode, ParameterNode


@pytest.fixture
def synth(frontend):
  return Synthesizer(frontend, AutoFormatter("    "))


def test_render_binds_nodes_strings_and_sequences(synth):
  params = [
    ParameterNode(prefix="\n   ", text="int a", type="int", name="a"),
    ParameterNode(text="String b", type="String", name="b"),
  ]
  rendered = synth.render("void #{}(#{}) {}", ["init", params])
  assert rendered == "void init(int a, String b) {}"


def test_render_count_mismatch(synth):
  with pytest.raises(SynthesisError, match="expects 2 values"):
    synth.render("#{}(#{});", ["only"])


def test_render_rejects_unbindable_value(synth):
  with pytest.raises(SynthesisError, match="Cannot bind"):
    synth.render("f(#{});", [42])


def test_member_is_indented_and_prefixed(synth):
  method = synth.member(
    "public void #{}() {#{}\n}", "initA", "\n    this.a = a;", indent="    ", prefix="\n\n    "
  )
  assert isinstance(method, MethodNode)
  assert method.print() == "\n\n    public void initA() {\n        this.a = a;\n    }"


def test_statement_and_annotation(synth):
  statement = synth.statement("#{}(#{});", "initA", ["a", "b"], prefix="\n        ")
  assert statement.print() == "\n        initA(a, b);"
  assert statement.call.name == "initA"

  annotation = synth.annotation('@MethodSource("#{}")', "data", prefix="\n    ")
  assert annotation.print() == '\n    @MethodSource("data")'


def test_unparseable_template_raises(synth):
  with pytest.raises(SynthesisError):
    synth.statement("assertThrows(#{}.class, () -> {", "Foo")


def test_indentation_helpers():
  assert indentation("\n\n    ") == "    "
  assert indentation("// c\n\t\t") == "\t\t"
  assert reindent("a\nb\n\nc", "  ") == "a\n  b\n\n  c"
  assert reindent("a\nb", "") == "a\nb"
  assert rebase("x\n        y\n        z", "        ", "    ") == "x\n    y\n    z"
  assert rebase("x\ny", "", "  ") == "x\n  y"


@pytest.mark.parametrize(
  "source, expected",
  [
    ("class A {\n  int a;\n}\n", "  "),
    ("class A {\n\tint a;\n}\n", "\t"),
    ("@Ann\nclass A {\n    int a;\n}\n", "    "),
    ("class A {}\n", "    "),
    ("class A {\nvoid m() {\n   x();\n}\n}\n", "   "),
  ],
)
def test_detect_indent(frontend, source, expected):
  assert detect_indent(frontend.parse(source)) == expected


def test_formatter_columns(frontend):
  unit = frontend.parse("class A {\n  void m() {\n    x();\n  }\n  void e() {}\n  void o() { y(); }\n}\n")
  formatter = AutoFormatter.for_unit(unit)
  cls = unit.members[0]
  m, e, o = cls.members

  assert formatter.unit == "  "
  assert formatter.member_indent(cls) == "  "
  assert formatter.statement_indent(m, "  ") == "    "
  assert formatter.statement_indent(e, "  ") == "    "
  assert formatter.statement_indent(o, "  ") == "    "
  assert AutoFormatter.for_unit(unit, "\t").unit == "\t"


def test_lambda_body_rebases_statements(frontend):
  unit = frontend.parse(
    "class A {\n    void m() {\n\n        a();\n        if (b) {\n            c();\n        }\n    }\n}\n"
  )
  statements = unit.members[0].members[0].body.statements
  body = AutoFormatter("    ").lambda_body(statements, "        ")
  assert body == "\n    a();\n    if (b) {\n        c();\n    }"
