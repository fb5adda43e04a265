"""
Tests for the tree-sitter Java front end.

Verifies:
1. Lossless round trip: printing an unmodified tree reproduces the input.
2. Structural views: imports, annotations, fields, methods, call statements.
3. Syntax errors raise JavaSyntaxError with a position.
4. Snippet parsing used by the synthesizer.
"""

import textwrap

import pytest

from junit_switcheroo.core.errors import JavaSyntaxError, SynthesisError
from junit_switcheroo.core.tree import ClassNode, FieldNode, ImportNode, MethodNode, RawNode, StatementNode
from junit_switcheroo.enums import ExpressionKind

ROUND_TRIP_SOURCES = [
  "class A {}",
  "class A {}\n\n\n",
  textwrap.dedent(
    """\
    // leading comment
    package org.example;

    import static org.junit.Assert.*;
    import java.util.List;

    /** Javadoc. */
    @SuppressWarnings({"unchecked", "rawtypes"})
    public   class  Odd<T extends Comparable<T>>   extends Base implements Runnable  {
      // comment before field
      private int a , b = 2;
      @Deprecated /* inline */ protected   List<String>[] names;

      Odd ( final int a ,  @Nullable String   b ) throws Exception {
        super( a );
      }

      @Override
      public void run( ) { }

      abstract void nothing();

      static { System.out.println("init"); }

      class Inner { void x() { return; } }

      enum Color { RED, GREEN }
    }

    interface Other { void y(); }
    """
  ),
  "public class Tabs {\n\tvoid m() {\n\t\tint x = 1;\n\t\tif (x > 0) {\n\t\t\tx++;\n\t\t}\n\t}\n}\n",
  "class Crlf {\r\n    void m() {\r\n        call();\r\n    }\r\n}\r\n",
  'class Unicode {\n    String s = "héllo → wörld";\n    void m() { use("ü"); }\n}\n',
]


@pytest.mark.parametrize("source", ROUND_TRIP_SOURCES)
def test_round_trip_is_lossless(frontend, source):
  unit = frontend.parse(source)
  assert unit.print() == source


def test_import_structure(frontend):
  unit = frontend.parse(
    "package a.b;\n\nimport static org.junit.Assert.assertEquals;\n"
    "import org.junit.*;\nimport java.util.List;\n\nclass A {}\n"
  )
  assert unit.package == "a.b"
  imports = unit.imports
  assert [i.name for i in imports] == ["org.junit.Assert.assertEquals", "org.junit", "java.util.List"]
  assert [i.static for i in imports] == [True, False, False]
  assert [i.wildcard for i in imports] == [False, True, False]
  assert imports[2].simple_name == "List"
  assert isinstance(unit.members[0], RawNode)


def test_class_annotations_and_arguments(frontend):
  unit = frontend.parse(
    textwrap.dedent(
      """\
      @RunWith(Parameterized.class)
      public class VetTests {
          @Parameters(name = "{index}: {0}")
          public static Object[] data() { return null; }

          @Parameter(value = 0x2)
          public int id;
      }
      """
    )
  )
  cls = unit.members[0]
  assert isinstance(cls, ClassNode)
  assert cls.name == "VetTests"
  runner = cls.annotations[0]
  assert runner.name == "RunWith"
  assert runner.argument().kind == ExpressionKind.CLASS
  assert runner.argument().value == "Parameterized"

  factory = cls.members[0]
  assert isinstance(factory, MethodNode)
  assert factory.annotations[0].simple_name == "Parameters"
  name = factory.annotations[0].argument("name")
  assert name.kind == ExpressionKind.STRING
  assert name.value == "{index}: {0}"
  assert factory.annotations[0].argument("value") is None

  field = cls.members[1]
  assert isinstance(field, FieldNode)
  assert field.annotations[0].argument().value == 2
  assert field.type == "int"
  assert field.name == "id"
  assert field.modifiers == ("public",)


def test_method_and_constructor_views(frontend):
  unit = frontend.parse(
    textwrap.dedent(
      """\
      class A {
          A(final String first, int second) { this.x = 1; }
          public <T> List<T> items(T seed) throws IOException { return null; }
          int a, b;
      }
      """
    )
  )
  ctor, method, field = unit.members[0].members
  assert ctor.is_constructor
  assert [(p.type, p.name) for p in ctor.parameters] == [("String", "first"), ("int", "second")]
  assert ctor.parameters[0].text == "final String first"
  assert not method.is_constructor
  assert method.return_type == "List<T>"
  assert method.name == "items"
  assert "IOException" in method.throws
  assert field.declarator_count == 2


def test_call_statements(frontend):
  unit = frontend.parse(
    textwrap.dedent(
      """\
      class A {
          void m() {
              thrown.expect(IllegalStateException.class);
              this.thrown.expectMessage("boom" + 1);
              thrown.expectCause(new IsNull<>());
              int x = compute();
          }
      }
      """
    )
  )
  statements = unit.members[0].members[0].body.statements
  assert all(isinstance(s, StatementNode) for s in statements)

  first, second, third, fourth = statements
  assert first.call.target == "thrown"
  assert first.call.name == "expect"
  assert first.call.arguments[0].kind == ExpressionKind.CLASS
  assert second.call.target == "this.thrown"
  assert second.call.arguments[0].kind == ExpressionKind.CONCAT
  assert third.call.arguments[0].kind == ExpressionKind.NEW
  assert fourth.call is None
  assert "compute" in fourth.references


def test_syntax_error_reports_position(frontend):
  with pytest.raises(JavaSyntaxError) as excinfo:
    frontend.parse("class A {\n    void m( {\n}\n")
  assert excinfo.value.line >= 1
  assert "line" in str(excinfo.value)


def test_parse_snippets(frontend):
  member = frontend.parse_member("public void init(int a) {\n    this.a = a;\n}")
  assert isinstance(member, MethodNode)
  assert member.name == "init"

  statement = frontend.parse_statement("init(a, b);")
  assert statement.call.name == "init"

  annotation = frontend.parse_annotation('@MethodSource("data")')
  assert annotation.name == "MethodSource"
  assert annotation.argument().value == "data"


@pytest.mark.parametrize(
  "method, snippet",
  [
    ("parse_member", "int a; int b;"),
    ("parse_statement", "a(); b();"),
    ("parse_statement", "a(;"),
    ("parse_annotation", "@A @B"),
  ],
)
def test_parse_snippet_rejects_invalid(frontend, method, snippet):
  with pytest.raises(SynthesisError):
    getattr(frontend, method)(snippet)


def test_nodes_keep_identity_across_changes(frontend):
  unit = frontend.parse("import a.B;\nclass A {}\n")
  imp = unit.members[0]
  assert isinstance(imp, ImportNode)
  changed = imp.with_changes(prefix="\n")
  assert changed.node_id == imp.node_id
  assert changed != imp
