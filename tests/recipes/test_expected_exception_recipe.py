"""
End-to-end tests for the ExpectedException rule migration.

Scenarios:
1. expect(Class) + expectMessage(String) -> assertThrows with a trailing message;
   every other statement of the method moves into the lambda.
2. Matcher expectations -> bound exception + assertThat checks in normalized order.
3. Unused rule -> field and imports removed, an unused org.junit.rules.* included.
4. Unsupported uses -> class left untouched.
5. Other rules (TemporaryFolder) are not touched.
"""

import itertools
import textwrap

import pytest

from junit_switcheroo.core.tree import Expression, MethodCall
from junit_switcheroo.enums import ExpectationKind, ExpressionKind
from junit_switcheroo.recipes.expected_exception.rewriter import unique_name
from junit_switcheroo.recipes.expected_exception.scanner import classify

MESSAGE_INPUT = textwrap.dedent(
  """\
  package org.example;

  import java.util.List;
  import org.junit.Rule;
  import org.junit.Test;
  import org.junit.rules.ExpectedException;

  public class ListTests {

      @Rule
      public ExpectedException thrown = ExpectedException.none();

      @Test
      public void outOfBounds() {
          thrown.expect(IndexOutOfBoundsException.class);
          thrown.expectMessage("Index 1 out of bounds for length 1");
          List<String> list = List.of("a");
          list.get(1);
      }
  }
  """
)

MESSAGE_OUTPUT = textwrap.dedent(
  """\
  package org.example;

  import java.util.List;
  import org.junit.Test;

  import static org.junit.jupiter.api.Assertions.assertThrows;

  public class ListTests {

      @Test
      public void outOfBounds() {
          assertThrows(IndexOutOfBoundsException.class, () -> {
              List<String> list = List.of("a");
              list.get(1);
          }, "Index 1 out of bounds for length 1");
      }
  }
  """
)

MATCHER_TEMPLATE = textwrap.dedent(
  """\
  import static org.hamcrest.Matchers.containsString;
  import static org.hamcrest.Matchers.isA;
  import static org.hamcrest.Matchers.nullValue;

  import org.junit.Rule;
  import org.junit.Test;
  import org.junit.rules.ExpectedException;

  public class MatcherTests {

      @Rule
      public ExpectedException thrown = ExpectedException.none();

      @Test
      public void fails() {
  {calls}
          service.run();
      }
  }
  """
)

EXPECTATION_CALLS = [
  "        thrown.expect(isA(IllegalStateException.class));",
  '        thrown.expectMessage(containsString("boom"));',
  "        thrown.expectCause(nullValue());",
]

MATCHER_OUTPUT = textwrap.dedent(
  """\
  import static org.hamcrest.MatcherAssert.assertThat;
  import static org.hamcrest.Matchers.containsString;
  import static org.hamcrest.Matchers.isA;
  import static org.hamcrest.Matchers.nullValue;
  import static org.junit.jupiter.api.Assertions.assertThrows;

  import org.junit.Test;

  public class MatcherTests {

      @Test
      public void fails() {
          Exception exception = assertThrows(Exception.class, () -> {
              service.run();
          });
          assertThat(exception, isA(IllegalStateException.class));
          assertThat(exception.getMessage(), containsString("boom"));
          assertThat(exception.getCause(), nullValue());
      }
  }
  """
)


def test_type_and_message(migrate):
  assert migrate(MESSAGE_INPUT) == MESSAGE_OUTPUT


def test_migration_is_idempotent(engine):
  result = engine.run(MESSAGE_OUTPUT)
  assert not result.changed
  assert result.code == MESSAGE_OUTPUT


@pytest.mark.parametrize("order", list(itertools.permutations(range(3))))
def test_matcher_checks_use_normalized_order(migrate, order):
  calls = "\n".join(EXPECTATION_CALLS[i] for i in order)
  assert migrate(MATCHER_TEMPLATE.replace("{calls}", calls)) == MATCHER_OUTPUT


def test_type_with_matcher_binds_declared_type(migrate):
  source = MESSAGE_INPUT.replace(
    'thrown.expectMessage("Index 1 out of bounds for length 1");',
    'thrown.expectMessage(org.hamcrest.Matchers.startsWith("Index"));',
  )
  output = migrate(source)
  assert "IndexOutOfBoundsException exception = assertThrows(IndexOutOfBoundsException.class, () -> {" in output
  assert '        assertThat(exception.getMessage(), org.hamcrest.Matchers.startsWith("Index"));\n' in output
  assert "import static org.hamcrest.MatcherAssert.assertThat;" in output


def test_statements_before_expectations_move_into_lambda(migrate):
  source = MESSAGE_INPUT.replace(
    "        thrown.expect(", '        String prefix = "x";\n        thrown.expect('
  )
  output = migrate(source)
  assert (
    "    public void outOfBounds() {\n"
    "        assertThrows(IndexOutOfBoundsException.class, () -> {\n"
    '            String prefix = "x";\n'
    '            List<String> list = List.of("a");\n'
    "            list.get(1);\n"
    '        }, "Index 1 out of bounds for length 1");\n'
    "    }\n"
  ) in output


def test_local_mutated_before_expectations_stays_in_lambda_scope(migrate):
  source = MESSAGE_INPUT.replace(
    "        thrown.expect(", "        int[] a = new int[1];\n        int i = 0;\n        i++;\n        thrown.expect("
  ).replace('        List<String> list = List.of("a");\n        list.get(1);\n', "        int b = a[i];\n")
  output = migrate(source)
  assert (
    "    public void outOfBounds() {\n"
    "        assertThrows(IndexOutOfBoundsException.class, () -> {\n"
    "            int[] a = new int[1];\n"
    "            int i = 0;\n"
    "            i++;\n"
    "            int b = a[i];\n"
    '        }, "Index 1 out of bounds for length 1");\n'
    "    }\n"
  ) in output


def test_binding_name_avoids_collisions(migrate):
  source = MATCHER_TEMPLATE.replace("{calls}", EXPECTATION_CALLS[2]).replace(
    "        service.run();", "        Exception exception = null;\n        service.run(exception);"
  )
  output = migrate(source)
  assert "Exception exception1 = assertThrows(Exception.class, () -> {" in output
  assert "assertThat(exception1.getCause(), nullValue());" in output


def test_this_qualified_calls(migrate):
  source = MESSAGE_INPUT.replace("thrown.expect", "this.thrown.expect")
  assert migrate(source) == MESSAGE_OUTPUT


def test_unused_rule_is_removed(migrate):
  source = textwrap.dedent(
    """\
    import org.junit.Rule;
    import org.junit.Test;
    import org.junit.rules.ExpectedException;

    public class Unused {

        @Rule
        public ExpectedException thrown = ExpectedException.none();

        @Test
        public void works() {
            run();
        }
    }
    """
  )
  expected = textwrap.dedent(
    """\
    import org.junit.Test;

    public class Unused {

        @Test
        public void works() {
            run();
        }
    }
    """
  )
  assert migrate(source) == expected


@pytest.mark.parametrize(
  "old, new",
  [
    # Rule used after the throwing statements began.
    ("        list.get(1);\n", "        list.get(1);\n        thrown.expectMessage(\"again\");\n"),
    # Repeated call.
    ("        thrown.expectMessage(", "        thrown.expect(RuntimeException.class);\n        thrown.expectMessage("),
    # Unsupported rule method.
    (
      "        thrown.expect(IndexOutOfBoundsException.class);\n",
      "        thrown.reportMissingExceptionWithMessage(\"m\");\n",
    ),
    # Rule passed around before the expectations.
    ("        thrown.expect(", "        helper(thrown);\n        thrown.expect("),
  ],
)
def test_unsupported_uses_leave_class_untouched(engine, old, new):
  source = MESSAGE_INPUT.replace(old, new)
  assert source != MESSAGE_INPUT
  result = engine.run(source)
  assert result.success
  assert result.code == source


def test_rule_referenced_by_other_member_is_untouched(engine):
  source = MESSAGE_INPUT.replace(
    "    @Test\n", "    private final Object alias = thrown;\n\n    @Test\n"
  )
  assert engine.run(source).code == source


def test_other_rules_are_left_alone(engine):
  source = textwrap.dedent(
    """\
    import org.junit.Rule;
    import org.junit.Test;
    import org.junit.rules.TemporaryFolder;

    public class Files {
        @Rule
        public TemporaryFolder folder = new TemporaryFolder();

        @Test
        public void creates() throws Exception {
            folder.newFile("a");
        }
    }
    """
  )
  result = engine.run(source)
  assert result.code == source
  assert result.applied_recipes == []


def test_rules_wildcard_removed_only_when_unused(migrate):
  source = MESSAGE_INPUT.replace(
    "import org.junit.rules.ExpectedException;\n", "import org.junit.rules.*;\n"
  )
  output = migrate(source)
  assert "import org.junit.rules.*;" not in output
  assert "assertThrows(IndexOutOfBoundsException.class, () -> {" in output

  with_folder = source.replace(
    "    @Rule\n    public ExpectedException",
    "    @Rule\n    public TemporaryFolder folder = new TemporaryFolder();\n\n    @Rule\n    public ExpectedException",
  )
  output = migrate(with_folder)
  assert "import org.junit.rules.*;" in output
  assert "public TemporaryFolder folder" in output
  assert "ExpectedException" not in output


def test_both_recipes_compose(migrate):
  source = textwrap.dedent(
    """\
    import org.junit.Rule;
    import org.junit.Test;
    import org.junit.rules.ExpectedException;
    import org.junit.runner.RunWith;
    import org.junit.runners.Parameterized;
    import org.junit.runners.Parameterized.Parameters;

    @RunWith(Parameterized.class)
    public class Both {
        @Rule
        public ExpectedException thrown = ExpectedException.none();

        private final int value;

        public Both(int value) {
            this.value = value;
        }

        @Parameters
        public static Object[] data() {
            return new Object[] {1};
        }

        @Test
        public void rejects() {
            thrown.expect(IllegalArgumentException.class);
            check(value);
        }
    }
    """
  )
  output = migrate(source)
  assert "@RunWith" not in output
  assert "ExpectedException" not in output
  assert "import static org.junit.jupiter.api.Assertions.assertThrows;" in output
  assert "import org.junit.jupiter.params.ParameterizedTest;" in output
  assert (
    "    public void rejects(int value) {\n"
    "        assertThrows(IllegalArgumentException.class, () -> {\n"
    "            initBoth(value);\n"
    "            check(value);\n"
    "        });\n"
    "    }\n"
  ) in output


@pytest.mark.parametrize(
  "name, kind, expected",
  [
    ("expect", ExpressionKind.CLASS, ExpectationKind.TYPE),
    ("expect", ExpressionKind.CALL, ExpectationKind.TYPE_MATCHER),
    ("expectMessage", ExpressionKind.STRING, ExpectationKind.MESSAGE),
    ("expectMessage", ExpressionKind.CONCAT, ExpectationKind.MESSAGE),
    ("expectMessage", ExpressionKind.NAME, ExpectationKind.MESSAGE),
    ("expectMessage", ExpressionKind.NEW, ExpectationKind.MESSAGE_MATCHER),
    ("expectCause", ExpressionKind.CALL, ExpectationKind.CAUSE_MATCHER),
    ("none", ExpressionKind.OTHER, None),
  ],
)
def test_classify(name, kind, expected):
  call = MethodCall(target="thrown", name=name, arguments=(Expression(text="x", kind=kind),))
  assert classify(call) is expected


def test_classify_requires_single_argument():
  assert classify(MethodCall(target="thrown", name="expect", arguments=())) is None


def test_unique_name():
  assert unique_name("exception", {"e"}) == "exception"
  assert unique_name("exception", {"exception", "exception1"}) == "exception2"
