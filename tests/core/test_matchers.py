"""
Tests for annotation matching and type resolution.
"""

import pytest

from junit_switcheroo.core.matchers import AnnotationPattern, Marker, TypeResolver, find_annotation


def _class(frontend, source: str):
  unit = frontend.parse(source)
  return unit, unit.members[-1]


def test_resolver_explicit_import(frontend):
  unit = frontend.parse("import org.junit.runners.Parameterized;\nclass A {}\n")
  resolver = TypeResolver.for_unit(unit)

  assert resolver.candidates("Parameterized.Parameters") == ["org.junit.runners.Parameterized.Parameters"]
  assert resolver.resolves_to("Parameterized", "org.junit.runners.Parameterized")
  assert not resolver.resolves_to("Parameters", "org.junit.runners.Parameterized.Parameters")


def test_resolver_wildcard_and_package(frontend):
  unit = frontend.parse("package my.tests;\nimport org.junit.*;\nclass A {}\n")
  resolver = TypeResolver.for_unit(unit)

  assert resolver.candidates("Test") == ["org.junit.Test", "my.tests.Test"]
  assert resolver.resolves_to("org.junit.Test", "org.junit.Test")


def test_resolver_ignores_static_imports(frontend):
  unit = frontend.parse("import static org.junit.Assert.assertEquals;\nclass A {}\n")
  resolver = TypeResolver.for_unit(unit)
  assert resolver.candidates("assertEquals") == ["assertEquals"]


def test_pattern_parse_and_str():
  pattern = AnnotationPattern.parse("@org.junit.runner.RunWith(org.junit.runners.Parameterized.class)")
  assert pattern.type_name == "org.junit.runner.RunWith"
  assert pattern.class_argument == "org.junit.runners.Parameterized"
  assert pattern.simple_name == "RunWith"
  assert str(pattern) == "@org.junit.runner.RunWith(org.junit.runners.Parameterized.class)"

  assert str(AnnotationPattern.parse("@org.junit.Test")) == "@org.junit.Test"


@pytest.mark.parametrize("signature", ["org.junit.Test", "@org.junit.Test(", "@Foo(bar)"])
def test_pattern_parse_rejects_invalid(signature):
  with pytest.raises(ValueError):
    AnnotationPattern.parse(signature)


@pytest.mark.parametrize(
  "source, expected",
  [
    (
      "import org.junit.runner.RunWith;\nimport org.junit.runners.Parameterized;\n"
      "@RunWith(Parameterized.class) class A {}\n",
      True,
    ),
    ("import org.junit.runner.RunWith;\n@RunWith(org.junit.runners.Parameterized.class) class A {}\n", True),
    ("@org.junit.runner.RunWith(org.junit.runners.Parameterized.class) class A {}\n", True),
    ("import org.junit.runner.RunWith;\nimport org.junit.runners.Suite;\n@RunWith(Suite.class) class A {}\n", False),
    ("import org.junit.runner.RunWith;\n@RunWith class A {}\n", False),
    ("import my.RunWith;\nimport org.junit.runners.Parameterized;\n@RunWith(Parameterized.class) class A {}\n", False),
  ],
)
def test_runner_marker(frontend, source, expected):
  unit, cls = _class(frontend, source)
  resolver = TypeResolver.for_unit(unit)
  assert Marker.RUNNER.matches(cls.annotations[0], resolver) is expected


def test_find_annotation_nested_member_spelling(frontend):
  unit, cls = _class(
    frontend,
    "import org.junit.runners.Parameterized;\n"
    "class A {\n  @Deprecated @Parameterized.Parameters\n  void data() {}\n}\n",
  )
  resolver = TypeResolver.for_unit(unit)
  method = cls.members[0]

  found = find_annotation(method.annotations, resolver, Marker.PARAMETER, Marker.PARAMETERS)
  assert found is method.annotations[1]
  assert find_annotation(method.annotations, resolver, Marker.TEST) is None


def test_test_markers_distinguish_frameworks(frontend):
  unit, cls = _class(
    frontend,
    "import org.junit.jupiter.api.Test;\nclass A {\n  @Test void a() {}\n  @org.junit.Test void b() {}\n}\n",
  )
  resolver = TypeResolver.for_unit(unit)
  first, second = cls.members
  assert Marker.JUPITER_TEST.matches(first.annotations[0], resolver)
  assert not Marker.TEST.matches(first.annotations[0], resolver)
  assert Marker.TEST.matches(second.annotations[0], resolver)
