"""
junit-switcheroo Package.

A deterministic source-to-source migrator that rewrites JUnit 4 test idioms
(the ``Parameterized`` runner and the ``ExpectedException`` rule) into their
JUnit Jupiter equivalents, preserving all unrelated code and formatting.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import junit_switcheroo as jsw
    migrated = jsw.convert(java_source)

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from junit_switcheroo import MigrationEngine, RuntimeConfig

    config = RuntimeConfig(recipes=["expected_exception"], strict_mode=True)
    engine = MigrationEngine(config=config)
    res = engine.run(java_source, "FooTest.java")

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import List, Optional

from junit_switcheroo.config import RuntimeConfig
from junit_switcheroo.core.conversion_result import ConversionResult
from junit_switcheroo.core.engine import MigrationEngine

__version__ = "0.1.0"


def convert(code: str, recipes: Optional[List[str]] = None, strict: bool = False) -> str:
  """
  Migrates a string of Java test code.

  This is a convenience wrapper around the `MigrationEngine`. For files and
  directories use the ``junit-switcheroo`` CLI or `BatchRunner`.

  Args:
      code (str): Java source code.
      recipes (List[str], optional): Recipes to apply. All registered recipes if None.
      strict (bool): If True, recipe warnings make the conversion fail.

  Returns:
      str: The migrated source code.

  Raises:
      ValueError: If the code does not parse, or strict mode rejected a warning.
  """
  config = RuntimeConfig(strict_mode=strict) if recipes is None else RuntimeConfig(recipes=recipes, strict_mode=strict)
  result = MigrationEngine(config=config).run(code)

  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Migration failed:\n{error_msg}")

  return result.code


__all__ = [
  "ConversionResult",
  "MigrationEngine",
  "RuntimeConfig",
  "convert",
  "__version__",
]
