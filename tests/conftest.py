"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Shared front end / engine fixtures.
- Console isolation so CLI tests do not leak log handlers.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'junit_switcheroo' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from junit_switcheroo.config import RuntimeConfig  # noqa: E402
from junit_switcheroo.core.engine import MigrationEngine  # noqa: E402
from junit_switcheroo.frontend.java import JavaFrontend  # noqa: E402
from junit_switcheroo.utils.console import reset_console  # noqa: E402


@pytest.fixture(scope="session")
def frontend():
  return JavaFrontend()


@pytest.fixture
def engine(frontend):
  """Engine with every recipe and default settings, independent of any pyproject.toml."""
  return MigrationEngine(config=RuntimeConfig(), frontend=frontend)


@pytest.fixture
def migrate(engine):
  """Runs the engine and returns the migrated code, failing on parse errors."""

  def _migrate(code: str) -> str:
    result = engine.run(code, "Fixture.java")
    assert result.success, result.errors
    return result.code

  return _migrate


@pytest.fixture(autouse=True)
def isolate_console():
  yield
  reset_console()
