"""
CLI Command Handlers Facade.

This module re-exports handlers from `junit_switcheroo.cli.handlers` so the
dispatcher (and tests patching it) only depend on one module.
"""

from junit_switcheroo.cli.handlers.convert import (
  handle_check,
  handle_convert,
  _print_batch_summary,
)
from junit_switcheroo.cli.handlers.recipes import handle_recipes

__all__ = [
  "_print_batch_summary",
  "handle_check",
  "handle_convert",
  "handle_recipes",
]
