"""
Main Entry Point for junit-switcheroo CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `junit_switcheroo.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from junit_switcheroo import __version__
from junit_switcheroo.cli import commands
from junit_switcheroo.utils.console import set_verbosity


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="junit-switcheroo: JUnit 4 to JUnit Jupiter migrator")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  verbosity = parser.add_mutually_exclusive_group()
  verbosity.add_argument("-v", "--verbose", action="store_true", help="Show per-class decisions")
  verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Migrate a Java file or directory")
  cmd_conv.add_argument("path", type=Path, help="Input source file or directory")
  cmd_conv.add_argument(
    "--out",
    type=Path,
    help="Output destination (file or dir). Directories are rewritten in place when omitted.",
  )
  cmd_conv.add_argument(
    "--recipe",
    dest="recipes",
    action="append",
    default=None,
    help="Recipe to apply (repeatable, default: all from config)",
  )
  cmd_conv.add_argument("--workers", type=int, default=None, help="Worker processes for directories")
  cmd_conv.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Fail a file on any recipe warning (Overrides config)",
  )
  cmd_conv.add_argument("--diff", action="store_true", help="Print a unified diff of every changed file")
  cmd_conv.add_argument(
    "--json-trace", type=Path, default=None, help="Dump full execution trace (events, mutations) to a JSON file."
  )

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Exit with 1 if any file would be migrated")
  cmd_check.add_argument("path", type=Path, help="Input source file or directory")
  cmd_check.add_argument("--recipe", dest="recipes", action="append", default=None, help="Recipe to apply")

  # --- Command: RECIPES ---
  subparsers.add_parser("recipes", help="List available recipes")

  args = parser.parse_args(argv)
  set_verbosity(verbose=args.verbose, quiet=args.quiet)

  if args.command == "convert":
    return commands.handle_convert(
      args.path, args.out, args.recipes, args.workers, args.strict, args.diff, args.json_trace
    )

  elif args.command == "check":
    return commands.handle_check(args.path, args.recipes)

  elif args.command == "recipes":
    return commands.handle_recipes()

  return 0


if __name__ == "__main__":
  sys.exit(main())
