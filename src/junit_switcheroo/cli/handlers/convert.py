"""
Convert and Check Command Handlers.

This module implements the logic for the `junit-switcheroo convert` and
`junit-switcheroo check` commands. It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides).
2. File discovery and (parallel) conversion via the BatchRunner.
3. Output writing, diffs and trace logging.
4. A summary report of warnings and failures.
"""

import difflib
import json
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError
from rich.table import Table

from junit_switcheroo.config import RuntimeConfig
from junit_switcheroo.core.batch import BatchRunner, read_source
from junit_switcheroo.core.conversion_result import ConversionResult
from junit_switcheroo.utils.console import console, log_error, log_info, log_success, log_warning


def _load_config(
  input_path: Path,
  recipes: Optional[List[str]],
  workers: Optional[int] = None,
  strict: Optional[bool] = None,
) -> Optional[RuntimeConfig]:
  try:
    return RuntimeConfig.load(
      recipes=recipes,
      workers=workers,
      strict_mode=strict,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except ValidationError as e:
    log_error(f"Invalid configuration: {e}")
    return None


def handle_convert(
  input_path: Path,
  output_path: Optional[Path],
  recipes: Optional[List[str]],
  workers: Optional[int],
  strict: Optional[bool],
  show_diff: bool = False,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'convert' command execution.

  A single file without ``--out`` is printed to stdout. A directory without
  ``--out`` is rewritten in place; with ``--out`` the tree is mirrored there.

  Args:
      input_path: Java file or directory to convert.
      output_path: Destination file or directory.
      recipes: Override for the enabled recipes.
      workers: Override for the worker count.
      strict: Override for strict mode.
      show_diff: Print a unified diff of every changed file.
      json_trace_path: Optional path to dump the execution trace JSON.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  config = _load_config(input_path, recipes, workers, strict)
  if config is None:
    return 1

  runner = BatchRunner(config)
  paths = runner.discover(input_path)
  if not paths:
    log_warning(f"No files matching '{config.include}' found in {input_path}")
    return 0

  if input_path.is_dir():
    log_info(f"Processing {len(paths)} files from [path]{input_path}[/path]...")
  results = runner.run(paths)

  for src_file, result in zip(paths, results):
    if show_diff and result.changed:
      _print_diff(src_file, result)
    if not result.success:
      continue
    _emit(input_path, src_file, output_path, result)

  if json_trace_path:
    _write_trace(json_trace_path, paths, results)

  _print_batch_summary({str(p): r for p, r in zip(paths, results)})
  return 0 if all(r.success for r in results) else 1


def handle_check(input_path: Path, recipes: Optional[List[str]]) -> int:
  """
  Handles the 'check' command: reports files a conversion would change.

  Args:
      input_path: Java file or directory to inspect.
      recipes: Override for the enabled recipes.

  Returns:
      int: 0 if nothing would change, 1 otherwise (or on failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  config = _load_config(input_path, recipes)
  if config is None:
    return 1

  runner = BatchRunner(config)
  paths = runner.discover(input_path)
  results = runner.run(paths)

  pending = [r for r in results if r.changed]
  for result in pending:
    log_warning(f"Would migrate [path]{result.path}[/path] ({', '.join(result.applied_recipes)})")
  for result in results:
    if not result.success:
      log_error(f"Cannot check [path]{result.path}[/path]: {'; '.join(result.errors)}")

  if pending or not all(r.success for r in results):
    return 1
  log_success(f"{len(results)} file(s) already migrated.")
  return 0


def _emit(input_root: Path, src_file: Path, output_path: Optional[Path], result: ConversionResult) -> None:
  if input_root.is_file():
    if output_path is None:
      print(result.code)
      return
    dest = output_path
  elif output_path is None:
    if not result.changed:
      return
    dest = src_file
  else:
    dest = output_path / src_file.relative_to(input_root)

  dest.parent.mkdir(parents=True, exist_ok=True)
  with open(dest, "wt", encoding="utf-8", newline="") as f:
    f.write(result.code)
  if result.changed:
    log_success(f"Migrated: [path]{src_file}[/path] -> [path]{dest}[/path]")


def _print_diff(src_file: Path, result: ConversionResult) -> None:
  original = read_source(src_file)
  diff = difflib.unified_diff(
    original.splitlines(keepends=True),
    result.code.splitlines(keepends=True),
    fromfile=f"a/{src_file}",
    tofile=f"b/{src_file}",
  )
  console.print("".join(diff), markup=False, highlight=False)


def _write_trace(json_trace_path: Path, paths: List[Path], results: List[ConversionResult]) -> None:
  if len(results) == 1:
    payload = results[0].trace_events
  else:
    payload = {str(p): r.trace_events for p, r in zip(paths, results)}
  try:
    json_trace_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_trace_path, "wt", encoding="utf-8") as f:
      json.dump(payload, f, indent=2)
    log_info(f"Trace saved to [path]{json_trace_path}[/path]")
  except OSError as e:
    log_error(f"Failed to write trace: {e}")


def _print_batch_summary(results: Dict[str, ConversionResult]) -> None:
  """
  Renders a summary table of conversion results to the console.

  Args:
      results: Dictionary mapping file names to conversion results.
  """
  total = len(results)
  changed = sum(1 for r in results.values() if r.changed)
  failures = sum(1 for r in results.values() if not r.success or r.has_errors)

  if failures == 0:
    log_success(f"Batch Complete: {changed}/{total} files migrated, no issues.")
    return

  table = Table(title="Migration Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success and not res.has_errors:
      continue
    status = "❌ Failed" if not res.success else "⚠️ Warnings"
    issues = "; ".join(res.errors) if res.errors else "Unknown Error"
    table.add_row(filename, status, issues)

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {changed} migrated, {failures} with issues, {total} total.")
