"""
Batch conversion of many files.

Units are independent, so files are converted in a process pool when more
than one worker is configured and sequentially otherwise. Each worker builds
its own engine from the serialized configuration.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from junit_switcheroo.config import RuntimeConfig
from junit_switcheroo.core.conversion_result import ConversionResult
from junit_switcheroo.core.engine import MigrationEngine

logger = logging.getLogger(__name__)


def read_source(path: Path) -> str:
  """Reads a source file without translating its line endings."""
  with open(path, "rt", encoding="utf-8", newline="") as f:
    return f.read()


def convert_path(engine: MigrationEngine, path: Path) -> ConversionResult:
  """
  Reads and converts one file.

  Unreadable files are reported as failed results instead of raising.

  Args:
      engine: The engine to use.
      path: Java source file.

  Returns:
      ConversionResult: The result, with ``path`` set.
  """
  try:
    code = read_source(path)
  except (OSError, UnicodeDecodeError) as e:
    logger.error(f"Cannot read {path}: {e}")
    return ConversionResult(path=str(path), errors=[f"Read Error: {e}"], success=False)
  return engine.run(code, str(path))


def _convert_in_worker(job: Tuple[Dict[str, Any], str]) -> ConversionResult:
  config_data, path = job
  engine = MigrationEngine(RuntimeConfig.model_validate(config_data))
  return convert_path(engine, Path(path))


class BatchRunner:
  """
  Converts files, optionally in parallel.

  Attributes:
      config (RuntimeConfig): Shared configuration.
  """

  def __init__(self, config: RuntimeConfig):
    self.config = config

  def discover(self, root: Path) -> List[Path]:
    """
    Lists the files to convert below ``root``.

    Args:
        root: A file (returned as is) or a directory (matched with ``config.include``).

    Returns:
        List[Path]: Sorted file paths.
    """
    if root.is_file():
      return [root]
    return sorted(p for p in root.glob(self.config.include) if p.is_file())

  def run(self, paths: Sequence[Path]) -> List[ConversionResult]:
    """
    Converts files and returns results in input order.

    Args:
        paths: Files to convert.

    Returns:
        List[ConversionResult]: One result per path.
    """
    if self.config.workers > 1 and len(paths) > 1:
      logger.debug(f"Converting {len(paths)} files with {self.config.workers} workers")
      payload = self.config.model_dump()
      with ProcessPoolExecutor(max_workers=self.config.workers) as pool:
        return list(pool.map(_convert_in_worker, [(payload, str(p)) for p in paths]))

    engine = MigrationEngine(self.config)
    return [convert_path(engine, p) for p in paths]
