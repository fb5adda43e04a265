"""
Entry point for module execution (``python -m junit_switcheroo``).

This module delegates execution to the CLI handler in ``junit_switcheroo.cli.__main__``.
"""

import sys
from junit_switcheroo.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
