"""
Entry point for module execution (``python -m swagger_switcheroo``).

This module delegates execution to the CLI handler in ``swagger_switcheroo.cli.__main__``.
"""

import sys

from swagger_switcheroo.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
