"""
Main Entry Point for the swagger-switcheroo CLI.

This module handles argument parsing and dispatches to the command handlers
in `swagger_switcheroo.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from swagger_switcheroo import __version__
from swagger_switcheroo.cli.handlers.convert import handle_convert
from swagger_switcheroo.config import parse_cli_key_values


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="swagger-switcheroo: Swagger 1.x to OpenAPI 3 annotation converter")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Rewrite Swagger annotations in Java files, in place")
  cmd_conv.add_argument("paths", type=Path, nargs="+", help="Java source files or directories")
  cmd_conv.add_argument(
    "--dry-run",
    action="store_true",
    default=None,
    help="Convert and report without writing files (Overrides config)",
  )
  cmd_conv.add_argument(
    "--config",
    nargs="*",
    help="Settings in key=value format (e.g. max_line_length=120 prune_imports=false)",
  )

  args = parser.parse_args(argv)

  if args.command == "convert":
    return handle_convert(args.paths, args.dry_run, parse_cli_key_values(args.config))

  parser.print_help()
  return 1


if __name__ == "__main__":
  sys.exit(main())
