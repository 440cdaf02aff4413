"""
Convert Command Handler.

This module implements the logic for the `swagger-switcheroo convert` command.
It orchestrates:
1. Configuration loading (pyproject.toml plus CLI overrides).
2. The batch run over the given files and directories.
3. The summary report.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from swagger_switcheroo.config import RuntimeConfig
from swagger_switcheroo.host import BatchConverter, BatchReport
from swagger_switcheroo.semantics.manager import SemanticsError
from swagger_switcheroo.utils.console import console, log_error, log_success, log_warning


def handle_convert(paths: List[Path], dry_run: Optional[bool], settings: Dict[str, Any]) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      paths: Java files or directories to convert in place.
      dry_run: If True, nothing is written. None defers to the configuration.
      settings: `key=value` overrides from `--config`.

  Returns:
      int: Exit code (0 if every file converted, 1 otherwise).
  """
  missing = [p for p in paths if not p.exists()]
  for path in missing:
    log_error(f"Input not found: {path}")
  if missing:
    return 1

  anchor = paths[0] if paths[0].is_dir() else paths[0].parent
  try:
    config = RuntimeConfig.load(overrides=settings, dry_run=dry_run, search_path=anchor)
    converter = BatchConverter(config)
  except (ValidationError, SemanticsError) as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  report = converter.run(paths)
  _print_batch_summary(report)
  return 0 if report.success and not report.cancelled else 1


def _print_batch_summary(report: BatchReport) -> None:
  """
  Renders a summary table of the batch to the console.

  Args:
      report: Outcome of the batch run.
  """
  if report.total == 0:
    return

  if not report.failed and not report.review:
    log_success(
      f"Batch Complete: {len(report.converted)} converted, {len(report.unchanged)} unchanged of {report.total} files."
    )
    return

  table = Table(title="Conversion Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues")

  for filename, errors in report.failed.items():
    table.add_row(filename, "❌ Failed", "[red]" + escape("; ".join(errors)) + "[/red]")
  for filename, notes in report.review.items():
    table.add_row(filename, "⚠️ Review", escape("; ".join(notes)))

  console.print(table)
  console.print(
    f"\n[bold]Summary:[/bold] {len(report.converted)} converted, {len(report.unchanged)} unchanged, "
    f"{len(report.failed)} failed."
  )
  if report.review:
    log_warning("Search the converted files for 'TODO' markers to finish the review.")
