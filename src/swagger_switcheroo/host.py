"""
Batch Conversion Host.

Runs the engine over a set of Java files:

1. Discovers `.java` files below the given paths.
2. Parses every file once and indexes their types, so that generic return
   types declared in other files of the batch can be concretized.
3. Converts the files one by one, each inside a `FileTransaction`. A file is
   written only if its conversion succeeded and changed something; a failure
   leaves it untouched and the batch moves on.

Cancellation is checked between files, never inside one.
"""

import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field
from rich.markup import escape

from swagger_switcheroo.analysis.type_index import TypeIndex
from swagger_switcheroo.config import RuntimeConfig
from swagger_switcheroo.core.conversion_result import ConversionResult
from swagger_switcheroo.core.engine import ConversionEngine
from swagger_switcheroo.core.errors import FrontendError
from swagger_switcheroo.java.nodes import CompilationUnit
from swagger_switcheroo.semantics.manager import SemanticsManager
from swagger_switcheroo.utils.console import log_error, log_info, log_success, log_warning

ProgressSink = Callable[[int, int, Path], None]


class FileTransaction:
  """
  Writes one file atomically, or not at all.

  Used as a context manager: text staged with `commit` is written on a clean
  exit (through a temporary file and `os.replace`). Leaving the block with an
  exception, or without a commit, leaves the file as it was.

  Args:
      path: The file to rewrite.
      encoding: Text encoding.
      dry_run: Never write, even on commit.
  """

  def __init__(self, path: Path, encoding: str = "utf-8", dry_run: bool = False):
    self.path = path
    self.encoding = encoding
    self.dry_run = dry_run
    self._staged: Optional[str] = None
    self.written = False

  def read(self) -> str:
    # newline="" keeps \r\n intact
    with open(self.path, "rt", encoding=self.encoding, newline="") as f:
      return f.read()

  def commit(self, text: str) -> None:
    """Stages the new file content."""
    self._staged = text

  def rollback(self) -> None:
    self._staged = None

  def __enter__(self) -> "FileTransaction":
    return self

  def __exit__(self, exc_type, exc, tb) -> bool:
    if exc_type is None and self._staged is not None and not self.dry_run:
      self._write(self._staged)
    self._staged = None
    return False

  def _write(self, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
    try:
      with os.fdopen(fd, "wt", encoding=self.encoding, newline="") as f:
        f.write(text)
      os.replace(tmp_name, self.path)
    except BaseException:
      if os.path.exists(tmp_name):
        os.unlink(tmp_name)
      raise
    self.written = True


class BatchReport(BaseModel):
  """
  Outcome of a batch run. Paths are stored as strings.
  """

  converted: List[str] = Field(default_factory=list, description="Files rewritten (or that would be, in dry-run).")
  unchanged: List[str] = Field(default_factory=list, description="Files without old-style annotations.")
  failed: Dict[str, List[str]] = Field(default_factory=dict, description="Files left untouched after a fault.")
  review: Dict[str, List[str]] = Field(default_factory=dict, description="Marker notes per converted file.")
  cancelled: bool = Field(False, description="True if the run stopped before the last file.")

  @property
  def total(self) -> int:
    return len(self.converted) + len(self.unchanged) + len(self.failed)

  @property
  def success(self) -> bool:
    return not self.failed


def discover(paths: Iterable[Path]) -> List[Path]:
  """
  Collects the Java files named by, or contained in, `paths`.

  Args:
      paths: Files and directories.

  Returns:
      List[Path]: Unique `.java` files, sorted.
  """
  found = set()
  for path in paths:
    if path.is_dir():
      found.update(p for p in path.rglob("*.java") if p.is_file())
    elif path.suffix == ".java":
      found.add(path)
  return sorted(found)


class BatchConverter:
  """
  Converts many files sharing one type index.

  Args:
      config: Runtime settings.
      semantics: The mapping table; loaded once for the whole batch.
      is_cancelled: Polled before each file.
      progress: Called with `(index, total, path)` after each file.
  """

  def __init__(
    self,
    config: Optional[RuntimeConfig] = None,
    semantics: Optional[SemanticsManager] = None,
    is_cancelled: Optional[Callable[[], bool]] = None,
    progress: Optional[ProgressSink] = None,
  ):
    self.config = config or RuntimeConfig()
    self.semantics = semantics or SemanticsManager(extra_known=self.config.produces_annotations)
    self.is_cancelled = is_cancelled or (lambda: False)
    self.progress = progress

  def run(self, paths: Iterable[Path]) -> BatchReport:
    """
    Converts every Java file below `paths`.

    Args:
        paths: Files and directories.

    Returns:
        BatchReport: Per-file outcomes.
    """
    report = BatchReport()
    files = discover(paths)
    if not files:
      log_warning("No .java files found")
      return report

    log_info(f"Indexing {len(files)} files...")
    units: Dict[Path, CompilationUnit] = {}
    engine = ConversionEngine(self.semantics, self.config)
    for path in files:
      try:
        with open(path, "rt", encoding=self.config.encoding, newline="") as f:
          source = f.read()
        units[path] = engine.parse(source, path)
      except (OSError, UnicodeDecodeError, FrontendError) as e:
        report.failed[str(path)] = [str(e)]
        log_error(f"Cannot read [path]{path}[/path]: {escape(str(e))}")

    engine.type_index = TypeIndex.build(units.values())

    total = len(files)
    for i, path in enumerate(files, start=1):
      if self.is_cancelled():
        report.cancelled = True
        log_warning(f"Cancelled after {i - 1} of {total} files")
        break
      unit = units.get(path)
      if unit is not None:
        self._convert_file(engine, path, unit, report)
      if self.progress:
        self.progress(i, total, path)

    return report

  def _convert_file(self, engine: ConversionEngine, path: Path, unit: CompilationUnit, report: BatchReport) -> None:
    key = str(path)
    try:
      with FileTransaction(path, self.config.encoding, self.config.dry_run) as transaction:
        result: ConversionResult = engine.convert(unit)
        if not result.success:
          transaction.rollback()
          report.failed[key] = result.errors
          for error in result.errors:
            log_error(escape(error))
          return
        if not result.changed:
          report.unchanged.append(key)
          return
        transaction.commit(result.code)
    except Exception as e:
      report.failed[key] = [str(e)]
      log_error(f"Failed to convert [path]{path}[/path]: {escape(str(e))}")
      return

    report.converted.append(key)
    if result.warnings:
      report.review[key] = result.warnings
    verb = "Would convert" if self.config.dry_run else "Converted"
    log_success(f"{verb} [path]{path}[/path]")
