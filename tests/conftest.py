"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A shared mapping table, and helpers that parse or convert Java snippets.
- Console capture for asserting on CLI and log output.
"""

import sys
import textwrap
from pathlib import Path
from typing import Callable, List

import pytest

# Add src to path so we can import 'swagger_switcheroo' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from rich.console import Console  # noqa: E402

from swagger_switcheroo.analysis.type_index import TypeIndex  # noqa: E402
from swagger_switcheroo.config import DEFAULT_PRODUCES, RuntimeConfig  # noqa: E402
from swagger_switcheroo.core.conversion_result import ConversionResult  # noqa: E402
from swagger_switcheroo.core.engine import ConversionEngine  # noqa: E402
from swagger_switcheroo.java.frontend import JavaFrontend  # noqa: E402
from swagger_switcheroo.java.nodes import CompilationUnit  # noqa: E402
from swagger_switcheroo.semantics.manager import SemanticsManager  # noqa: E402
from swagger_switcheroo.utils.console import reset_console, set_console  # noqa: E402


def java(source: str) -> str:
  """Dedents a triple-quoted Java snippet and drops the leading newline."""
  return textwrap.dedent(source).lstrip("\n")


@pytest.fixture(scope="session")
def semantics() -> SemanticsManager:
  """The bundled mapping table, loaded once."""
  return SemanticsManager(extra_known=DEFAULT_PRODUCES)


@pytest.fixture
def parse(semantics) -> Callable[[str], CompilationUnit]:
  """Parses a Java snippet (dedented) into a compilation unit."""
  frontend = JavaFrontend(known=semantics.is_known)

  def _parse(source: str) -> CompilationUnit:
    return frontend.parse(java(source))

  return _parse


@pytest.fixture
def convert(semantics) -> Callable[..., ConversionResult]:
  """
  Converts the first of the given snippets. All snippets are indexed together,
  so later ones can declare types the first one refers to.
  """

  def _convert(source: str, *others: str, config: RuntimeConfig = None) -> ConversionResult:
    engine = ConversionEngine(semantics, config=config)
    units: List[CompilationUnit] = [engine.parse(java(s)) for s in (source, *others)]
    engine.type_index = TypeIndex.build(units)
    return engine.convert(units[0])

  return _convert


@pytest.fixture
def recorded_console():
  """Routes console and log output to a recording console for the test."""
  recorder = Console(record=True, width=200, force_terminal=False)
  set_console(recorder)
  yield recorder
  reset_console()
