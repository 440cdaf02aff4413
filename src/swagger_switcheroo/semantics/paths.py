"""
Path Resolution Utilities for Semantics.

Handles locating the directory holding the mapping JSON files, within the
source tree or the installed package.
"""

from importlib.resources import files
from pathlib import Path

DEFAULT_TABLE = "swagger_v2.json"


def resolve_semantics_dir() -> Path:
  """
  Locates the directory containing the mapping JSON definitions.

  Prioritizes the local file system (relative to this file) so tests and
  editable installs read the source of truth. Falls back to package resources
  for installed distributions.

  Returns:
      Path: The absolute path to the 'semantics' directory.
  """
  # 1. Local Source Priority (Dev/Test/Editable)
  local_path = Path(__file__).parent
  if (local_path / DEFAULT_TABLE).exists():
    return local_path

  # 2. Installed Package Fallback
  return Path(str(files("swagger_switcheroo.semantics")))
