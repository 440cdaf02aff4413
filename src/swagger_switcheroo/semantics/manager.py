"""
SemanticsManager for the Annotation Mapping Table.

Loads and validates the JSON mapping table and answers the lookups the
rewriters need: the mapping of an old annotation kind, and whether a qualified
name belongs to either vocabulary.
"""

import json
from pathlib import Path
from typing import Iterable, Optional, Set

from pydantic import ValidationError

from swagger_switcheroo.semantics.paths import DEFAULT_TABLE, resolve_semantics_dir
from swagger_switcheroo.semantics.schema import AnnotationMapping, MappingTable


class SemanticsError(ValueError):
  """The mapping table is missing or malformed."""

  pass


class SemanticsManager:
  """
  Central store of annotation mappings.

  Args:
      table_path: Explicit JSON file to load. Defaults to the bundled table.
      extra_known: Additional qualified names to treat as existing types when
          resolving on-demand imports (e.g. `javax.ws.rs.Produces`).
  """

  def __init__(self, table_path: Optional[Path] = None, extra_known: Iterable[str] = ()):
    path = table_path or resolve_semantics_dir() / DEFAULT_TABLE
    self.table = self._load(path)
    self._known: Set[str] = set(extra_known)
    for mapping in self.table.annotations.values():
      self._known.add(mapping.source)
      if mapping.target:
        self._known.add(mapping.target)
      self._known.update(mapping.extras.values())
    for package, members in self.table.packages.items():
      self._known.update(f"{package}.{member}" for member in members)

  @staticmethod
  def _load(path: Path) -> MappingTable:
    try:
      with open(path, "rt", encoding="utf-8") as f:
        data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
      raise SemanticsError(f"Cannot read mapping table {path}: {e}") from e
    try:
      return MappingTable.model_validate(data)
    except ValidationError as e:
      raise SemanticsError(f"Invalid mapping table {path}: {e}") from e

  def get(self, kind: str) -> AnnotationMapping:
    """
    Returns the mapping for an old annotation kind.

    Args:
        kind: Simple name of the old annotation, e.g. `ApiOperation`.

    Raises:
        KeyError: If the kind is not in the table.
    """
    return self.table.annotations[kind]

  def package_members(self, package: str) -> Set[str]:
    """Simple names of the known members of an old-style package (empty if unknown)."""
    return set(self.table.packages.get(package, []))

  def is_known(self, qualified_name: str) -> bool:
    """True if the name belongs to either vocabulary or was registered as extra."""
    return qualified_name in self._known
