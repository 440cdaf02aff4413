"""
Edit Log Actions.

Every mutation of a `CompilationUnit` is mirrored as a `PatchAction` in the
unit's edit log. The tree is the source of truth for analysis; the edit log is
what `SourcePatcher` replays against the original text, so unchanged regions
(method bodies, comments, whitespace) survive byte-for-byte.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class PatchAction:
  """Base class for patch instructions."""

  node: Any


@dataclass
class InsertAction(PatchAction):
  """
  Instruction to place a new node next to an existing anchor.

  Attributes:
      anchor: The node whose position determines where the new node lands.
          Either an original node with a span, or the unit-level `PackageDecl`.
      after: If True the node is placed after the anchor, otherwise before it.
      priority: Orders several inserts sharing one position. Lower goes first.
  """

  anchor: Any = None
  after: bool = False
  priority: int = 10


@dataclass
class DeleteAction(PatchAction):
  """
  Instruction to remove an original node from the source text.
  The node's trailing whitespace goes with it.
  """

  pass
