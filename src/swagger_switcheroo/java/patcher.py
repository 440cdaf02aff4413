"""
Source Patcher.

Replays a unit's edit log against its original text. Untouched regions are
copied verbatim, so a unit with an empty edit log renders byte-identical.

Layout rules:
- An inserted node takes the place of its anchor. If the anchor starts its line,
  the node gets a line of its own at the anchor's indentation; otherwise it is
  placed inline, followed by a space.
- A deleted node that sits alone on its line takes the whole line with it;
  an inline one takes its trailing spaces. Removing every import also removes
  the blank line that followed them.
- Nodes inserted after a member (synthesized classes) follow it after a blank line.
- New imports go after the last import, or after the package statement.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple

from swagger_switcheroo.java.edits import DeleteAction, InsertAction
from swagger_switcheroo.java.nodes import (
  Annotation,
  ClassDecl,
  CompilationUnit,
  ImportDecl,
  JavaNode,
  MethodDecl,
  PackageDecl,
  Span,
)


class LineLayout(NamedTuple):
  """Where a node sits on its line."""

  own_line: bool
  indent: str
  line_start: int


def line_layout(source: str, offset: int) -> LineLayout:
  """
  Describes the line containing `offset`.

  Args:
      source: Full source text.
      offset: Character offset of a node.

  Returns:
      LineLayout: Whether only whitespace precedes the node on its line, the
      indentation of that line, and the offset the line starts at.
  """
  line_start = source.rfind("\n", 0, offset) + 1
  prefix = source[line_start:offset]
  if prefix.strip():
    return LineLayout(False, prefix[: len(prefix) - len(prefix.lstrip())], line_start)
  return LineLayout(True, prefix, line_start)


@dataclass
class _Replacement:
  start: int
  end: int
  text: str
  priority: int
  seq: int


class SourcePatcher:
  """
  Renders a `CompilationUnit` back to source text.

  Args:
      unit: The converted unit.
      indent_unit: One indentation level for generated code.
  """

  def __init__(self, unit: CompilationUnit, indent_unit: str = "    "):
    self.unit = unit
    self.source = unit.source
    self.indent_unit = indent_unit

  def render(self) -> str:
    """
    Applies the edit log.

    Returns:
        str: The patched source.
    """
    if not self.unit.edits:
      return self.source

    replacements: List[_Replacement] = []
    deleted = {id(a.node) for a in self.unit.edits if isinstance(a, DeleteAction)}
    last_import = self._last_import_removed()
    import_groups: List[Tuple[Optional[JavaNode], List[ImportDecl]]] = []

    for seq, action in enumerate(self.unit.edits):
      if isinstance(action, DeleteAction):
        start, end = self._deletion_region(action.node.span)
        if action.node is last_import:
          end = self._skip_blank_line(end)
        replacements.append(_Replacement(start, end, "", 0, seq))
      elif isinstance(action, InsertAction) and isinstance(action.node, ImportDecl):
        for anchor, group in import_groups:
          if anchor is action.anchor:
            group.append(action.node)
            break
        else:
          import_groups.append((action.anchor, [action.node]))
      elif isinstance(action, InsertAction) and action.after:
        replacements.append(self._insert_after(action, seq))
      elif isinstance(action, InsertAction):
        replacements.append(self._insert_before(action, seq))

    for anchor, group in import_groups:
      replacements.append(self._insert_imports(anchor, group, id(anchor) in deleted, len(replacements) + len(self.unit.edits)))

    return self._apply(replacements)

  # --- Geometry ---

  def _deletion_region(self, span: Span) -> Tuple[int, int]:
    start, end = span
    after = end
    while after < len(self.source) and self.source[after] in " \t":
      after += 1
    layout = line_layout(self.source, start)
    if layout.own_line and (after == len(self.source) or self.source[after] in "\r\n"):
      if self.source.startswith("\r\n", after):
        after += 2
      elif after < len(self.source):
        after += 1
      return layout.line_start, after
    return start, after

  def _skip_blank_line(self, offset: int) -> int:
    end = offset
    while end < len(self.source) and self.source[end] in " \t":
      end += 1
    if self.source.startswith("\r\n", end):
      return end + 2
    if self.source.startswith("\n", end):
      return end + 1
    return offset

  def _last_import_removed(self) -> Optional[ImportDecl]:
    """The last deleted import, when the unit is left with no imports at all."""
    if self.unit.imports:
      return None
    removed = [a.node for a in self.unit.edits if isinstance(a, DeleteAction) and isinstance(a.node, ImportDecl)]
    return max(removed, key=lambda i: i.span.start, default=None)

  # --- Inserts ---

  def _render_node(self, node: JavaNode, indent: str) -> str:
    if isinstance(node, (Annotation, ClassDecl, MethodDecl)):
      return node.render(indent, self.indent_unit)
    return str(node)

  def _insert_before(self, action: InsertAction, seq: int) -> _Replacement:
    layout = line_layout(self.source, action.anchor.span.start)
    text = self._render_node(action.node, layout.indent)
    if layout.own_line:
      return _Replacement(layout.line_start, layout.line_start, f"{layout.indent}{text}\n", action.priority, seq)
    return _Replacement(action.anchor.span.start, action.anchor.span.start, f"{text} ", action.priority, seq)

  def _insert_after(self, action: InsertAction, seq: int) -> _Replacement:
    anchor_span = action.anchor.span
    indent = line_layout(self.source, anchor_span.start).indent
    text = self._render_node(action.node, indent)
    return _Replacement(anchor_span.end, anchor_span.end, f"\n\n{indent}{text}", action.priority, seq)

  def _insert_imports(
    self, anchor: Optional[JavaNode], imports: List[ImportDecl], replaces_anchor: bool, seq: int
  ) -> _Replacement:
    lines = "\n".join(str(i) for i in imports)
    if replaces_anchor:
      return _Replacement(anchor.span.start, anchor.span.start, f"{lines}\n", 10, seq)
    if anchor is None:
      return _Replacement(0, 0, f"{lines}\n\n", 10, seq)
    lead = "\n\n" if isinstance(anchor, PackageDecl) else "\n"
    return _Replacement(anchor.span.end, anchor.span.end, f"{lead}{lines}", 10, seq)

  # --- Application ---

  def _apply(self, replacements: List[_Replacement]) -> str:
    ordered = sorted(replacements, key=lambda r: (r.start, r.end > r.start, r.priority, r.seq))
    out: List[str] = []
    cursor = 0
    for replacement in ordered:
      start = max(replacement.start, cursor)
      out.append(self.source[cursor:start])
      out.append(replacement.text)
      cursor = max(cursor, start, replacement.end)
    out.append(self.source[cursor:])
    return "".join(out)


def render_unit(unit: CompilationUnit, indent_unit: str = "    ") -> str:
  """Convenience wrapper around `SourcePatcher.render`."""
  return SourcePatcher(unit, indent_unit).render()
