"""
Post-Process Pass.

Runs once per unit after the walk, and only if the walk inserted anything:

1. **Import pruning**: imports that were referenced before the conversion and
   no longer are (their only uses sat in deleted annotations) are removed.
2. **Reference shortening**: fully qualified names inside the inserted nodes
   become simple names, importing them where needed. A simple name that would
   clash with another visible or still-used type stays qualified.
3. **Formatting**: inserted annotations that would overflow the configured line
   length are wrapped one attribute per line.

Pruning runs before new imports are added, so added imports are anchored on
an import that survives.
"""

from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Set

from swagger_switcheroo.config import RuntimeConfig
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.java.edits import DeleteAction, InsertAction
from swagger_switcheroo.java.nodes import (
  Annotation,
  ArrayValue,
  ClassDecl,
  ClassLiteral,
  CompilationUnit,
  Expression,
  ImportDecl,
  JavaNode,
  MethodDecl,
  TypeRef,
)
from swagger_switcheroo.java.patcher import line_layout


class ReferenceShortener:
  """
  Replaces qualified names in new nodes with simple names.

  Args:
      unit: The unit the nodes are inserted into.
      remaining: Identifier counts of the code that stays.
      known: Tells whether a qualified name exists, so that types of the unit's
          package that are visible without import are not shadowed.
  """

  def __init__(self, unit: CompilationUnit, remaining: Counter, known: Optional[Callable[[str], bool]] = None):
    self.unit = unit
    self.remaining = remaining
    self.known = known or (lambda _: False)
    self.imports_needed: List[str] = []
    self.visible: Dict[str, str] = {}
    for declaration in unit.imports:
      if not declaration.wildcard and not declaration.static:
        self.visible[declaration.simple_name] = declaration.name
    for declared in unit.iter_classes():
      self.visible[declared.name] = declared.qualified_name

  def shorten(self, qualified: str) -> str:
    """
    Returns the name to emit for `qualified`, registering an import if needed.
    """
    if "." not in qualified:
      return qualified
    package, simple = qualified.rsplit(".", 1)
    owner = self.visible.get(simple)
    if owner == qualified:
      return simple
    if owner is not None or self.remaining[simple]:
      return qualified
    sibling = f"{self.unit.package_name}.{simple}" if self.unit.package_name else simple
    if sibling != qualified and self.known(sibling):
      return qualified

    self.visible[simple] = qualified
    declared = {c.qualified_name for c in self.unit.iter_classes()}
    if package not in ("java.lang", self.unit.package_name) and qualified not in declared:
      self.imports_needed.append(qualified)
    return simple

  def visit(self, node: JavaNode) -> None:
    """Shortens every builder-qualified name reachable from `node`."""
    if isinstance(node, Annotation):
      if node.span is None and node.qualified_name:
        node.name = self.shorten(node.qualified_name)
      for _, value in node.items():
        self.visit(value)
    elif isinstance(node, ArrayValue):
      for item in node.items:
        self.visit(item)
    elif isinstance(node, ClassLiteral):
      self._visit_type(node.type)
    elif isinstance(node, ClassDecl):
      if node.extends is not None:
        self._visit_type(node.extends)
      for member in node.members:
        self.visit(member)
    elif isinstance(node, MethodDecl):
      for parameter in node.parameters:
        self._visit_type(parameter.type)

  def _visit_type(self, ref: TypeRef) -> None:
    for node in ref.iter_refs():
      if node.qualified_name and node.name == node.qualified_name:
        node.name = self.shorten(node.qualified_name)


class PostProcessPass:
  """
  Normalizes the nodes a conversion inserted.

  Args:
      config: Line length, indentation and pruning settings.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None):
    self.config = config or RuntimeConfig()

  def run(self, ctx: ConversionContext) -> bool:
    """
    Processes `ctx.pending`. A no-op when nothing was inserted.

    Args:
        ctx: The context of the converted unit.

    Returns:
        bool: True if the pass ran.
    """
    if not ctx.pending:
      return False
    unit = ctx.unit

    # 1. What the remaining code references
    deleted = [a.node.span for a in unit.edits if isinstance(a, DeleteAction)]
    remaining = unit.identifier_counts(excluded=deleted)
    carried = Counter(_source_names(ctx.pending))

    # 2. Prune
    if self.config.prune_imports:
      before = unit.identifier_counts()
      after = remaining + carried
      for declaration in list(unit.imports):
        if self._is_unused(ctx, declaration, before, after):
          unit.remove_import(declaration)

    # 3. Shorten
    shortener = ReferenceShortener(unit, remaining + carried, known=lambda name: name in ctx.index)
    for node in ctx.pending:
      shortener.visit(node)
    for name in shortener.imports_needed:
      unit.add_import(name)

    # 4. Format
    self._wrap_long_annotations(unit)
    return True

  def _is_unused(self, ctx: ConversionContext, declaration: ImportDecl, before: Counter, after: Counter) -> bool:
    if declaration.wildcard:
      if declaration.static:
        return False
      members = ctx.semantics.package_members(declaration.name)
      return bool(members) and any(before[m] for m in members) and not any(after[m] for m in members)
    name = declaration.simple_name
    return before[name] > 0 and after[name] == 0

  def _wrap_long_annotations(self, unit: CompilationUnit) -> None:
    limit = self.config.max_line_length
    for action in unit.edits:
      if not isinstance(action, InsertAction) or action.after or not isinstance(action.node, Annotation):
        continue
      layout = line_layout(unit.source, action.anchor.span.start)
      if not layout.own_line:
        continue
      if len(layout.indent) + len(action.node.render(layout.indent, self.config.indent)) > limit:
        action.node.wrapped = True


def _source_names(nodes: Iterable[JavaNode]) -> Iterable[str]:
  """
  Yields the leading identifier of every name that new nodes carry over
  verbatim from the source (copied values, types as written).
  """
  seen: Set[int] = set()
  stack = list(nodes)
  while stack:
    node = stack.pop()
    if id(node) in seen:
      continue
    seen.add(id(node))
    if isinstance(node, Annotation):
      if node.span is not None:
        yield node.name.split(".", 1)[0]
      stack.extend(value for _, value in node.items())
    elif isinstance(node, ArrayValue):
      stack.extend(node.items)
    elif isinstance(node, ClassLiteral):
      yield from _type_names(node.type)
    elif isinstance(node, Expression):
      yield from node.identifiers()
    elif isinstance(node, ClassDecl):
      if node.extends is not None:
        yield from _type_names(node.extends)
      stack.extend(node.members)
    elif isinstance(node, MethodDecl):
      for parameter in node.parameters:
        yield from _type_names(parameter.type)


def _type_names(ref: TypeRef) -> Iterable[str]:
  for node in ref.iter_refs():
    if node.qualified_name is None and not node.primitive and node.wildcard != "?":
      yield node.name.split(".", 1)[0]
