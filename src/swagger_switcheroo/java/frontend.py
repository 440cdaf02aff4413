"""
javalang Front End Adapter.

Builds a `CompilationUnit` from Java source using `javalang` for tokenizing and
parsing. javalang trees carry no end positions, so the parser is subclassed to
remember the token range of every annotation and member declaration; token
ranges are then mapped to character offsets so the patcher can edit the
original text in place.

Annotation attribute values are read from the annotation's own tokens, which
keeps their source text exactly as written.
"""

import re
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from javalang import ast as jast
from javalang import tokenizer as jtok
from javalang import tree as jtree
from javalang.parser import JavaSyntaxError, Parser

from swagger_switcheroo.core.errors import FrontendError
from swagger_switcheroo.enums import LiteralKind
from swagger_switcheroo.java.nodes import (
  Annotation,
  ArrayValue,
  AttributeValue,
  ClassDecl,
  ClassLiteral,
  CompilationUnit,
  Declaration,
  Expression,
  FieldDecl,
  ImportDecl,
  Literal,
  MethodDecl,
  ModifierList,
  PackageDecl,
  Parameter,
  Span,
  TypeRef,
)

_TYPE_KINDS = (
  (jtree.AnnotationDeclaration, "@interface"),
  (jtree.EnumDeclaration, "enum"),
  (jtree.InterfaceDeclaration, "interface"),
  (jtree.ClassDeclaration, "class"),
)

_MODIFIER_ORDER = (
  "public",
  "protected",
  "private",
  "abstract",
  "static",
  "final",
  "transient",
  "volatile",
  "synchronized",
  "native",
  "strictfp",
  "default",
)

_LITERAL_KINDS = (
  (jtok.String, LiteralKind.STRING),
  (jtok.Character, LiteralKind.CHAR),
  (jtok.Boolean, LiteralKind.BOOLEAN),
  (jtok.Null, LiteralKind.NULL),
  (jtok.Integer, LiteralKind.NUMBER),
  (jtok.DecimalInteger, LiteralKind.NUMBER),
  (jtok.FloatingPoint, LiteralKind.NUMBER),
)

# javalang 0.13 derives DecimalInteger from Literal, not Integer
_NUMBER_TOKENS = (jtok.Integer, jtok.DecimalInteger, jtok.FloatingPoint)


class _SpanParser(Parser):
  """javalang parser that records `_token_span = (first, end)` on annotations and members."""

  def _mark(self, node, start: int):
    if isinstance(node, jast.Node):
      node._token_span = (start, self.tokens.marker)
    return node

  def parse_annotation(self):
    start = self.tokens.marker
    return self._mark(super().parse_annotation(), start)

  def parse_class_body_declaration(self):
    start = self.tokens.marker
    return self._mark(super().parse_class_body_declaration(), start)

  def parse_interface_body_declaration(self):
    start = self.tokens.marker
    return self._mark(super().parse_interface_body_declaration(), start)


class JavaFrontend:
  """
  Parses Java source into the declaration tree.

  Args:
      known: Predicate over qualified names, used to resolve names brought in by
          on-demand (`.*`) imports, the same package or `java.lang`.
  """

  def __init__(self, known: Optional[Callable[[str], bool]] = None):
    self.known = known

  def parse(self, source: str, path: Optional[Union[str, Path]] = None) -> CompilationUnit:
    """
    Reads one compilation unit.

    Args:
        source: Java source text.
        path: File the text came from, for error messages.

    Returns:
        CompilationUnit: The declaration tree, with an empty edit log.

    Raises:
        FrontendError: If javalang cannot tokenize or parse the source.
    """
    label = str(path) if path else None
    try:
      tokens = list(jtok.tokenize(source))
      tree = _SpanParser(tokens).parse()
    except jtok.LexerError as e:
      raise FrontendError(f"lexical error: {e}", label) from e
    except JavaSyntaxError as e:
      at = getattr(e, "at", None)
      line = at.position.line if at is not None and getattr(at, "position", None) else None
      raise FrontendError(f"syntax error: {e.description}", label, line) from e

    reader = _UnitReader(source, tokens, Path(path) if path else None)
    unit = reader.read(tree)
    _resolve_annotation_names(unit, self.known)
    return unit


def parse_java(source: str, path: Optional[Union[str, Path]] = None, known: Optional[Callable[[str], bool]] = None) -> CompilationUnit:
  """Convenience wrapper around `JavaFrontend.parse`."""
  return JavaFrontend(known).parse(source, path)


class _UnitReader:
  """Converts one javalang tree into declaration nodes, mapping tokens back to offsets."""

  def __init__(self, source: str, tokens: List[jtok.JavaToken], path: Optional[Path]):
    self.source = source
    self.tokens = tokens
    self.path = path
    self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]
    self.offsets: List[int] = []
    cursor = 0
    for token in tokens:
      cursor = self._offset_of(token, cursor)
      self.offsets.append(cursor)

  def _offset_of(self, token: jtok.JavaToken, floor: int) -> int:
    line_start = self._line_starts[token.position.line - 1]
    # javalang columns are 1-based on most lines; accept either base.
    for base in (1, 0):
      offset = line_start + token.position.column - base
      if offset >= floor and self.source.startswith(token.value, offset):
        return offset
    found = self.source.find(token.value, max(floor, line_start))
    if found < 0:
      raise FrontendError(f"cannot locate token '{token.value}'", str(self.path) if self.path else None, token.position.line)
    return found

  def span(self, start: int, end: int) -> Span:
    """Character span of tokens `[start, end)`."""
    last = end - 1
    return Span(self.offsets[start], self.offsets[last] + len(self.tokens[last].value))

  def text(self, start: int, end: int) -> str:
    first, last = self.span(start, end)
    return self.source[first:last]

  # --- Unit Level ---

  def read(self, tree: jtree.CompilationUnit) -> CompilationUnit:
    unit = CompilationUnit(source=self.source, path=self.path)
    self._read_header(unit)
    for declaration in tree.types or []:
      unit.types.append(self._read_class(declaration, unit, unit.package_name))
    return unit

  def _read_header(self, unit: CompilationUnit) -> None:
    """Collects package and import statements, and every other identifier token."""
    i = 0
    while i < len(self.tokens):
      token = self.tokens[i]
      if isinstance(token, jtok.Keyword) and token.value in ("package", "import"):
        j = i
        while j < len(self.tokens) and self.tokens[j].value != ";":
          j += 1
        words = [t.value for t in self.tokens[i + 1 : j]]
        span = self.span(i, min(j + 1, len(self.tokens)))
        if token.value == "package":
          unit.package = PackageDecl(name="".join(words), span=span)
        else:
          static = words[:1] == ["static"]
          if static:
            words = words[1:]
          wildcard = words[-2:] == [".", "*"]
          if wildcard:
            words = words[:-2]
          unit.imports.append(ImportDecl(name="".join(words), static=static, wildcard=wildcard, span=span))
        i = j + 1
        continue
      if isinstance(token, jtok.Identifier):
        unit.identifiers.append((self.offsets[i], token.value))
      i += 1

  # --- Declarations ---

  def _span_of(self, node: jast.Node) -> Optional[Span]:
    marks = getattr(node, "_token_span", None)
    if not marks:
      return None
    return self.span(*marks)

  def _read_modifiers(self, node: jast.Node) -> ModifierList:
    present = getattr(node, "modifiers", None) or set()
    return ModifierList(
      annotations=[self._read_annotation(a) for a in getattr(node, "annotations", None) or []],
      keywords=[k for k in _MODIFIER_ORDER if k in present],
    )

  def _read_class(self, node: jtree.TypeDeclaration, parent, outer_name: str) -> ClassDecl:
    kind = next(label for cls, label in _TYPE_KINDS if isinstance(node, cls))
    extends = node.extends if isinstance(node, jtree.ClassDeclaration) else None
    declaration = ClassDecl(
      name=node.name,
      kind=kind,
      qualified_name=f"{outer_name}.{node.name}" if outer_name else node.name,
      modifiers=self._read_modifiers(node),
      span=self._span_of(node),
      parent=parent,
      type_parameters=[tp.name for tp in getattr(node, "type_parameters", None) or []],
      extends=self._read_type(extends) if extends is not None else None,
    )

    body = node.body
    if isinstance(body, jtree.EnumBody):
      body = body.declarations
    for member in body or []:
      read = self._read_member(member, declaration)
      if read is not None:
        declaration.members.append(read)
    return declaration

  def _read_member(self, member: jast.Node, owner: ClassDecl) -> Optional[Declaration]:
    if isinstance(member, (jtree.MethodDeclaration, jtree.ConstructorDeclaration)):
      is_constructor = isinstance(member, jtree.ConstructorDeclaration)
      return_type = None if is_constructor else member.return_type
      method = MethodDecl(
        name=member.name,
        modifiers=self._read_modifiers(member),
        span=self._span_of(member),
        parent=owner,
        return_type=self._read_type(return_type) if return_type is not None else None,
        type_parameters=[tp.name for tp in member.type_parameters or []],
        is_constructor=is_constructor,
      )
      method.parameters = [self._read_parameter(p, method) for p in member.parameters or []]
      return method

    if isinstance(member, jtree.FieldDeclaration):
      names = [d.name for d in member.declarators]
      return FieldDecl(
        name=names[0],
        names=names,
        modifiers=self._read_modifiers(member),
        span=self._span_of(member),
        parent=owner,
        type=self._read_type(member.type),
      )

    if isinstance(member, tuple(cls for cls, _ in _TYPE_KINDS)):
      return self._read_class(member, owner, owner.qualified_name)
    return None

  def _read_parameter(self, node: jtree.FormalParameter, method: MethodDecl) -> Parameter:
    return Parameter(
      name=node.name,
      modifiers=self._read_modifiers(node),
      parent=method,
      type=self._read_type(node.type),
      varargs=bool(node.varargs),
    )

  def _read_type(self, node: jast.Node) -> TypeRef:
    if isinstance(node, jtree.BasicType):
      return TypeRef(name=node.name, dimensions=len(node.dimensions or []), primitive=True)

    names = []
    arguments: List[TypeRef] = []
    segment = node
    while segment is not None:
      names.append(segment.name)
      if segment.arguments:
        arguments = [self._read_type_argument(a) for a in segment.arguments]
      segment = getattr(segment, "sub_type", None)
    return TypeRef(name=".".join(names), arguments=arguments, dimensions=len(node.dimensions or []))

  def _read_type_argument(self, node: jtree.TypeArgument) -> TypeRef:
    if node.type is None:
      return TypeRef(name="?", wildcard="?")
    ref = self._read_type(node.type)
    if node.pattern_type in ("extends", "super"):
      ref.wildcard = node.pattern_type
    return ref

  # --- Annotations ---

  def _read_annotation(self, node: jtree.Annotation) -> Annotation:
    marks = getattr(node, "_token_span", None)
    if not marks:
      raise FrontendError(f"cannot locate annotation @{node.name}", str(self.path) if self.path else None)
    return _AnnotationReader(self, *marks).annotation()

  def value_of(self, start: int, end: int) -> AttributeValue:
    """Classifies the expression spanning tokens `[start, end)`."""
    tokens = self.tokens[start:end]
    span = self.span(start, end)
    text = self.source[span.start : span.end]

    if len(tokens) == 1:
      for cls, kind in _LITERAL_KINDS:
        if isinstance(tokens[0], cls):
          return Literal(text=text, kind=kind, span=span)
    if len(tokens) == 2 and tokens[0].value in ("-", "+") and isinstance(tokens[1], _NUMBER_TOKENS):
      return Literal(text=text, kind=LiteralKind.NUMBER, span=span)
    if len(tokens) >= 3 and tokens[-1].value == "class" and tokens[-2].value == ".":
      ref = _class_literal_type(tokens[:-2])
      if ref is not None:
        return ClassLiteral(type=ref, span=span)
    return Expression(text=text, span=span)


class _AnnotationReader:
  """Recursive descent over the tokens of one annotation."""

  def __init__(self, reader: _UnitReader, start: int, end: int):
    self.reader = reader
    self.tokens = reader.tokens
    self.i = start
    self.end = end

  def _peek(self) -> str:
    return self.tokens[self.i].value if self.i < self.end else ""

  def _expect(self, value: str) -> None:
    if self._peek() != value:
      token = self.tokens[min(self.i, self.end - 1)]
      path = str(self.reader.path) if self.reader.path else None
      raise FrontendError(f"expected '{value}' in annotation, found '{self._peek()}'", path, token.position.line)
    self.i += 1

  def annotation(self) -> Annotation:
    first = self.i
    self._expect("@")
    words = [self.tokens[self.i].value]
    self.i += 1
    while self._peek() == "." and self.i + 1 < self.end:
      words.append(self.tokens[self.i + 1].value)
      self.i += 2
    node = Annotation(name=".".join(words))

    if self._peek() == "(":
      self.i += 1
      if self._peek() != ")":
        if self.i + 1 < self.end and isinstance(self.tokens[self.i], jtok.Identifier) and self.tokens[self.i + 1].value == "=":
          while True:
            key = self.tokens[self.i].value
            self.i += 2
            node.set(key, self.value())
            if self._peek() != ",":
              break
            self.i += 1
        else:
          node.set(None, self.value())
      self._expect(")")

    node.span = self.reader.span(first, self.i)
    return node

  def value(self) -> AttributeValue:
    if self._peek() == "@":
      return self.annotation()
    if self._peek() == "{":
      first = self.i
      self.i += 1
      items = []
      while self._peek() not in ("}", ""):
        items.append(self.value())
        if self._peek() == ",":
          self.i += 1
      self._expect("}")
      return ArrayValue(items=items, span=self.reader.span(first, self.i))
    return self._expression()

  def _expression(self) -> AttributeValue:
    first = self.i
    depth = 0
    while self.i < self.end:
      token = self.tokens[self.i]
      if isinstance(token, jtok.Separator) and token.value in "([{":
        depth += 1
      elif isinstance(token, jtok.Separator) and token.value in ")]}":
        if depth == 0:
          break
        depth -= 1
      elif token.value == "," and depth == 0:
        break
      self.i += 1
    if self.i == first:
      self._expect("<value>")
    return self.reader.value_of(first, self.i)


def _class_literal_type(tokens: Sequence[jtok.JavaToken]) -> Optional[TypeRef]:
  """Reads the `Type` of `Type.class`, or None when the tokens are not a type."""
  values = [t.value for t in tokens]
  dimensions = 0
  while values[-2:] == ["[", "]"]:
    values = values[:-2]
    dimensions += 1
  if len(values) == 1 and isinstance(tokens[0], (jtok.BasicType, jtok.Keyword)):
    return TypeRef(name=values[0], dimensions=dimensions, primitive=True)
  words = values[0::2]
  dots = values[1::2]
  if not words or any(d != "." for d in dots) or not all(isinstance(t, jtok.Identifier) for t in tokens[0 : len(values) : 2]):
    return None
  return TypeRef(name=".".join(words), dimensions=dimensions)


def _resolve_annotation_names(unit: CompilationUnit, known: Optional[Callable[[str], bool]]) -> None:
  """Fills in `qualified_name` for every annotation read from the unit."""

  def _visit(annotation: Annotation) -> None:
    annotation.qualified_name = unit.resolve(annotation.name, known)
    for _, value in annotation.items():
      for nested in _nested_annotations(value):
        _visit(nested)

  for declaration in _iter_declarations(unit):
    for annotation in declaration.modifiers.annotations:
      _visit(annotation)


def _nested_annotations(value: AttributeValue) -> List[Annotation]:
  if isinstance(value, Annotation):
    return [value]
  if isinstance(value, ArrayValue):
    return [item for item in value.items if isinstance(item, Annotation)]
  return []


def _iter_declarations(unit: CompilationUnit):
  for declaration in unit.iter_classes():
    yield declaration
    for member in declaration.members:
      if isinstance(member, ClassDecl):
        continue
      yield member
      if isinstance(member, MethodDecl):
        yield from member.parameters
