"""
Java Declaration Tree Nodes.

Defines the declaration-level syntax tree the converter works on. Only the
constructs annotations can hang off are modelled (types, methods, fields and
parameters); bodies and initializers stay as untouched source text.

Each node implements `__str__` to emit valid Java. Nodes read from a file carry
a `Span` into the original source; nodes built during conversion carry none and
are rendered by the patcher when the edit log is replayed.
"""

import abc
import re
from collections import Counter
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

from swagger_switcheroo.enums import LiteralKind
from swagger_switcheroo.java.edits import DeleteAction, InsertAction, PatchAction

_ESCAPES = {"b": "\b", "t": "\t", "n": "\n", "f": "\f", "r": "\r", "s": " ", '"': '"', "'": "'", "\\": "\\"}
_ESCAPE_RE = re.compile(r"\\(u+[0-9a-fA-F]{4}|[0-3][0-7]{0,2}|[4-7][0-7]?|.)")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")
_STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"' r"|'(?:\\.|[^'\\])*'")


def unescape_java(text: str) -> str:
  """
  Decodes the escape sequences of a Java string literal body.

  Args:
      text: Literal content without the surrounding quotes.

  Returns:
      str: The runtime string value.
  """

  def _sub(match: "re.Match[str]") -> str:
    seq = match.group(1)
    if seq[0] == "u":
      return chr(int(seq.lstrip("u"), 16))
    if seq[0] in "01234567":
      return chr(int(seq, 8))
    return _ESCAPES.get(seq, seq)

  return _ESCAPE_RE.sub(_sub, text)


def quote_java(value: str) -> str:
  """
  Emits a Java string literal for a runtime string.

  Args:
      value: The string to quote.

  Returns:
      str: Double-quoted, escaped literal text.
  """
  out = []
  for ch in value:
    if ch == '"':
      out.append('\\"')
    elif ch == "\\":
      out.append("\\\\")
    elif ch == "\n":
      out.append("\\n")
    elif ch == "\t":
      out.append("\\t")
    elif ch == "\r":
      out.append("\\r")
    elif ord(ch) < 0x20:
      out.append(f"\\u{ord(ch):04x}")
    else:
      out.append(ch)
  return '"' + "".join(out) + '"'


class Span(NamedTuple):
  """Half-open character range `[start, end)` into the original source."""

  start: int
  end: int


class JavaNode(abc.ABC):
  """Abstract base class for all declaration tree nodes."""

  @abc.abstractmethod
  def __str__(self) -> str:
    """Returns the Java source representation of the node."""
    pass


# --- Attribute Values ---


@dataclass
class Literal(JavaNode):
  """
  A literal attribute value such as `"text"`, `true`, `200` or `null`.

  Attributes:
      text: Raw source text, including quotes for strings.
      kind: Lexical category.
  """

  text: str
  kind: LiteralKind
  span: Optional[Span] = field(default=None, compare=False)

  @property
  def value(self) -> Union[str, bool, int, float, None]:
    """
    The runtime value of the literal.

    Returns:
        The decoded string, boolean or number. Numbers that do not parse as
        Python numbers (e.g. hex with suffix) are returned as their raw text.
    """
    if self.kind in (LiteralKind.STRING, LiteralKind.CHAR):
      return unescape_java(self.text[1:-1])
    if self.kind == LiteralKind.BOOLEAN:
      return self.text == "true"
    if self.kind == LiteralKind.NULL:
      return None
    digits = self.text.replace("_", "")
    # F and D are hex digits, not suffixes, after 0x
    suffixes = "lL" if digits.lstrip("+-")[:2].lower() == "0x" else "lLfFdD"
    digits = digits.rstrip(suffixes)
    try:
      return int(digits, 0)
    except ValueError:
      try:
        return float(digits)
      except ValueError:
        return self.text

  def __str__(self) -> str:
    return self.text


@dataclass
class TypeRef(JavaNode):
  """
  A reference to a type as written in source.

  Attributes:
      name: The name as written, simple (`Page`) or qualified (`com.acme.Page`).
      arguments: Bound type arguments, in order.
      dimensions: Array dimensions (`int[][]` has 2).
      primitive: True for `int`, `boolean` and friends.
      qualified_name: Fully qualified name when known.
      wildcard: `"?"` for a bare wildcard, `"extends"`/`"super"` for a bounded one
          (then `name` and `arguments` describe the bound).
  """

  name: str
  arguments: List["TypeRef"] = field(default_factory=list)
  dimensions: int = 0
  primitive: bool = False
  qualified_name: Optional[str] = None
  wildcard: Optional[str] = None

  @property
  def simple_name(self) -> str:
    return self.name.rsplit(".", 1)[-1]

  def raw(self) -> str:
    """The reference without type arguments, e.g. `Page[]` for `Page<User>[]`."""
    return self.name + "[]" * self.dimensions

  def substitute(self, mapping: Dict[str, "TypeRef"]) -> "TypeRef":
    """
    Replaces type variables with bound types.

    Args:
        mapping: Type variable name to the type bound in its place.

    Returns:
        TypeRef: A new reference; `self` is left untouched.
    """
    if self.wildcard == "?":
      return self
    if not self.arguments and self.name in mapping:
      bound = mapping[self.name]
      return replace(bound, dimensions=bound.dimensions + self.dimensions, wildcard=self.wildcard or bound.wildcard)
    return replace(self, arguments=[arg.substitute(mapping) for arg in self.arguments])

  def iter_refs(self) -> Iterator["TypeRef"]:
    """Yields this reference and every nested argument, depth first."""
    yield self
    for arg in self.arguments:
      yield from arg.iter_refs()

  def __str__(self) -> str:
    if self.wildcard == "?":
      return "?"
    text = self.name
    if self.arguments:
      text += "<" + ", ".join(str(arg) for arg in self.arguments) + ">"
    text += "[]" * self.dimensions
    if self.wildcard:
      text = f"? {self.wildcard} {text}"
    return text


@dataclass
class ClassLiteral(JavaNode):
  """A `Type.class` expression."""

  type: TypeRef
  span: Optional[Span] = field(default=None, compare=False)

  def __str__(self) -> str:
    return f"{self.type.raw()}.class"


@dataclass
class ArrayValue(JavaNode):
  """An element-value array initializer: `{a, b}`."""

  items: List["AttributeValue"] = field(default_factory=list)
  span: Optional[Span] = field(default=None, compare=False)

  def __str__(self) -> str:
    return "{" + ", ".join(str(item) for item in self.items) + "}"


@dataclass
class Expression(JavaNode):
  """
  Any other attribute value (constant references, concatenations, ...).
  Kept as raw source text.
  """

  text: str
  span: Optional[Span] = field(default=None, compare=False)

  def identifiers(self) -> List[str]:
    """Identifiers referenced by the expression, string contents excluded."""
    return _IDENTIFIER_RE.findall(_STRING_RE.sub("", self.text))

  def __str__(self) -> str:
    return self.text


@dataclass
class Comment(JavaNode):
  """A block (`/* */`) or line (`//`) comment."""

  text: str
  span: Optional[Span] = field(default=None, compare=False)

  def __str__(self) -> str:
    return self.text


@dataclass
class Annotation(JavaNode):
  """
  An annotation instance.

  Attributes:
      name: The name as written (or, for new annotations, the qualified name
          until reference shortening runs).
      qualified_name: The resolved fully qualified kind.
      attributes: Ordered attributes. The key `None` is the unnamed default
          attribute, i.e. `@X("v")`.
      comments: Marker comments rendered inside the parentheses.
      wrapped: Render one attribute per line.
  """

  name: str
  qualified_name: Optional[str] = None
  attributes: Dict[Optional[str], "AttributeValue"] = field(default_factory=dict)
  comments: List[Comment] = field(default_factory=list)
  span: Optional[Span] = field(default=None, compare=False)
  wrapped: bool = field(default=False, compare=False)

  def get(self, name: Optional[str]) -> Optional["AttributeValue"]:
    """
    Looks up an attribute. `None` and `"value"` address the same attribute.

    Args:
        name: Attribute name.

    Returns:
        The value, or None when absent.
    """
    if name in (None, "value"):
      return self.attributes.get(None, self.attributes.get("value"))
    return self.attributes.get(name)

  def set(self, name: Optional[str], value: Optional["AttributeValue"]) -> None:
    """
    Sets (or with `value=None`, removes) an attribute, keeping insertion order.

    Args:
        name: Attribute name; `None` for the default attribute.
        value: The new value.
    """
    if value is None:
      self.attributes.pop(name, None)
      return
    self.attributes[name] = value

  def items(self) -> Iterator[Tuple[str, "AttributeValue"]]:
    """Yields `(name, value)` pairs with the default attribute named `value`."""
    for key, value in self.attributes.items():
      yield ("value" if key is None else key), value

  def _attribute_texts(self) -> List[str]:
    if list(self.attributes) == [None]:
      return [str(self.attributes[None])]
    return [f"{'value' if key is None else key} = {value}" for key, value in self.attributes.items()]

  def render(self, indent: str = "", indent_unit: str = "    ") -> str:
    """
    Emits the annotation, wrapping one attribute per line when `wrapped` is set.

    Args:
        indent: Indentation of the line the annotation starts on.
        indent_unit: One level of indentation.

    Returns:
        str: Java source for the annotation.
    """
    parts = self._attribute_texts()
    notes = [str(comment) for comment in self.comments]
    if not parts and not notes:
      return f"@{self.name}"
    if self.wrapped and parts:
      inner = indent + indent_unit
      body = (",\n" + inner).join(parts)
      if notes:
        body += " " + " ".join(notes)
      return f"@{self.name}(\n{inner}{body}\n{indent})"
    return f"@{self.name}(" + " ".join([", ".join(parts), *notes]).strip() + ")"

  def __str__(self) -> str:
    return self.render()


AttributeValue = Union[Literal, ClassLiteral, ArrayValue, Annotation, Expression]


# --- Declarations ---


@dataclass(eq=False)
class ModifierList(JavaNode):
  """
  Annotations and keyword modifiers of a declaration, in source order.
  """

  annotations: List[Annotation] = field(default_factory=list)
  keywords: List[str] = field(default_factory=list)
  owner: Optional["Declaration"] = field(default=None, repr=False)

  def find(self, qualified_name: str) -> Optional[Annotation]:
    """
    Finds the first annotation of the given kind.

    Args:
        qualified_name: Fully qualified annotation kind.

    Returns:
        The annotation, or None.
    """
    for annotation in self.annotations:
      if annotation.qualified_name == qualified_name:
        return annotation
    return None

  def find_any(self, qualified_names: Iterable[str]) -> Optional[Annotation]:
    for name in qualified_names:
      found = self.find(name)
      if found is not None:
        return found
    return None

  def insert_before(self, anchor: Annotation, annotation: Annotation) -> Annotation:
    """
    Adds `annotation` directly before `anchor` and logs the edit.

    Args:
        anchor: An annotation of this list.
        annotation: The new annotation.

    Returns:
        Annotation: The inserted annotation.
    """
    self.annotations.insert(_index_of(self.annotations, anchor), annotation)
    self.owner.unit.insert_before(anchor, annotation)
    return annotation

  def remove(self, annotation: Annotation) -> None:
    """Removes `annotation` from the list and logs the deletion."""
    del self.annotations[_index_of(self.annotations, annotation)]
    self.owner.unit.delete(annotation)

  def __str__(self) -> str:
    return " ".join([*(str(a) for a in self.annotations), *self.keywords])


@dataclass(eq=False)
class Declaration(JavaNode):
  """
  Base for classes, methods, fields and parameters.

  Attributes:
      name: Declared simple name.
      modifiers: Annotations and keywords.
      span: Source range, annotations included.
      parent: The enclosing declaration or the compilation unit.
      comments: Marker comments placed on their own line before the declaration.
  """

  name: str
  modifiers: ModifierList = field(default_factory=ModifierList)
  span: Optional[Span] = None
  parent: Optional[Union["Declaration", "CompilationUnit"]] = field(default=None, repr=False)
  comments: List[Comment] = field(default_factory=list)

  def __post_init__(self) -> None:
    self.modifiers.owner = self

  @property
  def unit(self) -> "CompilationUnit":
    node = self.parent
    while isinstance(node, Declaration):
      node = node.parent
    if node is None:
      raise ValueError(f"Declaration '{self.name}' is not attached to a compilation unit")
    return node

  @property
  def enclosing_class(self) -> Optional["ClassDecl"]:
    node = self.parent
    while isinstance(node, Declaration) and not isinstance(node, ClassDecl):
      node = node.parent
    return node if isinstance(node, ClassDecl) else None

  def add_comment(self, comment: Comment) -> Comment:
    """
    Places a comment on its own line before this declaration.

    Args:
        comment: The comment node.

    Returns:
        Comment: The same comment.
    """
    self.comments.append(comment)
    self.unit.insert_before(self, comment, priority=0)
    return comment

  def _modifier_prefix(self) -> str:
    text = str(self.modifiers)
    return f"{text} " if text else ""


@dataclass(eq=False)
class Parameter(Declaration):
  """A formal parameter of a method or constructor."""

  type: Optional[TypeRef] = None
  varargs: bool = False

  def __str__(self) -> str:
    dots = "..." if self.varargs else ""
    return f"{self._modifier_prefix()}{self.type}{dots} {self.name}"


@dataclass(eq=False)
class MethodDecl(Declaration):
  """
  A method or constructor.

  Attributes:
      return_type: Declared return type; None for `void` and constructors.
      parameters: Formal parameters.
      type_parameters: Names of the method's own type variables.
      is_constructor: True for constructors.
      body: Statements of a built method. Parsed methods keep their body in the source.
  """

  return_type: Optional[TypeRef] = None
  parameters: List[Parameter] = field(default_factory=list)
  type_parameters: List[str] = field(default_factory=list)
  is_constructor: bool = False
  body: List[str] = field(default_factory=list)

  def render(self, indent: str = "", indent_unit: str = "    ") -> str:
    head = self._modifier_prefix()
    if self.type_parameters:
      head += "<" + ", ".join(self.type_parameters) + "> "
    if not self.is_constructor:
      head += f"{self.return_type or 'void'} "
    params = ", ".join(str(p) for p in self.parameters)
    lines = [f"{head}{self.name}({params}) {{"]
    lines.extend(indent + indent_unit + statement for statement in self.body)
    lines.append(indent + "}")
    return "\n".join(lines)

  def __str__(self) -> str:
    return self.render()


@dataclass(eq=False)
class FieldDecl(Declaration):
  """A field. `name` is the first declarator; `names` lists all of them."""

  type: Optional[TypeRef] = None
  names: List[str] = field(default_factory=list)

  def __str__(self) -> str:
    return f"{self._modifier_prefix()}{self.type} {', '.join(self.names or [self.name])};"


@dataclass(eq=False)
class ClassDecl(Declaration):
  """
  A class, interface, enum or annotation type.

  Attributes:
      kind: `class`, `interface`, `enum` or `@interface`.
      qualified_name: Fully qualified (binary-style, dotted) name.
      type_parameters: Names of the type variables.
      extends: Superclass, classes only.
      members: Methods, constructors, fields and nested types in source order.
      synthesized: True for helper types created during conversion.
  """

  kind: str = "class"
  qualified_name: str = ""
  type_parameters: List[str] = field(default_factory=list)
  extends: Optional[TypeRef] = None
  members: List[Declaration] = field(default_factory=list)
  synthesized: bool = False

  @property
  def methods(self) -> List[MethodDecl]:
    return [m for m in self.members if isinstance(m, MethodDecl) and not m.is_constructor]

  @property
  def constructors(self) -> List[MethodDecl]:
    return [m for m in self.members if isinstance(m, MethodDecl) and m.is_constructor]

  @property
  def fields(self) -> List[FieldDecl]:
    return [m for m in self.members if isinstance(m, FieldDecl)]

  @property
  def inner_classes(self) -> List["ClassDecl"]:
    return [m for m in self.members if isinstance(m, ClassDecl)]

  def find_class(self, name: str) -> Optional["ClassDecl"]:
    """Finds a directly nested type by simple name."""
    for inner in self.inner_classes:
      if inner.name == name:
        return inner
    return None

  def add_member(self, member: Declaration) -> Declaration:
    """Appends a member of a class that is not yet part of the source."""
    member.parent = self
    self.members.append(member)
    return member

  def insert_member_after(self, anchor: Declaration, member: Declaration) -> Declaration:
    """
    Adds `member` right after `anchor` and logs the edit.

    Args:
        anchor: A member of this class.
        member: The new member.

    Returns:
        Declaration: The inserted member.
    """
    member.parent = self
    self.members.insert(_index_of(self.members, anchor) + 1, member)
    self.unit.insert_after(anchor, member)
    return member

  def render(self, indent: str = "", indent_unit: str = "    ") -> str:
    """
    Emits the declaration. The first line carries no indentation, the caller
    positions it; following lines are indented relative to `indent`.
    """
    head = f"{self._modifier_prefix()}{self.kind} {self.name}"
    if self.type_parameters:
      head += "<" + ", ".join(self.type_parameters) + ">"
    if self.extends is not None:
      head += f" extends {self.extends}"
    header = ("\n" + indent).join([*(str(c) for c in self.comments), head + " {"])

    inner = indent + indent_unit
    body: List[str] = []
    for i, member in enumerate(self.members):
      if i:
        body.append("")
      if isinstance(member, (MethodDecl, ClassDecl)):
        body.append(inner + member.render(inner, indent_unit))
      else:
        body.append(inner + str(member))
    body.append(indent + "}")
    return header + "\n" + "\n".join(body)

  def __str__(self) -> str:
    return self.render()


@dataclass(eq=False)
class ImportDecl(JavaNode):
  """
  An import statement.

  Attributes:
      name: Imported name without `.*`.
      static: `import static`.
      wildcard: On-demand import (`.*`).
  """

  name: str
  static: bool = False
  wildcard: bool = False
  span: Optional[Span] = None

  @property
  def simple_name(self) -> str:
    return self.name.rsplit(".", 1)[-1]

  def __str__(self) -> str:
    static = "static " if self.static else ""
    star = ".*" if self.wildcard else ""
    return f"import {static}{self.name}{star};"


@dataclass(eq=False)
class PackageDecl(JavaNode):
  """The package statement."""

  name: str
  span: Optional[Span] = None

  def __str__(self) -> str:
    return f"package {self.name};"


@dataclass(eq=False)
class CompilationUnit(JavaNode):
  """
  One Java source file.

  Owns the declaration tree and the edit log replayed by `SourcePatcher`.

  Attributes:
      source: Original file text.
      path: Where the source came from, if a file.
      package: The package statement, if any.
      imports: Import statements in source order.
      types: Top-level type declarations.
      identifiers: `(offset, name)` of every identifier token outside
          package and import statements, used for import pruning.
      edits: The edit log.
  """

  source: str
  path: Optional[Path] = None
  package: Optional[PackageDecl] = None
  imports: List[ImportDecl] = field(default_factory=list)
  types: List[ClassDecl] = field(default_factory=list)
  identifiers: List[Tuple[int, str]] = field(default_factory=list, repr=False)
  edits: List[PatchAction] = field(default_factory=list, repr=False)

  @property
  def package_name(self) -> str:
    return self.package.name if self.package else ""

  # --- Edit Log ---

  def insert_before(self, anchor: JavaNode, node: JavaNode, priority: int = 10) -> None:
    self.edits.append(InsertAction(node=node, anchor=anchor, priority=priority))

  def insert_after(self, anchor: Optional[JavaNode], node: JavaNode, priority: int = 10) -> None:
    self.edits.append(InsertAction(node=node, anchor=anchor, after=True, priority=priority))

  def delete(self, node: JavaNode) -> None:
    """
    Logs the removal of `node`. A node that was only inserted during this
    conversion is dropped from the log instead.
    """
    if getattr(node, "span", None) is None:
      self.edits = [e for e in self.edits if not (isinstance(e, InsertAction) and e.node is node)]
      return
    self.edits.append(DeleteAction(node=node))

  def add_import(self, name: str, static: bool = False) -> ImportDecl:
    """
    Adds an import after the imports read from the source. With none left, it
    takes the place of the last removed import, else it follows the package
    statement.

    Args:
        name: Fully qualified name to import.
        static: Emit `import static`.

    Returns:
        ImportDecl: The new import.
    """
    removed = [e.node for e in self.edits if isinstance(e, DeleteAction) and isinstance(e.node, ImportDecl)]
    originals = [i for i in self.imports if i.span is not None]
    anchor: Optional[JavaNode] = self.package
    if originals:
      anchor = originals[-1]
    elif removed:
      anchor = removed[-1]
    declaration = ImportDecl(name=name, static=static)
    self.imports.append(declaration)
    self.insert_after(anchor, declaration)
    return declaration

  def remove_import(self, declaration: ImportDecl) -> None:
    self.imports = [i for i in self.imports if i is not declaration]
    self.delete(declaration)

  # --- Queries ---

  def iter_classes(self) -> Iterator[ClassDecl]:
    """Yields every type declared in the unit, outer types first."""
    stack = list(reversed(self.types))
    while stack:
      current = stack.pop()
      yield current
      stack.extend(reversed(current.inner_classes))

  def identifier_counts(self, excluded: Iterable[Span] = ()) -> Counter:
    """
    Counts identifier occurrences outside package/import statements.

    Args:
        excluded: Source ranges whose identifiers are not counted.

    Returns:
        Counter: Identifier to occurrence count.
    """
    ranges = sorted(excluded)
    counts: Counter = Counter()
    for offset, name in self.identifiers:
      if any(start <= offset < end for start, end in ranges):
        continue
      counts[name] += 1
    return counts

  def resolve(self, name: str, known: Optional[Callable[[str], bool]] = None) -> Optional[str]:
    """
    Resolves a type or annotation name as written to a qualified name.

    Lookup order: single-type imports, types declared in this unit, on-demand
    imports, the unit's own package, then `java.lang`. On-demand imports, the
    package and `java.lang` only match names `known` accepts.

    Args:
        name: Name as written, simple or dotted.
        known: Predicate telling whether a qualified name exists.

    Returns:
        The qualified name, or None when it cannot be decided.
    """
    known = known or (lambda _: False)
    if "." in name:
      head, rest = name.split(".", 1)
      resolved_head = self.resolve(head, known)
      return f"{resolved_head}.{rest}" if resolved_head else name

    for declaration in self.imports:
      if not declaration.wildcard and not declaration.static and declaration.simple_name == name:
        return declaration.name

    for declared in self.iter_classes():
      if declared.name == name:
        return declared.qualified_name

    candidates = [f"{i.name}.{name}" for i in self.imports if i.wildcard and not i.static]
    candidates.append(f"{self.package_name}.{name}" if self.package_name else name)
    candidates.append(f"java.lang.{name}")
    for candidate in candidates:
      if known(candidate):
        return candidate
    return None

  def __str__(self) -> str:
    return self.source


def _index_of(items: List, target: object) -> int:
  for i, item in enumerate(items):
    if item is target:
      return i
  raise ValueError(f"{target!r} is not in the list")
