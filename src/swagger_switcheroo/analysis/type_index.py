"""
Type Index.

Type facts the resolver needs and a single file does not provide: which types
are generic and which constructors they declare. The index is built once per
run from every compilation unit, plus a table of common JDK generic types.
Only classes that are not `final` can be extended by a synthesized
helper; the JDK interfaces and final classes in the table are flagged.

A type absent from the index is treated as non-generic unless the reference
itself carries type arguments.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from swagger_switcheroo.enums import ContainerKind
from swagger_switcheroo.java.nodes import ClassDecl, CompilationUnit, Parameter, TypeRef

WELL_KNOWN_GENERICS: Dict[str, List[str]] = {
  "java.lang.Iterable": ["T"],
  "java.lang.Class": ["T"],
  "java.util.Collection": ["E"],
  "java.util.List": ["E"],
  "java.util.ArrayList": ["E"],
  "java.util.LinkedList": ["E"],
  "java.util.Set": ["E"],
  "java.util.HashSet": ["E"],
  "java.util.LinkedHashSet": ["E"],
  "java.util.SortedSet": ["E"],
  "java.util.TreeSet": ["E"],
  "java.util.Map": ["K", "V"],
  "java.util.HashMap": ["K", "V"],
  "java.util.LinkedHashMap": ["K", "V"],
  "java.util.TreeMap": ["K", "V"],
  "java.util.Optional": ["T"],
  "java.util.concurrent.CompletableFuture": ["T"],
  "java.util.concurrent.CompletionStage": ["T"],
  "java.util.concurrent.Future": ["V"],
}

# Interfaces and final classes
NOT_EXTENDABLE = {
  "java.lang.Iterable",
  "java.lang.Class",
  "java.util.Collection",
  "java.util.List",
  "java.util.Set",
  "java.util.SortedSet",
  "java.util.Map",
  "java.util.Optional",
  "java.util.concurrent.CompletionStage",
  "java.util.concurrent.Future",
}

COLLECTION_KINDS: Dict[str, ContainerKind] = {
  "java.util.Collection": ContainerKind.LIST,
  "java.util.List": ContainerKind.LIST,
  "java.util.ArrayList": ContainerKind.LIST,
  "java.util.LinkedList": ContainerKind.LIST,
  "java.util.Set": ContainerKind.SET,
  "java.util.HashSet": ContainerKind.SET,
  "java.util.LinkedHashSet": ContainerKind.SET,
  "java.util.SortedSet": ContainerKind.SET,
  "java.util.TreeSet": ContainerKind.SET,
}


@dataclass
class ConstructorInfo:
  """
  A constructor of an indexed type.

  Attributes:
      parameters: Formal parameters as declared.
      keywords: Modifier keywords (`public`, `protected`, `private`).
  """

  parameters: List[Parameter] = field(default_factory=list)
  keywords: List[str] = field(default_factory=list)

  @property
  def is_private(self) -> bool:
    return "private" in self.keywords


@dataclass
class TypeInfo:
  """
  Facts about one type.

  Attributes:
      qualified_name: Fully qualified name.
      type_parameters: Names of the type variables, in order.
      constructors: Declared constructors. Empty for library types.
      unit: The compilation unit declaring the type, if it is a source type.
      extendable: False for interfaces, enums and final classes.
  """

  qualified_name: str
  type_parameters: List[str] = field(default_factory=list)
  constructors: List[ConstructorInfo] = field(default_factory=list)
  unit: Optional[CompilationUnit] = field(default=None, repr=False)
  extendable: bool = True

  @property
  def simple_name(self) -> str:
    return self.qualified_name.rsplit(".", 1)[-1]

  @property
  def is_generic(self) -> bool:
    return bool(self.type_parameters)


class TypeIndex:
  """
  Registry of `TypeInfo` by qualified name.
  """

  def __init__(self) -> None:
    self._types: Dict[str, TypeInfo] = {}
    for name, params in WELL_KNOWN_GENERICS.items():
      self._types[name] = TypeInfo(qualified_name=name, type_parameters=list(params), extendable=name not in NOT_EXTENDABLE)

  @classmethod
  def build(cls, units: Iterable[CompilationUnit]) -> "TypeIndex":
    """
    Indexes every type declared in the given units.

    Args:
        units: Parsed compilation units.

    Returns:
        TypeIndex: The populated index.
    """
    index = cls()
    for unit in units:
      index.add_unit(unit)
    return index

  def add_unit(self, unit: CompilationUnit) -> None:
    for declaration in unit.iter_classes():
      self.add(declaration, unit)

  def add(self, declaration: ClassDecl, unit: Optional[CompilationUnit] = None) -> TypeInfo:
    info = TypeInfo(
      qualified_name=declaration.qualified_name,
      type_parameters=list(declaration.type_parameters),
      constructors=[ConstructorInfo(parameters=list(c.parameters), keywords=list(c.modifiers.keywords)) for c in declaration.constructors],
      unit=unit,
      extendable=declaration.kind == "class" and "final" not in declaration.modifiers.keywords,
    )
    self._types[info.qualified_name] = info
    return info

  def __contains__(self, qualified_name: str) -> bool:
    return qualified_name in self._types

  def get(self, qualified_name: str) -> Optional[TypeInfo]:
    return self._types.get(qualified_name)

  def qualify(self, ref: TypeRef, unit: CompilationUnit) -> str:
    """
    Best-effort qualified name of a reference as seen from `unit`.

    Returns:
        str: The resolved name, or the name as written when unresolvable.
    """
    if ref.qualified_name:
      return ref.qualified_name
    return unit.resolve(ref.name, self.__contains__) or ref.name

  def resolve(self, ref: TypeRef, unit: CompilationUnit) -> Optional[TypeInfo]:
    """Looks up the type a reference in `unit` points at."""
    if ref.primitive or ref.wildcard == "?":
      return None
    return self.get(self.qualify(ref, unit))

  def qualified_copy(self, ref: TypeRef, unit: CompilationUnit, skip: Iterable[str] = ()) -> TypeRef:
    """
    Copies `ref` with every resolvable name replaced by its qualified name.

    Args:
        ref: Reference as written in `unit`.
        unit: Unit the reference was read from.
        skip: Names left alone (type variables in scope).

    Returns:
        TypeRef: A detached copy, ready to be used in another unit.
    """
    skipped = set(skip)
    copy = deepcopy(ref)
    for node in copy.iter_refs():
      if node.primitive or node.wildcard == "?" or node.name in skipped:
        continue
      qualified = unit.resolve(node.name, self.__contains__)
      if qualified:
        node.qualified_name = qualified
        node.name = qualified
    return copy
