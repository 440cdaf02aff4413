"""
Type Resolver.

Turns a declaration's type into something a `Type.class` attribute can point
at. Concrete types are referenced directly. A parameterized generic return type
such as `Page<User>` has no class literal of its own, so the resolver
synthesizes a named subclass binding the arguments:

    // TODO externalize
    static class UserPage extends Page<User> {
        public UserPage(List<User> content, long total) {
            super(content, total);
        }
    }

and references `UserPage.class` instead. When the binding cannot be recovered
(unbound type variables, wildcards, an interface or final return type, a
generic other than the method's own return type) the original reference is
kept and the method gets a marker comment.
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from swagger_switcheroo.analysis.type_index import COLLECTION_KINDS, TypeInfo
from swagger_switcheroo.core.escape_hatch import EscapeHatch
from swagger_switcheroo.enums import ContainerKind
from swagger_switcheroo.java.nodes import AttributeValue, ClassLiteral, MethodDecl, TypeRef

if TYPE_CHECKING:
  from swagger_switcheroo.core.rewriter.context import ConversionContext


class TypeResolver:
  """
  Resolves type-reference attribute values for one conversion context.

  Args:
      ctx: The active conversion context.
  """

  def __init__(self, ctx: "ConversionContext"):
    self.ctx = ctx

  def concretize(self, method: MethodDecl, value: Optional[AttributeValue] = None) -> Optional[AttributeValue]:
    """
    Produces a class literal usable as a schema `implementation`.

    Two cases:
    - an explicit value was written (e.g. `response = Page.class`): it is kept
      unless it names the method's own generic return type, which is synthesized;
      any other generic gets a marker comment.
    - no value: the method's own return type is used; generic types are synthesized.

    Args:
        method: The method whose responses are being converted.
        value: The explicit type reference, if any.

    Returns:
        A class literal, the unchanged value, or None when nothing usable was
        found (void methods, or an inconclusive fallback the caller flags).
    """
    if value is not None:
      return self._from_explicit_value(method, value)
    return self._from_return_type(method)

  def _from_explicit_value(self, method: MethodDecl, value: AttributeValue) -> AttributeValue:
    if not isinstance(value, ClassLiteral) or value.type.dimensions:
      return value
    info = self.ctx.index.resolve(value.type, self.ctx.unit)
    if info is None or not info.is_generic:
      return value

    returned = method.return_type
    if returned is not None and self.ctx.index.qualify(returned, self.ctx.unit) == info.qualified_name:
      synthesized = self.synthesize(method)
      if synthesized is not None:
        return synthesized

    EscapeHatch.mark_declaration(
      self.ctx,
      method,
      EscapeHatch.CHECK_GENERICS,
      f"'{value}' is generic and cannot be bound from the return type",
    )
    return value

  def _from_return_type(self, method: MethodDecl) -> Optional[ClassLiteral]:
    returned = method.return_type
    if returned is None:
      return None
    if returned.primitive or returned.dimensions or not self.is_generic(returned):
      return self.ctx.builder.class_literal_of(returned)
    return self.synthesize(method)

  # --- Type Queries ---

  def info(self, ref: TypeRef) -> Optional[TypeInfo]:
    return self.ctx.index.resolve(ref, self.ctx.unit)

  def is_generic(self, ref: TypeRef) -> bool:
    """A reference is generic if it carries arguments or names a generic type."""
    if ref.primitive:
      return False
    if ref.arguments:
      return True
    info = self.info(ref)
    return info is not None and info.is_generic

  def collection_element(self, ref: Optional[TypeRef]) -> Optional[Tuple[ContainerKind, TypeRef]]:
    """
    Recognizes `List<T>`, `Set<T>` and `Collection<T>` return types.

    Returns:
        `(container kind, element type)`, or None for any other type.
    """
    if ref is None or ref.dimensions or len(ref.arguments) != 1:
      return None
    kind = COLLECTION_KINDS.get(self.ctx.index.qualify(ref, self.ctx.unit))
    if kind is None:
      return None
    return kind, ref.arguments[0]

  def is_bound(self, ref: TypeRef, method: MethodDecl) -> bool:
    """True if `ref` and all its arguments are concrete at this method."""
    in_scope = set(method.type_parameters)
    owner = method.enclosing_class
    while owner is not None:
      in_scope.update(owner.type_parameters)
      owner = owner.enclosing_class
    for node in ref.iter_refs():
      if node.wildcard or node.name in in_scope:
        return False
    return True

  # --- Synthesis ---

  def synthesize(self, method: MethodDecl) -> Optional[ClassLiteral]:
    """
    Creates (or reuses) a concrete subclass of the method's parameterized
    return type, inserted right after the method.

    Returns:
        A class literal of the subclass, or None if the binding is not concrete,
        the type cannot be extended or the name is taken by an unrelated class.
    """
    returned = method.return_type
    owner = method.enclosing_class
    if returned is None or owner is None or not returned.arguments:
      return None
    if not all(self.is_bound(arg, method) for arg in returned.arguments):
      return None
    info = self.info(returned)
    if info is not None and not info.extendable:
      return None

    name = "".join(arg.simple_name for arg in returned.arguments) + returned.simple_name
    existing = owner.find_class(name)
    if existing is not None:
      if existing.synthesized and str(existing.extends) == str(returned):
        return self.ctx.builder.class_literal(existing.qualified_name)
      return None

    declaration = self.ctx.builder.subclass(
      name=name,
      qualified_name=f"{owner.qualified_name}.{name}",
      extends=returned,
      comments=[EscapeHatch.EXTERNALIZE],
    )
    if info is not None:
      for constructor in self._forwarding_constructors(name, info, returned.arguments):
        declaration.add_member(constructor)

    owner.insert_member_after(method, declaration)
    self.ctx.track(declaration)
    self.ctx.synthesized.append(declaration)
    return self.ctx.builder.class_literal(declaration.qualified_name)

  def _forwarding_constructors(self, name: str, info: TypeInfo, arguments: List[TypeRef]) -> List[MethodDecl]:
    bindings: Dict[str, TypeRef] = dict(zip(info.type_parameters, arguments))
    constructors = []
    for constructor in info.constructors:
      if constructor.is_private:
        continue
      parameters = []
      for parameter in constructor.parameters:
        declared = parameter.type
        if info.unit is not None:
          declared = self.ctx.index.qualified_copy(declared, info.unit, skip=info.type_parameters)
        parameters.append(self.ctx.builder.parameter(parameter.name, declared.substitute(bindings), parameter.varargs))
      keywords = [k for k in constructor.keywords if k in ("public", "protected")]
      constructors.append(self.ctx.builder.forwarding_constructor(name, parameters, keywords))
    return constructors
