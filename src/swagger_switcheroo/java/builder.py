"""
Node Builder.

Typed constructors for the nodes a conversion inserts. New annotations, literals
and helper classes are assembled directly as tree nodes; nothing is rendered to
text and parsed back.
"""

from typing import Iterable, List, Optional

from swagger_switcheroo.enums import LiteralKind
from swagger_switcheroo.java.nodes import (
  Annotation,
  ArrayValue,
  AttributeValue,
  ClassDecl,
  ClassLiteral,
  Comment,
  Literal,
  MethodDecl,
  ModifierList,
  Parameter,
  TypeRef,
  quote_java,
)


class NodeBuilder:
  """
  Factory for synthesized declaration tree nodes.
  """

  def annotation(self, qualified_name: str, **attributes: Optional[AttributeValue]) -> Annotation:
    """
    Creates an annotation referenced by its qualified name.

    Args:
        qualified_name: The annotation kind, e.g. `io.swagger.v3.oas.annotations.Operation`.
        **attributes: Initial attributes. `None` values are skipped.

    Returns:
        Annotation: The new node, shortened later by the post-process pass.
    """
    node = Annotation(name=qualified_name, qualified_name=qualified_name)
    for key, value in attributes.items():
      node.set(key, value)
    return node

  def string(self, value: str) -> Literal:
    return Literal(text=quote_java(value), kind=LiteralKind.STRING)

  def boolean(self, value: bool) -> Literal:
    return Literal(text="true" if value else "false", kind=LiteralKind.BOOLEAN)

  def string_array(self, values: Iterable[str]) -> ArrayValue:
    return ArrayValue(items=[self.string(v) for v in values])

  def class_literal(self, qualified_name: str) -> ClassLiteral:
    """`com.acme.Foo.class`, with the type marked as qualified for shortening."""
    return ClassLiteral(type=TypeRef(name=qualified_name, qualified_name=qualified_name))

  def class_literal_of(self, ref: TypeRef) -> ClassLiteral:
    """The raw `.class` literal of an existing reference (arguments dropped)."""
    return ClassLiteral(type=TypeRef(name=ref.name, dimensions=ref.dimensions, primitive=ref.primitive, qualified_name=ref.qualified_name))

  def comment(self, text: str) -> Comment:
    return Comment(text=text)

  def subclass(self, name: str, qualified_name: str, extends: TypeRef, comments: Iterable[str] = ()) -> ClassDecl:
    """
    Creates a `static class Name extends Base<...>` helper declaration.

    Args:
        name: Simple name of the new class.
        qualified_name: Qualified name once nested in its owner.
        extends: The parameterized supertype.
        comments: Line comments emitted above the class.

    Returns:
        ClassDecl: An empty class flagged as synthesized.
    """
    return ClassDecl(
      name=name,
      qualified_name=qualified_name,
      modifiers=ModifierList(keywords=["static"]),
      extends=extends,
      synthesized=True,
      comments=[self.comment(c) for c in comments],
    )

  def forwarding_constructor(self, name: str, parameters: List[Parameter], keywords: Iterable[str] = ()) -> MethodDecl:
    """
    Creates a constructor whose only statement is `super(<params>);`.

    Args:
        name: Class name.
        parameters: Formal parameters, already substituted.
        keywords: Access modifiers copied from the superclass constructor.

    Returns:
        MethodDecl: The constructor node.
    """
    arguments = ", ".join(p.name for p in parameters)
    return MethodDecl(
      name=name,
      modifiers=ModifierList(keywords=list(keywords)),
      parameters=parameters,
      is_constructor=True,
      body=[f"super({arguments});"],
    )

  def parameter(self, name: str, type_ref: TypeRef, varargs: bool = False) -> Parameter:
    return Parameter(name=name, type=type_ref, varargs=varargs)
