"""
Tree Walker.

Depth-first, pre-order traversal of one compilation unit. For every type:

1. the type-level rule (`@Api`),
2. each method: operation, response set, then member and parameter rules on
   the method itself, then the parameter rule on each formal parameter,
3. each field: member and parameter rules,
4. nested types, recursively.

Helper classes synthesized during the walk are not visited.
"""

from swagger_switcheroo.core.rewriter import (
  ApiModelPropertyRule,
  ApiOperationRule,
  ApiParamRule,
  ApiResponsesRule,
  ApiRule,
  ConversionContext,
)
from swagger_switcheroo.java.nodes import ClassDecl, FieldDecl, MethodDecl


class TreeWalker:
  """
  Drives the annotation rules over a unit.
  """

  def __init__(self) -> None:
    self.api = ApiRule()
    self.operation = ApiOperationRule()
    self.responses = ApiResponsesRule()
    self.model_property = ApiModelPropertyRule()
    self.param = ApiParamRule()

  def walk(self, ctx: ConversionContext) -> None:
    """
    Converts every declaration of `ctx.unit`.

    Args:
        ctx: The context of the unit to convert.
    """
    for declaration in list(ctx.unit.types):
      self.visit_class(ctx, declaration)

  def visit_class(self, ctx: ConversionContext, declaration: ClassDecl) -> None:
    members = list(declaration.members)
    self.api.apply(ctx, declaration.modifiers, declaration)

    for member in members:
      if isinstance(member, MethodDecl):
        self.visit_method(ctx, member)
    for member in members:
      if isinstance(member, FieldDecl):
        self.visit_field(ctx, member)
    for member in members:
      if isinstance(member, ClassDecl) and not member.synthesized:
        self.visit_class(ctx, member)

  def visit_method(self, ctx: ConversionContext, method: MethodDecl) -> None:
    self.operation.apply(ctx, method.modifiers, method)
    self.responses.apply(ctx, method.modifiers, method)
    self.model_property.apply(ctx, method.modifiers, method)
    self.param.apply(ctx, method.modifiers, method)
    for parameter in method.parameters:
      self.param.apply(ctx, parameter.modifiers, parameter)

  def visit_field(self, ctx: ConversionContext, field: FieldDecl) -> None:
    self.model_property.apply(ctx, field.modifiers, field)
    self.param.apply(ctx, field.modifiers, field)
