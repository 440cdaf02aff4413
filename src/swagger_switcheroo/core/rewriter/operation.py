"""
Method-level `@ApiOperation` conversion to `@Operation`.
"""

from swagger_switcheroo.core.rewriter.base import AnnotationRule
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.java.nodes import Annotation, Declaration, ModifierList


class ApiOperationRule(AnnotationRule):
  """`value` -> `summary`, `notes` -> `description`, `nickname` -> `operationId`, `tags` as is."""

  kind = "ApiOperation"

  def translate(self, ctx: ConversionContext, modifiers: ModifierList, old: Annotation, declaration: Declaration) -> None:
    inserted = ctx.insert_annotation(modifiers, old, self.mapping(ctx).target)
    self.copy_attributes(ctx, old, inserted)
