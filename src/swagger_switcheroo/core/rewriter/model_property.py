"""
Field/getter-level `@ApiModelProperty` conversion to `@Schema`.

`allowableValues = "a, b"` becomes `allowableValues = {"a", "b"}`; the
remaining attributes are renamed through the mapping table.
"""

from swagger_switcheroo.core.rewriter.base import AnnotationRule
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.java.nodes import Annotation, Declaration, ModifierList


class ApiModelPropertyRule(AnnotationRule):
  kind = "ApiModelProperty"

  def translate(self, ctx: ConversionContext, modifiers: ModifierList, old: Annotation, declaration: Declaration) -> None:
    inserted = ctx.insert_annotation(modifiers, old, self.mapping(ctx).target)
    self.copy_attributes(ctx, old, inserted)
