"""
Parameter-level `@ApiParam` conversion to `@Parameter`.

`defaultValue` and `allowableValues` describe the parameter's schema in
OpenAPI 3, so they move into a nested annotation:

    @ApiParam(value = "Page size", defaultValue = "20")

becomes

    @Parameter(description = "Page size", schema = @Schema(defaultValue = "20"))

The nested `@Schema` is only created when one of those attributes is present.
"""

from typing import Optional

from swagger_switcheroo.core.rewriter.base import AnnotationRule
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.enums import Holder
from swagger_switcheroo.java.nodes import Annotation, Declaration, ModifierList


class ApiParamRule(AnnotationRule):
  kind = "ApiParam"

  def translate(self, ctx: ConversionContext, modifiers: ModifierList, old: Annotation, declaration: Declaration) -> None:
    mapping = self.mapping(ctx)
    inserted = ctx.insert_annotation(modifiers, old, mapping.target)
    schema: Optional[Annotation] = None

    for name, value in old.items():
      mapped = ctx.mapper.map(self.kind, name, value)
      if mapped is None:
        continue
      if mapped.holder == Holder.SCHEMA:
        if schema is None:
          schema = ctx.nested_annotation(mapping.extras["schema"])
        schema.set(mapped.name, mapped.value)
      else:
        inserted.set(mapped.name, mapped.value)

    if schema is not None:
      inserted.set("schema", schema)
