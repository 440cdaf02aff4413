"""
Type-level `@Api` conversion.

    @Api(tags = {"users", "admin"}, hidden = true)

becomes

    @Tag(name = "users")
    @Tag(name = "admin")
    @Hidden
"""

from swagger_switcheroo.core.rewriter.base import AnnotationRule, iter_strings, require_boolean
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.java.nodes import Annotation, AttributeValue, Declaration, ModifierList


class ApiRule(AnnotationRule):
  """Splits `@Api` into one `@Tag` per tag and an optional `@Hidden`."""

  kind = "Api"

  def translate(self, ctx: ConversionContext, modifiers: ModifierList, old: Annotation, declaration: Declaration) -> None:
    for name, value in old.items():
      ctx.mapper.lookup(self.kind, name)
      if name == "tags":
        self._convert_tags(ctx, modifiers, old, value)
      elif name == "hidden":
        self._convert_hidden(ctx, modifiers, old, value)

  def _convert_tags(self, ctx: ConversionContext, modifiers: ModifierList, old: Annotation, value: AttributeValue) -> None:
    mapping = self.mapping(ctx)
    target = mapping.attributes["tags"].target
    for tag in iter_strings(self.kind, "tags", value):
      inserted = ctx.insert_annotation(modifiers, old, mapping.extras["tag"])
      inserted.set(target, tag)

  def _convert_hidden(self, ctx: ConversionContext, modifiers: ModifierList, old: Annotation, value: AttributeValue) -> None:
    if require_boolean(self.kind, "hidden", value):
      ctx.insert_annotation(modifiers, old, self.mapping(ctx).extras["hidden"])
