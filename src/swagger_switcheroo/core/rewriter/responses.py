"""
Response-set `@ApiResponses` conversion.

Each `@ApiResponse` entry becomes a repeated OpenAPI 3 `@ApiResponse` on the
method. The payload type moves into nested content:

    @ApiResponse(code = 200, message = "OK", response = User.class, responseContainer = "List")

becomes

    @ApiResponse(responseCode = "200", description = "OK",
        content = @Content(array = @ArraySchema(schema = @Schema(implementation = User.class))))

When no entry documents a 200 payload, one is derived from the method's own
return type. The media type comes from the method's `@Produces`, if any.
"""

from typing import List, Optional

from swagger_switcheroo.core.errors import UnsupportedValueError
from swagger_switcheroo.core.escape_hatch import EscapeHatch
from swagger_switcheroo.core.rewriter.base import AnnotationRule, first_value, require_string
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.enums import AttributeShape, ContainerKind
from swagger_switcheroo.java.nodes import (
  Annotation,
  ArrayValue,
  AttributeValue,
  Declaration,
  MethodDecl,
  ModifierList,
)
from swagger_switcheroo.semantics.schema import AnnotationMapping

OK_CODE = "200"
ENTRY_KIND = "ApiResponse"


class ApiResponsesRule(AnnotationRule):
  kind = "ApiResponses"

  def translate(self, ctx: ConversionContext, modifiers: ModifierList, old: Annotation, declaration: Declaration) -> None:
    method = declaration if isinstance(declaration, MethodDecl) else None
    entry_mapping = ctx.semantics.get(ENTRY_KIND)

    entries: List[Annotation] = []
    for name, value in old.items():
      ctx.mapper.lookup(self.kind, name)
      entries = self._entries(value)

    media_type = self._media_type(ctx, modifiers)
    ok: Optional[Annotation] = None
    for entry in entries:
      response = self._convert_entry(ctx, modifiers, old, entry, method, entry_mapping, media_type)
      if self._is_ok(entry):
        ok = response

    if method is None or method.is_constructor or method.return_type is None:
      return
    if ok is None:
      ok = ctx.insert_annotation(modifiers, old, entry_mapping.target)
      ok.set(entry_mapping.attributes["code"].target, ctx.builder.string(OK_CODE))
    if ok.get("content") is None:
      content = self._default_content(ctx, method, entry_mapping, media_type)
      if content is not None:
        ok.set("content", content)

  # --- Entries ---

  def _entries(self, value: AttributeValue) -> List[Annotation]:
    items = value.items if isinstance(value, ArrayValue) else [value]
    for item in items:
      if not isinstance(item, Annotation):
        raise UnsupportedValueError(self.kind, "value", str(item), "@ApiResponse entries")
    return list(items)

  def _is_ok(self, entry: Annotation) -> bool:
    code = entry.get("code")
    return code is not None and str(code).strip('"') == OK_CODE

  def _convert_entry(
    self,
    ctx: ConversionContext,
    modifiers: ModifierList,
    old: Annotation,
    entry: Annotation,
    method: Optional[MethodDecl],
    mapping: AnnotationMapping,
    media_type: Optional[AttributeValue],
  ) -> Annotation:
    inserted = ctx.insert_annotation(modifiers, old, mapping.target)
    container = self._container(entry)

    for name, value in entry.items():
      rule = ctx.mapper.lookup(ENTRY_KIND, name)
      if rule.shape == AttributeShape.SPECIAL:
        implementation = ctx.resolver.concretize(method, value) if method is not None else value
        content = self._content(ctx, mapping, implementation, container, media_type)
        if container == ContainerKind.MAP:
          EscapeHatch.mark_annotation(
            ctx, inserted, method or modifiers.owner, EscapeHatch.TRANSFORM_TO_MAP, "Map response containers need a map schema"
          )
        inserted.set(rule.target, content)
        continue
      mapped = ctx.mapper.apply(ENTRY_KIND, name, rule, value)
      if mapped is not None:
        inserted.set(mapped.name, mapped.value)
    return inserted

  def _container(self, entry: Annotation) -> ContainerKind:
    value = entry.get("responseContainer")
    if value is None:
      return ContainerKind.SCALAR
    text = require_string(ENTRY_KIND, "responseContainer", value)
    for kind in (ContainerKind.LIST, ContainerKind.SET, ContainerKind.MAP):
      if text == kind.value:
        return kind
    raise UnsupportedValueError(ENTRY_KIND, "responseContainer", str(value), '"List", "Set" or "Map"')

  # --- Content ---

  def _media_type(self, ctx: ConversionContext, modifiers: ModifierList) -> Optional[AttributeValue]:
    produces = modifiers.find_any(ctx.config.produces_annotations)
    if produces is None:
      return None
    return first_value(produces.get("value"))

  def _content(
    self,
    ctx: ConversionContext,
    mapping: AnnotationMapping,
    implementation: Optional[AttributeValue],
    container: ContainerKind,
    media_type: Optional[AttributeValue],
  ) -> Annotation:
    schema = ctx.nested_annotation(mapping.extras["schema"])
    schema.set("implementation", implementation)

    content = ctx.nested_annotation(mapping.extras["content"])
    content.set("mediaType", media_type)
    if container in (ContainerKind.LIST, ContainerKind.SET):
      array = ctx.nested_annotation(mapping.extras["array_schema"])
      array.set("schema", schema)
      if container == ContainerKind.SET:
        array.set("uniqueItems", ctx.builder.boolean(True))
      content.set("array", array)
    else:
      content.set("schema", schema)
    return content

  def _default_content(
    self,
    ctx: ConversionContext,
    method: MethodDecl,
    mapping: AnnotationMapping,
    media_type: Optional[AttributeValue],
  ) -> Optional[Annotation]:
    collection = ctx.resolver.collection_element(method.return_type)
    if collection is not None:
      container, element = collection
      bound = ctx.resolver.is_bound(element, method)
      if not bound or ctx.resolver.is_generic(element):
        EscapeHatch.mark_declaration(
          ctx,
          method,
          EscapeHatch.CHECK_GENERICS,
          f"element type '{element}' of '{method.return_type}' is not concrete",
        )
      implementation = ctx.builder.class_literal_of(element) if bound else None
      return self._content(ctx, mapping, implementation, container, media_type)

    implementation = ctx.resolver.concretize(method)
    if implementation is None:
      EscapeHatch.mark_declaration(
        ctx,
        method,
        EscapeHatch.CHECK_GENERICS,
        f"return type '{method.return_type}' cannot be bound to a concrete schema",
      )
    return self._content(ctx, mapping, implementation, ContainerKind.SCALAR, media_type)
