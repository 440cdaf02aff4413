"""
Base Annotation Rule.

Every rule follows the same per-declaration state machine:

    SEARCH -> not found: SKIP
           -> found:     TRANSLATE -> DELETE_OLD

The old annotation is gone after one pass, so running a rule again is a no-op.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from swagger_switcheroo.core.errors import UnsupportedValueError
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.enums import LiteralKind
from swagger_switcheroo.java.nodes import Annotation, ArrayValue, AttributeValue, Declaration, Literal, ModifierList
from swagger_switcheroo.semantics.schema import AnnotationMapping


class AnnotationRule(ABC):
  """
  Converts one old annotation kind.

  Attributes:
      kind: Key of the old annotation in the mapping table.
  """

  kind: str = ""

  def mapping(self, ctx: ConversionContext) -> AnnotationMapping:
    return ctx.semantics.get(self.kind)

  def apply(self, ctx: ConversionContext, modifiers: ModifierList, declaration: Declaration) -> bool:
    """
    Runs the rule on one modifier list.

    Args:
        ctx: The active conversion context.
        modifiers: Modifier list to search.
        declaration: The declaration that owns the modifiers (for type queries).

    Returns:
        bool: True if an old annotation was found and converted.
    """
    old = modifiers.find(self.mapping(ctx).source)
    if old is None:
      return False
    self.translate(ctx, modifiers, old, declaration)
    modifiers.remove(old)
    return True

  @abstractmethod
  def translate(self, ctx: ConversionContext, modifiers: ModifierList, old: Annotation, declaration: Declaration) -> None:
    """Inserts the replacement annotation(s) in front of `old`."""
    pass

  def copy_attributes(self, ctx: ConversionContext, old: Annotation, target: Annotation) -> None:
    """Maps every attribute of `old` onto `target` through the mapping table."""
    for name, value in old.items():
      mapped = ctx.mapper.map(self.kind, name, value)
      if mapped is not None:
        target.set(mapped.name, mapped.value)


def iter_strings(kind: str, attribute: str, value: AttributeValue) -> Iterator[Literal]:
  """
  Yields the string literals of a single string or an array of strings.

  Raises:
      UnsupportedValueError: For any other value.
  """
  items = value.items if isinstance(value, ArrayValue) else [value]
  for item in items:
    if not isinstance(item, Literal) or item.kind != LiteralKind.STRING:
      raise UnsupportedValueError(kind, attribute, str(item), "a string literal")
    yield item


def require_boolean(kind: str, attribute: str, value: AttributeValue) -> bool:
  """Reads a `true`/`false` literal."""
  if not isinstance(value, Literal) or value.kind != LiteralKind.BOOLEAN:
    raise UnsupportedValueError(kind, attribute, str(value), "a boolean literal")
  return bool(value.value)


def require_string(kind: str, attribute: str, value: AttributeValue) -> str:
  if not isinstance(value, Literal) or value.kind != LiteralKind.STRING:
    raise UnsupportedValueError(kind, attribute, str(value), "a string literal")
  return str(value.value)


def first_value(value: Optional[AttributeValue]) -> Optional[AttributeValue]:
  """First element of an array value (None if empty), or the value itself."""
  if isinstance(value, ArrayValue):
    return value.items[0] if value.items else None
  return value
