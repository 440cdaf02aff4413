"""
Attribute Mapper.

Table-driven translation of old-style attribute values. Each
`(annotation kind, attribute name)` pair maps to an `AttributeRule` from the
mapping table; looking up a pair that is not in the table is a hard fault,
so user-written metadata is never dropped silently.
"""

import re
from dataclasses import dataclass
from typing import Optional

from swagger_switcheroo.core.errors import UnmappedAttributeError, UnsupportedValueError
from swagger_switcheroo.enums import AttributeShape, Holder, LiteralKind
from swagger_switcheroo.java.builder import NodeBuilder
from swagger_switcheroo.java.nodes import AttributeValue, Literal
from swagger_switcheroo.semantics.manager import SemanticsManager
from swagger_switcheroo.semantics.schema import AttributeRule

_LIST_SEPARATOR = re.compile(r"\s*,\s*")


@dataclass(frozen=True)
class MappedAttribute:
  """
  A translated attribute.

  Attributes:
      name: Attribute name on the new annotation.
      value: Translated value.
      holder: Annotation that receives it.
  """

  name: str
  value: AttributeValue
  holder: Holder = Holder.SELF


class AttributeMapper:
  """
  Looks up and applies attribute rules.

  Args:
      semantics: Source of the mapping table.
      builder: Factory for translated values.
  """

  def __init__(self, semantics: SemanticsManager, builder: Optional[NodeBuilder] = None):
    self.semantics = semantics
    self.builder = builder or NodeBuilder()

  def lookup(self, kind: str, attribute: Optional[str]) -> AttributeRule:
    """
    Finds the rule for an attribute. The unnamed attribute is `value`.

    Args:
        kind: Old annotation kind (table key), e.g. `ApiParam`.
        attribute: Attribute name as written, None for the unnamed one.

    Returns:
        AttributeRule: The matching rule.

    Raises:
        UnmappedAttributeError: If the table has no rule for the attribute.
    """
    name = attribute or "value"
    rules = self.semantics.get(kind).attributes
    if name not in rules:
      raise UnmappedAttributeError(kind, name)
    return rules[name]

  def apply(self, kind: str, attribute: Optional[str], rule: AttributeRule, value: AttributeValue) -> Optional[MappedAttribute]:
    """
    Applies a non-special rule to a value.

    Returns:
        The mapped attribute, or None for consumed attributes.

    Raises:
        UnsupportedValueError: If the value does not fit the rule's shape.
    """
    name = attribute or "value"
    if rule.shape == AttributeShape.CONSUME:
      return None
    if rule.shape == AttributeShape.COPY:
      return MappedAttribute(rule.target, value, rule.holder)
    if rule.shape == AttributeShape.REQUOTE:
      return MappedAttribute(rule.target, self.requote(kind, name, value), rule.holder)
    if rule.shape == AttributeShape.SPLIT_ARRAY:
      return MappedAttribute(rule.target, self.split(kind, name, value), rule.holder)
    raise ValueError(f"@{kind}.{name}: '{rule.shape.value}' attributes are translated by their rewriter")

  def map(self, kind: str, attribute: Optional[str], value: AttributeValue) -> Optional[MappedAttribute]:
    """
    Translates one attribute: `(kind, name, value) -> (new name, new value, holder)`.

    Args:
        kind: Old annotation kind.
        attribute: Attribute name, None for the unnamed one.
        value: Attribute value as read.

    Returns:
        The mapped attribute, or None if the attribute is consumed.
    """
    return self.apply(kind, attribute, self.lookup(kind, attribute), value)

  def requote(self, kind: str, attribute: str, value: AttributeValue) -> Literal:
    """`200` -> `"200"`."""
    if not isinstance(value, Literal) or value.kind not in (LiteralKind.NUMBER, LiteralKind.STRING):
      raise UnsupportedValueError(kind, attribute, str(value), "a number literal")
    if value.kind == LiteralKind.STRING:
      return value
    return self.builder.string(value.text)

  def split(self, kind: str, attribute: str, value: AttributeValue):
    """`"a, b,c"` -> `{"a", "b", "c"}`."""
    if not isinstance(value, Literal) or value.kind != LiteralKind.STRING:
      raise UnsupportedValueError(kind, attribute, str(value), "a string literal")
    return self.builder.string_array(_LIST_SEPARATOR.split(value.value.strip()))
