"""
Enumerations for swagger-switcheroo.

This module defines the small closed vocabularies shared by the declaration
tree, the mapping table and the rewriters.
"""

from enum import Enum


class LiteralKind(str, Enum):
  """
  Lexical category of a literal attribute value.
  """

  STRING = "string"
  BOOLEAN = "boolean"
  NUMBER = "number"
  CHAR = "char"
  NULL = "null"


class AttributeShape(str, Enum):
  """
  How an old attribute value is carried over to the new annotation.
  Used by the mapping table in `src/swagger_switcheroo/semantics/`.
  """

  COPY = "copy"  # value copied verbatim, name possibly changed
  REQUOTE = "requote"  # numeric literal re-emitted as a string literal
  SPLIT_ARRAY = "split_array"  # "a, b" -> {"a", "b"}
  CONSUME = "consume"  # read by a sibling rule, never copied
  SPECIAL = "special"  # handled by the rewriter itself


class Holder(str, Enum):
  """
  Which annotation receives a mapped attribute.
  """

  SELF = "self"  # the new annotation replacing the old one
  SCHEMA = "schema"  # a nested Schema annotation attached via `schema = ...`


class ContainerKind(str, Enum):
  """
  Shape of a response payload, from `responseContainer` or the return type.
  """

  SCALAR = "scalar"
  LIST = "List"
  SET = "Set"
  MAP = "Map"
