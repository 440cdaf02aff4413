"""
Exception hierarchy for the conversion pipeline.

`ConversionError` subclasses are hard faults: the file being converted is
abandoned and left untouched. Inconclusive cases (ambiguous generics, `Map`
containers) are not errors; they become marker comments instead.
"""

from typing import Optional


class ConversionError(Exception):
  """Base class for faults that abort the conversion of one file."""

  pass


class UnmappedAttributeError(ConversionError):
  """
  An old-style attribute has no entry in the mapping table.

  Attributes:
      kind: Old annotation kind (e.g. `ApiOperation`).
      attribute: The attribute name as written.
  """

  def __init__(self, kind: str, attribute: str):
    self.kind = kind
    self.attribute = attribute
    super().__init__(f"@{kind}: attribute '{attribute}' is not supported")


class UnsupportedValueError(ConversionError):
  """
  An attribute value does not have the shape its rule requires,
  e.g. a constant reference where a literal is needed.
  """

  def __init__(self, kind: str, attribute: str, text: str, expected: Optional[str] = None):
    self.kind = kind
    self.attribute = attribute
    self.text = text
    hint = f" (expected {expected})" if expected else ""
    super().__init__(f"@{kind}: unsupported value for '{attribute}': {text}{hint}")


class FrontendError(Exception):
  """
  Java source could not be read into a declaration tree.

  Attributes:
      path: The offending file, if known.
      line: 1-based line of the failure, if known.
  """

  def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
    self.path = path
    self.line = line
    where = ""
    if path:
      where = f"{path}:{line}: " if line else f"{path}: "
    elif line:
      where = f"line {line}: "
    super().__init__(f"{where}{message}")
