"""
Data structures representing the output of the conversion pipeline.

This module defines the `ConversionResult` Pydantic model, which encapsulates
the converted source, any errors encountered and the marker comments left for
manual review.
"""

from typing import List

from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
  """
  Container for the result of converting one compilation unit.
  """

  code: str = Field(default="", description="The converted source code.")
  errors: List[str] = Field(default_factory=list, description="Hard faults that aborted the conversion.")
  warnings: List[str] = Field(default_factory=list, description="Marker comments inserted for manual review.")
  success: bool = Field(
    default=True,
    description="True if the conversion completed without a hard fault.",
  )
  changed: bool = Field(default=False, description="True if the code differs from the input.")
  synthesized_types: List[str] = Field(default_factory=list, description="Qualified names of helper classes created.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0

  @property
  def needs_review(self) -> bool:
    return len(self.warnings) > 0
