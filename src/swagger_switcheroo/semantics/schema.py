"""
Pydantic Schemas for the Annotation Mapping Table.

Validates the structure of `swagger_v2.json`: for every old annotation kind,
the new annotation it becomes and how each of its attributes is carried over.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from swagger_switcheroo.enums import AttributeShape, Holder


class AttributeRule(BaseModel):
  """
  Transform descriptor for one old attribute.
  """

  target: Optional[str] = Field(None, description="Attribute name on the new annotation.")
  shape: AttributeShape = Field(AttributeShape.COPY, description="How the value is transformed.")
  holder: Holder = Field(Holder.SELF, description="Which annotation receives the attribute.")

  @model_validator(mode="after")
  def check_target(self) -> "AttributeRule":
    """
    Ensures value-carrying shapes name their destination attribute.

    Returns:
        AttributeRule: The validated rule.

    Raises:
        ValueError: If a copy/requote/split rule has no target.
    """
    if self.shape in (AttributeShape.COPY, AttributeShape.REQUOTE, AttributeShape.SPLIT_ARRAY) and not self.target:
      raise ValueError(f"Attribute rule with shape '{self.shape.value}' requires a target")
    return self


class AnnotationMapping(BaseModel):
  """
  Mapping of one old annotation kind.
  """

  source: str = Field(..., description="Qualified name of the old annotation.")
  target: Optional[str] = Field(None, description="Qualified name of the main new annotation.")
  extras: Dict[str, str] = Field(default_factory=dict, description="Auxiliary new annotations by role.")
  attributes: Dict[str, AttributeRule] = Field(default_factory=dict, description="Rules keyed by old attribute name.")


class MappingTable(BaseModel):
  """
  Root of a mapping file.
  """

  packages: Dict[str, List[str]] = Field(default_factory=dict, description="Known members of old-style packages.")
  annotations: Dict[str, AnnotationMapping] = Field(default_factory=dict)
