"""
Conversion Context Module.

This module provides the `ConversionContext` container, which holds the state
of converting one compilation unit: the unit itself, the shared services
(mapping table, type index, configuration) and the pending-node list that the
post-process pass consumes. A context never outlives its unit.
"""

from typing import List, Optional

from swagger_switcheroo.analysis.type_index import TypeIndex
from swagger_switcheroo.config import RuntimeConfig
from swagger_switcheroo.core.attribute_mapper import AttributeMapper
from swagger_switcheroo.core.escape_hatch import log_marker
from swagger_switcheroo.core.type_resolver import TypeResolver
from swagger_switcheroo.java.builder import NodeBuilder
from swagger_switcheroo.java.nodes import Annotation, ClassDecl, CompilationUnit, JavaNode, ModifierList
from swagger_switcheroo.semantics.manager import SemanticsManager


class ConversionContext:
  """
  Per-unit state shared by the rewriters.

  Attributes:
      pending: Every node inserted during the walk, in insertion order.
      warnings: Review notes for the marker comments inserted.
      synthesized: Helper classes created by the type resolver.
  """

  def __init__(
    self,
    unit: CompilationUnit,
    semantics: SemanticsManager,
    type_index: TypeIndex,
    config: Optional[RuntimeConfig] = None,
  ):
    """
    Initializes the context.

    Args:
        unit: The compilation unit being converted.
        semantics: The mapping table.
        type_index: Type facts across the run.
        config: Runtime configuration.
    """
    self.unit = unit
    self.semantics = semantics
    self.index = type_index
    self.config = config or RuntimeConfig()
    self.builder = NodeBuilder()
    self.mapper = AttributeMapper(semantics, self.builder)
    self.resolver = TypeResolver(self)

    self.pending: List[JavaNode] = []
    self.warnings: List[str] = []
    self.synthesized: List[ClassDecl] = []

  def track(self, node: JavaNode) -> JavaNode:
    """Registers a newly created node for post-processing."""
    self.pending.append(node)
    return node

  def insert_annotation(self, modifiers: ModifierList, anchor: Annotation, qualified_name: str) -> Annotation:
    """
    Creates a new annotation in front of `anchor` on the same declaration.

    Args:
        modifiers: The declaration's modifier list.
        anchor: The old annotation being replaced.
        qualified_name: Kind of the new annotation.

    Returns:
        Annotation: The tracked, inserted annotation.
    """
    annotation = self.builder.annotation(qualified_name)
    modifiers.insert_before(anchor, annotation)
    self.track(annotation)
    return annotation

  def nested_annotation(self, qualified_name: str) -> Annotation:
    """Creates a tracked annotation meant to be used as an attribute value."""
    annotation = self.builder.annotation(qualified_name)
    self.track(annotation)
    return annotation

  def note(self, message: str) -> None:
    self.warnings.append(message)
    log_marker(message)
