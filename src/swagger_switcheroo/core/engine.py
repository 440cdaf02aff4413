"""
Orchestration Engine for Annotation Conversion.

This module provides the `ConversionEngine`, the per-file driver. One call to
`convert` runs the whole pipeline on a single compilation unit:

1.  **Walk**: the `TreeWalker` visits every declaration and applies the
    annotation rules. Each rule appends its new nodes to the pending list.
2.  **Post-processing**: imports made unused are pruned, qualified names in
    the new nodes are shortened and long annotations are wrapped. Skipped when
    the walk changed nothing.
3.  **Rendering**: the `SourcePatcher` replays the edit log on the original text.

A hard fault anywhere in the pipeline yields a failed `ConversionResult` that
carries the original code, so callers never write a half-converted file.
"""

from pathlib import Path
from typing import Optional, Union

from swagger_switcheroo.analysis.type_index import TypeIndex
from swagger_switcheroo.config import RuntimeConfig
from swagger_switcheroo.core.conversion_result import ConversionResult
from swagger_switcheroo.core.errors import ConversionError, FrontendError
from swagger_switcheroo.core.post_process import PostProcessPass
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.core.walker import TreeWalker
from swagger_switcheroo.java.frontend import JavaFrontend
from swagger_switcheroo.java.nodes import CompilationUnit
from swagger_switcheroo.java.patcher import SourcePatcher
from swagger_switcheroo.semantics.manager import SemanticsManager


class ConversionEngine:
  """
  Converts compilation units from the old annotation vocabulary to the new one.

  The engine itself is stateless between units; everything a conversion
  mutates lives in the `ConversionContext` created per call.
  """

  def __init__(
    self,
    semantics: Optional[SemanticsManager] = None,
    config: Optional[RuntimeConfig] = None,
    type_index: Optional[TypeIndex] = None,
  ):
    """
    Initializes the Engine.

    Args:
        semantics (SemanticsManager, optional): The mapping table. Loads the
            bundled table if None.
        config (RuntimeConfig, optional): Runtime settings. Defaults apply if None.
        type_index (TypeIndex, optional): Type facts shared across a batch. When
            None, `run` indexes the single unit it parses.
    """
    self.config = config or RuntimeConfig()
    self.semantics = semantics or SemanticsManager(extra_known=self.config.produces_annotations)
    self.type_index = type_index
    self.frontend = JavaFrontend(known=self.semantics.is_known)
    self.walker = TreeWalker()
    self.post_process = PostProcessPass(self.config)

  def parse(self, code: str, path: Optional[Union[str, Path]] = None) -> CompilationUnit:
    """
    Parses Java source into a compilation unit.

    Raises:
        FrontendError: If the source is not valid Java.
    """
    return self.frontend.parse(code, path)

  def run(self, code: str, path: Optional[Union[str, Path]] = None) -> ConversionResult:
    """
    Parses and converts Java source text.

    Args:
        code (str): Java source.
        path: Where the source came from, used in messages.

    Returns:
        ConversionResult: The converted code, or a failed result with the
        original code if the source could not be parsed or converted.
    """
    try:
      unit = self.parse(code, path)
    except FrontendError as e:
      return ConversionResult(code=code, success=False, errors=[str(e)])
    return self.convert(unit)

  def convert(self, unit: CompilationUnit) -> ConversionResult:
    """
    Converts one parsed unit.

    Args:
        unit (CompilationUnit): A freshly parsed unit with an empty edit log.

    Returns:
        ConversionResult: Outcome with the rendered code, marker notes and
        synthesized helper types.
    """
    index = self.type_index
    if index is None:
      index = TypeIndex.build([unit])

    ctx = ConversionContext(unit, self.semantics, index, self.config)
    try:
      self.walker.walk(ctx)
      self.post_process.run(ctx)
      code = SourcePatcher(unit, self.config.indent).render()
    except ConversionError as e:
      where = f"{unit.path}: " if unit.path else ""
      return ConversionResult(code=unit.source, success=False, errors=[f"{where}{e}"])

    return ConversionResult(
      code=code,
      warnings=list(ctx.warnings),
      changed=code != unit.source,
      synthesized_types=[c.qualified_name for c in ctx.synthesized],
    )
