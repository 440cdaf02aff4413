"""
Escape Hatch Mechanism for Cases Needing Manual Review.

When a conversion cannot be completed safely (an ambiguous generic type, a
`Map` response container), the converter keeps going with a best-effort result
and leaves a marker comment in the code so a person can finish the job.
Markers are logged and recorded on the conversion context.
"""

from typing import TYPE_CHECKING

from rich.markup import escape

from swagger_switcheroo.java.nodes import Annotation, Comment, Declaration
from swagger_switcheroo.utils.console import log_warning

if TYPE_CHECKING:
  from swagger_switcheroo.core.rewriter.context import ConversionContext


class EscapeHatch:
  """
  Inserts standardized marker comments.
  """

  CHECK_GENERICS = "/* TODO check generics */"
  TRANSFORM_TO_MAP = "/* TODO transform to map */"
  EXTERNALIZE = "// TODO externalize"

  @staticmethod
  def mark_declaration(ctx: "ConversionContext", declaration: Declaration, marker: str, reason: str) -> Comment:
    """
    Places a marker comment on its own line before a declaration.

    Args:
        ctx: The active conversion context.
        declaration: The method or field needing review.
        marker: One of the marker constants.
        reason: Human-readable explanation, logged and recorded.

    Returns:
        Comment: The inserted comment node.
    """
    comment = declaration.add_comment(ctx.builder.comment(marker))
    ctx.track(comment)
    ctx.note(f"{_describe(declaration)}: {reason}")
    return comment

  @staticmethod
  def mark_annotation(ctx: "ConversionContext", annotation: Annotation, declaration: Declaration, marker: str, reason: str) -> Comment:
    """
    Places a marker comment inside the parentheses of a new annotation.

    Args:
        ctx: The active conversion context.
        annotation: A pending annotation.
        declaration: Owner of the annotation, for the log message.
        marker: One of the marker constants.
        reason: Human-readable explanation.

    Returns:
        Comment: The added comment node.
    """
    comment = ctx.builder.comment(marker)
    annotation.comments.append(comment)
    ctx.track(comment)
    ctx.note(f"{_describe(declaration)}: {reason}")
    return comment


def _describe(declaration: Declaration) -> str:
  owner = declaration.enclosing_class
  prefix = f"{owner.qualified_name}." if owner else ""
  return f"{prefix}{declaration.name}"


def log_marker(message: str) -> None:
  log_warning(f"[marker]Review needed[/marker] {escape(message)}")
