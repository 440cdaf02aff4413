"""
Annotation rewriters, one per old-style annotation kind.
"""

from swagger_switcheroo.core.rewriter.api import ApiRule
from swagger_switcheroo.core.rewriter.base import AnnotationRule
from swagger_switcheroo.core.rewriter.context import ConversionContext
from swagger_switcheroo.core.rewriter.model_property import ApiModelPropertyRule
from swagger_switcheroo.core.rewriter.operation import ApiOperationRule
from swagger_switcheroo.core.rewriter.parameters import ApiParamRule
from swagger_switcheroo.core.rewriter.responses import ApiResponsesRule

__all__ = [
  "AnnotationRule",
  "ApiModelPropertyRule",
  "ApiOperationRule",
  "ApiParamRule",
  "ApiResponsesRule",
  "ApiRule",
  "ConversionContext",
]
