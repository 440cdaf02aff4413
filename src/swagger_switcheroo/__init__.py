"""
swagger-switcheroo Package.

Rewrites Swagger 1.x documentation annotations (``io.swagger.annotations``) in
Java source into their OpenAPI 3 counterparts (``io.swagger.v3.oas.annotations``).

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import swagger_switcheroo as ss

    java = '''
    import io.swagger.annotations.ApiOperation;

    class UserResource {
        @ApiOperation(value = "List users")
        void list() {}
    }
    '''
    print(ss.convert(java))

Engine Usage
^^^^^^^^^^^^

.. code-block:: python

    from swagger_switcheroo import ConversionEngine, RuntimeConfig

    engine = ConversionEngine(config=RuntimeConfig(max_line_length=100))
    res = engine.run(java)

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import Optional

from swagger_switcheroo.config import RuntimeConfig
from swagger_switcheroo.core.conversion_result import ConversionResult
from swagger_switcheroo.core.engine import ConversionEngine
from swagger_switcheroo.semantics.manager import SemanticsManager

__version__ = "0.1.0"


def convert(code: str, config: Optional[RuntimeConfig] = None, semantics: Optional[SemanticsManager] = None) -> str:
  """
  Converts the annotations of one Java source string.

  Args:
      code: Java source.
      config: Runtime settings. Defaults apply if None.
      semantics: A preloaded mapping table.

  Returns:
      str: The converted source.

  Raises:
      ValueError: If the source cannot be parsed or contains an unsupported
          annotation attribute.
  """
  engine = ConversionEngine(semantics, config=config)
  result = engine.run(code)
  if not result.success:
    raise ValueError(f"Conversion failed: {'; '.join(result.errors)}")
  return result.code


__all__ = [
  "ConversionEngine",
  "ConversionResult",
  "RuntimeConfig",
  "SemanticsManager",
  "convert",
]
