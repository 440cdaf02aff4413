"""
Tests for the `@ApiParam` -> `@Parameter` rule.

Verifies that `defaultValue` and `allowableValues` move into a nested
`schema = @Schema(...)`, created only when one of them is present.
"""

import textwrap


def dedent(text: str) -> str:
  return textwrap.dedent(text).lstrip("\n")


def test_parameters(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiParam;

    public class UserResource {

        public void list(@ApiParam(value = "Page size", defaultValue = "20", required = false) int size) {
        }

        public void find(@ApiParam(name = "q", allowableValues = "a,b") String query, @ApiParam("Flag") boolean flag) {
        }
    }
    """
  )

  assert result.code == dedent(
    """
    import io.swagger.v3.oas.annotations.Parameter;
    import io.swagger.v3.oas.annotations.media.Schema;

    public class UserResource {

        public void list(@Parameter(description = "Page size", required = false, schema = @Schema(defaultValue = "20")) int size) {
        }

        public void find(@Parameter(name = "q", schema = @Schema(allowableValues = {"a", "b"})) String query, @Parameter(description = "Flag") boolean flag) {
        }
    }
    """
  )


def test_parameter_without_schema_attributes(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiParam;

    class R {
        void m(@ApiParam(value = "Id", required = true, hidden = true, example = "42") long id) {}
    }
    """
  )

  assert "@Parameter(description = \"Id\", required = true, hidden = true, example = \"42\") long id" in result.code
  assert "Schema" not in result.code


def test_field_parameter(convert):
  """Bean-style parameter holders carry `@ApiParam` on fields."""
  result = convert(
    """
    import io.swagger.annotations.ApiParam;
    import javax.ws.rs.QueryParam;

    class Filter {
        @ApiParam("Page") @QueryParam("page") private int page;
    }
    """
  )

  assert result.code == dedent(
    """
    import javax.ws.rs.QueryParam;
    import io.swagger.v3.oas.annotations.Parameter;

    class Filter {
        @Parameter(description = "Page")
        @QueryParam("page") private int page;
    }
    """
  )


def test_unknown_parameter_attribute_aborts(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiParam;

    class R {
        void m(@ApiParam(access = "internal") long id) {}
    }
    """
  )

  assert not result.success
  assert "access" in result.errors[0]
