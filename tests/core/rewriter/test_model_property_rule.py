"""
Tests for the `@ApiModelProperty` -> `@Schema` rule on fields and getters.
"""

import textwrap


def dedent(text: str) -> str:
  return textwrap.dedent(text).lstrip("\n")


def test_fields_and_getters(convert):
  result = convert(
    """
    package com.acme.model;

    import io.swagger.annotations.ApiModelProperty;

    public class User {

        @ApiModelProperty(value = "Status", allowableValues = "active, inactive,banned", required = true)
        private String status;

        @ApiModelProperty("Name")
        public String getName() {
            return null;
        }
    }
    """
  )

  assert result.code == dedent(
    """
    package com.acme.model;

    import io.swagger.v3.oas.annotations.media.Schema;

    public class User {

        @Schema(description = "Status", allowableValues = {"active", "inactive", "banned"}, required = true)
        private String status;

        @Schema(description = "Name")
        public String getName() {
            return null;
        }
    }
    """
  )


def test_data_type_and_example(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiModelProperty;

    class User {
        @ApiModelProperty(name = "created_at", dataType = "string", example = "2020-01-01")
        java.util.Date createdAt;
    }
    """
  )

  assert '@Schema(name = "created_at", type = "string", example = "2020-01-01")' in result.code


def test_constant_values_are_copied_verbatim(convert):
  """
  Scenario: the description is a constant expression.
  Expectation: its text is carried over and the import it needs survives pruning.
  """
  result = convert(
    """
    import com.acme.Docs;
    import io.swagger.annotations.ApiModelProperty;

    class User {
        @ApiModelProperty(value = Docs.ID + " (read-only)")
        long id;
    }
    """
  )

  assert result.code == dedent(
    """
    import com.acme.Docs;
    import io.swagger.v3.oas.annotations.media.Schema;

    class User {
        @Schema(description = Docs.ID + " (read-only)")
        long id;
    }
    """
  )


def test_enum_members(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiModelProperty;

    enum Status {
        ACTIVE;

        @ApiModelProperty("Label")
        String label() {
            return name();
        }
    }
    """
  )

  assert '    @Schema(description = "Label")\n    String label() {' in result.code
