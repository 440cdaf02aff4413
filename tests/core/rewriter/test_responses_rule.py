"""
Tests for the `@ApiResponses` rule.

Verifies:
1. Each entry becomes a repeated `@ApiResponse` with a quoted `responseCode`.
2. A 200 response is derived from the return type when none documents a payload.
3. Parameterized return types are bound through a synthesized helper class.
4. Inconclusive generics and `Map` containers leave exactly one marker.
5. `List`/`Set` containers wrap the payload in `@ArraySchema`.
6. The media type comes from `@Produces`.
"""

import textwrap

PAGE = """
package com.acme;

import java.util.List;

public class Page<T> {

    public Page(List<T> content, long total) {
    }

    private Page() {
    }
}
"""


def dedent(text: str) -> str:
  return textwrap.dedent(text).lstrip("\n")


def test_default_ok_response_from_return_type(convert):
  """
  Scenario: only a 404 entry is documented.
  Expectation: a 200 response with the return type as schema follows it.
  """
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses({
            @ApiResponse(code = 404, message = "Not found")
        })
        public User get(String id) {
            return null;
        }
    }
    """
  )

  assert result.success
  assert result.code == dedent(
    """
    import io.swagger.v3.oas.annotations.responses.ApiResponse;
    import io.swagger.v3.oas.annotations.media.Content;
    import io.swagger.v3.oas.annotations.media.Schema;

    public class UserResource {

        @ApiResponse(responseCode = "404", description = "Not found")
        @ApiResponse(responseCode = "200", content = @Content(schema = @Schema(implementation = User.class)))
        public User get(String id) {
            return null;
        }
    }
    """
  )


def test_void_method_gets_no_default_response(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    class R {
        @ApiResponses(value = {@ApiResponse(code = 204, message = "Deleted")})
        void delete() {}
    }
    """
  )

  assert result.code == dedent(
    """
    import io.swagger.v3.oas.annotations.responses.ApiResponse;

    class R {
        @ApiResponse(responseCode = "204", description = "Deleted")
        void delete() {}
    }
    """
  )


def test_generic_return_type_is_synthesized(convert):
  result = convert(
    """
    package com.acme;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 200, message = "OK"))
        public Page<User> list() {
            return null;
        }
    }
    """,
    PAGE,
  )

  assert result.success
  assert result.synthesized_types == ["com.acme.UserResource.UserPage"]
  assert result.warnings == []
  assert result.code == dedent(
    """
    package com.acme;

    import io.swagger.v3.oas.annotations.responses.ApiResponse;
    import io.swagger.v3.oas.annotations.media.Content;
    import io.swagger.v3.oas.annotations.media.Schema;
    import java.util.List;

    public class UserResource {

        @ApiResponse(responseCode = "200", description = "OK", content = @Content(schema = @Schema(implementation = UserPage.class)))
        public Page<User> list() {
            return null;
        }

        // TODO externalize
        static class UserPage extends Page<User> {
            public UserPage(List<User> content, long total) {
                super(content, total);
            }
        }
    }
    """
  )


def test_explicit_generic_matching_return_type_is_synthesized(convert):
  result = convert(
    """
    package com.acme;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 200, message = "OK", response = Page.class))
        public Page<User> list() {
            return null;
        }
    }
    """,
    PAGE,
  )

  assert "@Schema(implementation = UserPage.class)" in result.code
  assert "static class UserPage extends Page<User> {" in result.code


def test_synthesized_class_is_reused(convert):
  result = convert(
    """
    package com.acme;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 200, message = "OK"))
        public Page<User> list() {
            return null;
        }

        @ApiResponses(@ApiResponse(code = 200, message = "OK"))
        public Page<User> search() {
            return null;
        }
    }
    """,
    PAGE,
  )

  assert result.code.count("static class UserPage") == 1
  assert result.code.count("implementation = UserPage.class") == 2
  assert result.synthesized_types == ["com.acme.UserResource.UserPage"]


def test_unbound_type_variable_leaves_marker(convert):
  result = convert(
    """
    package com.acme;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 200, message = "OK"))
        public <T> Page<T> find() {
            return null;
        }
    }
    """,
    PAGE,
  )

  assert result.success
  assert result.code.count("/* TODO check generics */") == 1
  assert (
    "    /* TODO check generics */\n"
    '    @ApiResponse(responseCode = "200", description = "OK", content = @Content(schema = @Schema))\n'
    "    public <T> Page<T> find() {"
  ) in result.code
  assert result.synthesized_types == []
  assert len(result.warnings) == 1


def test_generic_other_than_return_type_is_kept(convert):
  """
  Scenario: `response = Page.class` on a method that does not return a Page.
  Expectation: no helper class, one marker, and the value is kept as written.
  """
  result = convert(
    """
    package com.acme;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 200, message = "OK", response = Page.class))
        public Object list() {
            return null;
        }
    }
    """,
    PAGE,
  )

  assert result.code.count("TODO check generics") == 1
  assert "TODO externalize" not in result.code
  assert (
    "    /* TODO check generics */\n"
    '    @ApiResponse(responseCode = "200", description = "OK", content = @Content(schema = @Schema(implementation = Page.class)))\n'
    "    public Object list() {"
  ) in result.code


def test_helper_name_taken_leaves_marker(convert):
  result = convert(
    """
    package com.acme;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 200, message = "OK"))
        public Page<User> list() {
            return null;
        }

        static class UserPage {
        }
    }
    """,
    PAGE,
  )

  assert result.code.count("TODO check generics") == 1
  assert result.synthesized_types == []


def test_list_container(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    class R {
        @ApiResponses({@ApiResponse(code = 200, message = "OK", response = User.class, responseContainer = "List")})
        Response list() { return null; }
    }
    """
  )

  assert "content = @Content(array = @ArraySchema(schema = @Schema(implementation = User.class)))" in result.code
  assert "uniqueItems" not in result.code
  assert "responseContainer" not in result.code
  assert "import io.swagger.v3.oas.annotations.media.ArraySchema;" in result.code


def test_set_container(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    class R {
        @ApiResponses({@ApiResponse(code = 200, message = "OK", response = User.class, responseContainer = "Set")})
        Response list() { return null; }
    }
    """
  )

  assert "@ArraySchema(schema = @Schema(implementation = User.class), uniqueItems = true)" in result.code


def test_map_container_leaves_marker(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    class R {
        @ApiResponses(@ApiResponse(code = 200, response = User.class, responseContainer = "Map"))
        Response all() { return null; }
    }
    """
  )

  assert result.success
  assert (
    '    @ApiResponse(responseCode = "200", content = @Content(schema = @Schema(implementation = User.class)) /* TODO transform to map */)\n'
  ) in result.code
  assert len(result.warnings) == 1


def test_unknown_container_aborts(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    class R {
        @ApiResponses(@ApiResponse(code = 200, response = User.class, responseContainer = "Array"))
        Response all() { return null; }
    }
    """
  )

  assert not result.success


def test_collection_return_type_is_wrapped(convert):
  """The default 200 response of a `List<User>` method describes an array of `User`."""
  result = convert(
    """
    package com.acme;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;
    import java.util.List;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 200, message = "OK"))
        public List<User> list() {
            return null;
        }
    }
    """
  )

  assert result.code == dedent(
    """
    package com.acme;

    import java.util.List;
    import io.swagger.v3.oas.annotations.responses.ApiResponse;
    import io.swagger.v3.oas.annotations.media.Content;
    import io.swagger.v3.oas.annotations.media.ArraySchema;
    import io.swagger.v3.oas.annotations.media.Schema;

    public class UserResource {

        @ApiResponse(
            responseCode = "200",
            description = "OK",
            content = @Content(array = @ArraySchema(schema = @Schema(implementation = User.class)))
        )
        public List<User> list() {
            return null;
        }
    }
    """
  )


def test_set_return_type_is_unique(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;
    import java.util.Set;

    class R {
        @ApiResponses(@ApiResponse(code = 404, message = "None"))
        Set<String> names() { return null; }
    }
    """
  )

  assert "@ArraySchema(schema = @Schema(implementation = String.class), uniqueItems = true)" in result.code


def test_collection_of_type_variable_leaves_marker(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;
    import java.util.List;

    class R<T> {
        @ApiResponses(@ApiResponse(code = 200, message = "OK"))
        List<T> all() { return null; }
    }
    """
  )

  assert result.code.count("TODO check generics") == 1
  assert "@ArraySchema(schema = @Schema)" in result.code


def test_media_type_from_produces(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;
    import javax.ws.rs.Produces;

    class R {
        @Produces({"application/json", "text/plain"})
        @ApiResponses(@ApiResponse(code = 200, message = "OK", response = User.class))
        Response get() { return null; }
    }
    """
  )

  assert '@Content(mediaType = "application/json", schema = @Schema(implementation = User.class))' in result.code
  assert '@Produces({"application/json", "text/plain"})' in result.code


def test_media_type_constant_from_jakarta_produces(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;
    import jakarta.ws.rs.Produces;
    import jakarta.ws.rs.core.MediaType;

    class R {
        @Produces(MediaType.APPLICATION_JSON)
        @ApiResponses(@ApiResponse(code = 200, message = "OK", response = User.class))
        Response get() { return null; }
    }
    """
  )

  assert "@Content(mediaType = MediaType.APPLICATION_JSON, schema = @Schema(implementation = User.class))" in result.code
  assert "import jakarta.ws.rs.core.MediaType;" in result.code


def test_entries_must_be_annotations(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponses;

    class R {
        @ApiResponses(Responses.ALL)
        Response get() { return null; }
    }
    """
  )

  assert not result.success
  assert "@ApiResponse entries" in result.errors[0]


def test_non_literal_code_aborts(convert):
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    class R {
        @ApiResponses(@ApiResponse(code = Codes.OK, message = "OK"))
        Response get() { return null; }
    }
    """
  )

  assert not result.success
  assert "code" in result.errors[0]


def test_decimal_codes_are_requoted(convert):
  """Plain decimal codes are number literals, so every entry converts."""
  result = convert(
    """
    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    class R {
        @ApiResponses({@ApiResponse(code = 200, message = "OK"), @ApiResponse(code = 500, message = "Boom")})
        void delete() {}
    }
    """
  )

  assert result.success, result.errors
  assert result.code == dedent(
    """
    import io.swagger.v3.oas.annotations.responses.ApiResponse;

    class R {
        @ApiResponse(responseCode = "200", description = "OK")
        @ApiResponse(responseCode = "500", description = "Boom")
        void delete() {}
    }
    """
  )


def test_library_interface_return_type_is_not_extended(convert):
  """
  Scenario: a method returns `Map<String, User>` and only documents a 404.
  Expectation: no helper class extends the interface; the default 200 gets a
  bare schema and the method one marker.
  """
  result = convert(
    """
    import java.util.Map;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 404, message = "Not found"))
        public Map<String, User> all() {
            return null;
        }
    }
    """
  )

  assert result.success
  assert "extends Map" not in result.code
  assert result.synthesized_types == []
  assert result.code.count("/* TODO check generics */") == 1
  assert '    @ApiResponse(responseCode = "200", content = @Content(schema = @Schema))\n' in result.code


def test_source_interface_return_type_is_not_extended(convert):
  result = convert(
    """
    package com.acme;

    import io.swagger.annotations.ApiResponse;
    import io.swagger.annotations.ApiResponses;

    public class UserResource {

        @ApiResponses(@ApiResponse(code = 200, message = "OK"))
        public Paged<User> find() {
            return null;
        }
    }
    """,
    """
    package com.acme;

    public interface Paged<T> {
    }
    """,
  )

  assert result.success
  assert "static class UserPaged" not in result.code
  assert result.code.count("/* TODO check generics */") == 1
