"""
Tests for the Source Patcher.

Verifies that the edit log is replayed onto the original text:
- Empty logs render byte-identical.
- Own-line and inline insertions take the anchor's place.
- Deletions take their line, or their trailing spaces.
- Imports are grouped after their anchor.
"""

from swagger_switcheroo.java.nodes import Annotation, Comment, ImportDecl, PackageDecl, Span
from swagger_switcheroo.java.patcher import line_layout, render_unit


def test_empty_log_is_byte_identical(parse):
  source = "class A {\r\n  int x;   // odd   spacing\r\n}\r\n"
  unit = parse(source)

  assert render_unit(unit) == source


def test_line_layout():
  source = "class A {\n    @Old\n    void m(@P int x) {}\n}"
  own = line_layout(source, source.index("@Old"))
  inline = line_layout(source, source.index("@P"))

  assert own.own_line and own.indent == "    "
  assert not inline.own_line and inline.indent == "    "


def test_replace_own_line_annotation(parse):
  """The new annotation lands on the old one's line, at its indentation."""
  unit = parse(
    """
    class A {
        @Old(1)
        void m() {}
    }
    """
  )
  method = unit.types[0].methods[0]
  old = method.modifiers.annotations[0]

  method.modifiers.insert_before(old, Annotation(name="First"))
  method.modifiers.insert_before(old, Annotation(name="Second"))
  method.modifiers.remove(old)

  assert render_unit(unit) == "class A {\n    @First\n    @Second\n    void m() {}\n}\n"


def test_replace_inline_parameter_annotation(parse):
  unit = parse(
    """
    class A {
        void m(@Old("x")   @Keep int x) {}
    }
    """
  )
  parameter = unit.types[0].methods[0].parameters[0]
  old = parameter.modifiers.annotations[0]

  parameter.modifiers.insert_before(old, Annotation(name="New"))
  parameter.modifiers.remove(old)

  assert render_unit(unit) == "class A {\n    void m(@New @Keep int x) {}\n}\n"


def test_comment_goes_above_declaration(parse):
  unit = parse(
    """
    class A {
        @Old
        int x;
    }
    """
  )
  field = unit.types[0].fields[0]
  field.add_comment(Comment("/* TODO check generics */"))
  field.modifiers.insert_before(field.modifiers.annotations[0], Annotation(name="New"))

  assert render_unit(unit) == "class A {\n    /* TODO check generics */\n    @New\n    @Old\n    int x;\n}\n"


def test_imports_after_last_import(parse):
  unit = parse(
    """
    package p;

    import a.B;

    class A {}
    """
  )
  unit.add_import("c.D")
  unit.add_import("e.F")

  assert render_unit(unit) == "package p;\n\nimport a.B;\nimport c.D;\nimport e.F;\n\nclass A {}\n"


def test_imports_after_package(parse):
  unit = parse(
    """
    package p;

    class A {}
    """
  )
  unit.add_import("c.D")

  assert render_unit(unit) == "package p;\n\nimport c.D;\n\nclass A {}\n"


def test_imports_without_package_go_first(parse):
  unit = parse("class A {}\n")
  unit.add_import("c.D")

  assert render_unit(unit) == "import c.D;\n\nclass A {}\n"


def test_imports_take_place_of_removed_import(parse):
  """With every import removed, new ones are written where the last one was."""
  unit = parse(
    """
    package p;

    import a.B;
    import a.C;

    class A {}
    """
  )
  for declaration in list(unit.imports):
    unit.remove_import(declaration)
  unit.add_import("n.New")

  assert render_unit(unit) == "package p;\n\nimport n.New;\n\nclass A {}\n"


def test_insert_after_member(parse):
  from swagger_switcheroo.java.builder import NodeBuilder

  unit = parse(
    """
    class A {
        void m() {
        }
    }
    """
  )
  owner = unit.types[0]
  helper = NodeBuilder().subclass("Helper", "A.Helper", extends=None, comments=["// TODO externalize"])
  owner.insert_member_after(owner.methods[0], helper)

  assert render_unit(unit) == (
    "class A {\n    void m() {\n    }\n\n    // TODO externalize\n    static class Helper {\n    }\n}\n"
  )


def test_spans_map_to_source(parse):
  """Spans of annotations, imports and the package cover their exact text."""
  unit = parse(
    """
    package com.acme;

    import java.util.List;

    class A {
        @Ann(value = {"a", "b"}, n = -1)
        List<String> items;
    }
    """
  )
  source = unit.source
  annotation = unit.types[0].fields[0].modifiers.annotations[0]

  assert source[annotation.span.start : annotation.span.end] == '@Ann(value = {"a", "b"}, n = -1)'
  assert source[unit.imports[0].span.start : unit.imports[0].span.end] == "import java.util.List;"
  assert isinstance(unit.package, PackageDecl)
  assert unit.package.span == Span(0, len("package com.acme;"))
  assert isinstance(unit.imports[0], ImportDecl)


def test_removing_every_import_removes_the_gap(parse):
  unit = parse(
    """
    package p;

    import a.B;
    import a.C;

    class A {}
    """
  )
  for declaration in list(unit.imports):
    unit.remove_import(declaration)

  assert render_unit(unit) == "package p;\n\nclass A {}\n"
