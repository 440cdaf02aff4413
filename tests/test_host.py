"""
Tests for the batch Host.

Verifies:
1. Discovery of Java files.
2. Per-file outcomes: converted, unchanged and failed files, with failures
   leaving the file untouched.
3. Dry-run, progress reporting and cancellation between files.
4. Cross-file type facts (a generic declared in another file).
5. FileTransaction write/abort semantics.
"""

import pytest

from swagger_switcheroo.config import RuntimeConfig
from swagger_switcheroo.host import BatchConverter, FileTransaction, discover

CONVERTIBLE = 'import io.swagger.annotations.ApiOperation;\n\nclass R {\n    @ApiOperation("List")\n    void list() {}\n}\n'
CONVERTED = 'import io.swagger.v3.oas.annotations.Operation;\n\nclass R {\n    @Operation(summary = "List")\n    void list() {}\n}\n'
PLAIN = "class Plain {}\n"
BROKEN = "class Broken { void m( }\n"
UNMAPPED = 'import io.swagger.annotations.ApiOperation;\n\nclass Bad {\n    @ApiOperation(foo = "x")\n    void m() {}\n}\n'


@pytest.fixture
def project(tmp_path):
  files = {
    "R.java": CONVERTIBLE,
    "Plain.java": PLAIN,
    "Broken.java": BROKEN,
    "nested/Bad.java": UNMAPPED,
    "notes.txt": "not java",
  }
  for name, text in files.items():
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
  return tmp_path


def test_discover(project):
  found = discover([project, project / "R.java", project / "notes.txt"])

  assert found == sorted([project / "Broken.java", project / "Plain.java", project / "R.java", project / "nested" / "Bad.java"])


def test_batch_outcomes(project, semantics):
  report = BatchConverter(RuntimeConfig(), semantics).run([project])

  assert report.converted == [str(project / "R.java")]
  assert report.unchanged == [str(project / "Plain.java")]
  assert set(report.failed) == {str(project / "Broken.java"), str(project / "nested" / "Bad.java")}
  assert report.total == 4
  assert not report.success

  assert (project / "R.java").read_text(encoding="utf-8") == CONVERTED
  assert (project / "nested" / "Bad.java").read_text(encoding="utf-8") == UNMAPPED
  assert (project / "Broken.java").read_text(encoding="utf-8") == BROKEN


def test_dry_run_writes_nothing(project, semantics):
  report = BatchConverter(RuntimeConfig(dry_run=True), semantics).run([project / "R.java"])

  assert report.converted == [str(project / "R.java")]
  assert (project / "R.java").read_text(encoding="utf-8") == CONVERTIBLE


def test_progress_and_cancellation(project, semantics):
  """
  Scenario: the run is cancelled once two files are done.
  Expectation: progress was reported for exactly those two; the rest is untouched.
  """
  calls = []
  converter = BatchConverter(
    RuntimeConfig(),
    semantics,
    is_cancelled=lambda: len(calls) >= 2,
    progress=lambda i, total, path: calls.append((i, total, path.name)),
  )

  report = converter.run([project])

  assert calls == [(1, 4, "Broken.java"), (2, 4, "Plain.java")]
  assert report.cancelled
  assert (project / "R.java").read_text(encoding="utf-8") == CONVERTIBLE


def test_types_from_other_files(tmp_path, semantics):
  (tmp_path / "Page.java").write_text("package com.acme;\n\npublic class Page<T> {\n}\n", encoding="utf-8")
  resource = tmp_path / "UserResource.java"
  resource.write_text(
    "package com.acme;\n\n"
    "import io.swagger.annotations.ApiResponse;\n"
    "import io.swagger.annotations.ApiResponses;\n\n"
    "public class UserResource {\n"
    "    @ApiResponses(@ApiResponse(code = 200, message = \"OK\"))\n"
    "    public Page<User> list() { return null; }\n"
    "}\n",
    encoding="utf-8",
  )

  report = BatchConverter(RuntimeConfig(), semantics).run([tmp_path])

  assert report.converted == [str(resource)]
  assert "static class UserPage extends Page<User> {\n    }" in resource.read_text(encoding="utf-8")


def test_review_notes_are_reported(tmp_path, semantics):
  path = tmp_path / "R.java"
  path.write_text(
    "import io.swagger.annotations.ApiResponse;\n"
    "import io.swagger.annotations.ApiResponses;\n\n"
    "class R {\n"
    "    @ApiResponses(@ApiResponse(code = 200, response = User.class, responseContainer = \"Map\"))\n"
    "    Response all() { return null; }\n"
    "}\n",
    encoding="utf-8",
  )

  report = BatchConverter(RuntimeConfig(), semantics).run([path])

  assert report.success
  assert list(report.review) == [str(path)]
  assert "R.all" in report.review[str(path)][0]


def test_no_files(tmp_path, semantics, recorded_console):
  report = BatchConverter(RuntimeConfig(), semantics).run([tmp_path])

  assert report.total == 0
  assert "No .java files found" in recorded_console.export_text()


def test_transaction_commits_on_clean_exit(tmp_path):
  path = tmp_path / "A.java"
  path.write_bytes(b"class A {}\r\n")

  with FileTransaction(path) as transaction:
    assert transaction.read() == "class A {}\r\n"
    transaction.commit("class B {}\r\n")

  assert transaction.written
  assert path.read_bytes() == b"class B {}\r\n"
  assert [p.name for p in tmp_path.iterdir()] == ["A.java"]


def test_transaction_aborts_on_error(tmp_path):
  path = tmp_path / "A.java"
  path.write_text("class A {}\n", encoding="utf-8")

  with pytest.raises(RuntimeError):
    with FileTransaction(path) as transaction:
      transaction.commit("class B {}\n")
      raise RuntimeError("boom")

  assert not transaction.written
  assert path.read_text(encoding="utf-8") == "class A {}\n"


def test_transaction_rollback_and_dry_run(tmp_path):
  path = tmp_path / "A.java"
  path.write_text("class A {}\n", encoding="utf-8")

  with FileTransaction(path) as transaction:
    transaction.commit("class B {}\n")
    transaction.rollback()
  with FileTransaction(path, dry_run=True) as dry:
    dry.commit("class C {}\n")

  assert not transaction.written and not dry.written
  assert path.read_text(encoding="utf-8") == "class A {}\n"
