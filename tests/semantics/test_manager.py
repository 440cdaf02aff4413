"""
Tests for the SemanticsManager and its mapping table schema.
"""

import json

import pytest
from pydantic import ValidationError

from swagger_switcheroo.enums import AttributeShape
from swagger_switcheroo.semantics.manager import SemanticsError, SemanticsManager
from swagger_switcheroo.semantics.paths import DEFAULT_TABLE, resolve_semantics_dir
from swagger_switcheroo.semantics.schema import AttributeRule


def test_bundled_table_loads(semantics):
  """Every old annotation kind the rewriters handle has a mapping."""
  for kind in ("Api", "ApiOperation", "ApiModelProperty", "ApiParam", "ApiResponses", "ApiResponse"):
    assert semantics.get(kind).source == f"io.swagger.annotations.{kind}"

  assert semantics.get("ApiOperation").target == "io.swagger.v3.oas.annotations.Operation"
  assert semantics.get("ApiResponse").attributes["code"].shape == AttributeShape.REQUOTE


def test_bundled_table_is_next_to_module():
  assert (resolve_semantics_dir() / DEFAULT_TABLE).is_file()


def test_known_names(semantics):
  assert semantics.is_known("io.swagger.annotations.ApiOperation")
  assert semantics.is_known("io.swagger.annotations.Authorization")
  assert semantics.is_known("io.swagger.v3.oas.annotations.tags.Tag")
  assert semantics.is_known("javax.ws.rs.Produces")
  assert not semantics.is_known("com.acme.User")


def test_package_members(semantics):
  assert "ApiParam" in semantics.package_members("io.swagger.annotations")
  assert semantics.package_members("com.acme") == set()


def test_unknown_kind_raises_key_error(semantics):
  with pytest.raises(KeyError):
    semantics.get("ApiIgnore")


def test_missing_table(tmp_path):
  with pytest.raises(SemanticsError):
    SemanticsManager(table_path=tmp_path / "missing.json")


def test_invalid_table(tmp_path):
  """A copy rule without a target fails validation."""
  path = tmp_path / "table.json"
  path.write_text(
    json.dumps({"annotations": {"ApiOperation": {"source": "io.swagger.annotations.ApiOperation", "attributes": {"value": {}}}}}),
    encoding="utf-8",
  )

  with pytest.raises(SemanticsError) as excinfo:
    SemanticsManager(table_path=path)

  assert "Invalid mapping table" in str(excinfo.value)


def test_consume_rule_needs_no_target():
  assert AttributeRule(shape="consume").target is None
  with pytest.raises(ValidationError):
    AttributeRule(shape="requote")
