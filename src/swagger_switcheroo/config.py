"""
Runtime Configuration Store.

Settings are read from the `[tool.swagger_switcheroo]` table of the nearest
`pyproject.toml` and can be overridden from the command line.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from swagger_switcheroo.utils.console import log_warning

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_PRODUCES = ["javax.ws.rs.Produces", "jakarta.ws.rs.Produces"]


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the conversion engine.
  """

  produces_annotations: List[str] = Field(
    default_factory=lambda: list(DEFAULT_PRODUCES),
    description="Qualified names of annotations whose first value becomes the response media type.",
  )
  max_line_length: int = Field(140, description="Inserted annotations longer than this are wrapped.")
  indent: str = Field("    ", description="One indentation level for generated code.")
  prune_imports: bool = Field(True, description="Remove imports made unused by the conversion.")
  encoding: str = Field("utf-8", description="Encoding of the Java sources.")
  dry_run: bool = Field(False, description="Convert without writing files.")

  @field_validator("max_line_length")
  @classmethod
  def validate_line_length(cls, v: int) -> int:
    """
    Rejects line lengths too short to hold any annotation.

    Args:
        v (int): Requested maximum.

    Returns:
        int: The validated value.

    Raises:
        ValueError: If the value is below 20.
    """
    if v < 20:
      raise ValueError(f"max_line_length must be at least 20, got {v}")
    return v

  @field_validator("produces_annotations", mode="before")
  @classmethod
  def split_produces(cls, v: Any) -> Any:
    """Accepts a comma separated string, as passed with `--config`."""
    if isinstance(v, str):
      return [item.strip() for item in v.split(",") if item.strip()]
    return v

  @classmethod
  def load(
    cls,
    overrides: Optional[Dict[str, Any]] = None,
    dry_run: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        overrides (Optional[Dict]): `key=value` settings from the CLI.
        dry_run (Optional[bool]): Override for dry-run mode.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    # 1. File settings, then CLI key/values
    merged = {**toml_config, **(overrides or {})}

    # 2. Explicit flags win
    if dry_run is not None:
      merged["dry_run"] = dry_run

    unknown = sorted(set(merged) - set(cls.model_fields))
    for key in unknown:
      log_warning(f"Ignoring unknown setting '{key}'")
      merged.pop(key)

    return cls(**merged)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        log_warning(f"Could not read {toml_path}: {e}")
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("swagger_switcheroo", {}), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Types are inferred (int, bool, or string).

  Args:
      items (Optional[List[str]]): List of raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.
  """
  if not items:
    return {}

  config = {}
  for item in items:
    if "=" not in item:
      log_warning(f"Ignoring invalid config format: '{item}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str

    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False
    else:
      try:
        final_val = int(val_str)
      except ValueError:
        pass

    config[key] = final_val

  return config
