"""
Tests for the console and logging helpers.
"""

from rich.console import Console

from swagger_switcheroo.utils.console import (
  console,
  get_console,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
)


def test_log_helpers_reach_the_console(recorded_console):
  log_info("indexing")
  log_success("done")
  log_warning("careful")
  log_error("broken")

  output = recorded_console.export_text()
  for message in ("indexing", "done", "careful", "broken"):
    assert message in output
  assert "SUCCESS" in output


def test_proxy_forwards_to_backend(recorded_console):
  console.print("[bold]hello[/bold]")

  assert get_console() is recorded_console
  assert recorded_console.export_text().strip() == "hello"
  assert console.width == recorded_console.width


def test_reset_restores_a_fresh_console(recorded_console):
  reset_console()
  assert get_console() is not recorded_console
  assert isinstance(get_console(), Console)
  set_console(recorded_console)
