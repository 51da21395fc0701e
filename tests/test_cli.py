"""CLI tests: lint/rules commands, JSON output, exit codes."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from lineup.cli import _with_default_command, app
from lineup.rules import builtin_registry

cli = CliRunner()


@pytest.fixture(autouse=True)
def no_log_setup():
    """Keep the CLI from re-pointing loguru at CliRunner's captured stderr."""
    with patch("lineup.cli.configure_logging") as configure:
        yield configure


def test_lint_clean_directory(tmp_path):
    result = cli.invoke(app, ["lint", str(tmp_path)])
    assert result.exit_code == 0
    assert "No issues found!" in result.stdout


def test_lint_errors_exit_1(tmp_path):
    (tmp_path / ".git").mkdir()
    result = cli.invoke(app, ["lint", str(tmp_path)])
    assert result.exit_code == 1
    assert "Missing .claude directory in git repository" in result.stdout
    assert "1 error(s)" in result.stdout


def test_lint_warnings_only_exit_0(tmp_path):
    (tmp_path / "package.json").write_text('{"name": "app"}')
    result = cli.invoke(app, ["lint", str(tmp_path)])
    assert result.exit_code == 0
    assert "warning(s)" in result.stdout


def test_lint_json(tmp_path):
    (tmp_path / ".git").mkdir()
    result = cli.invoke(app, ["lint", str(tmp_path), "--json"])
    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["error_count"] == 1
    assert data["fixed_count"] == 0
    assert data["results"][0]["rule_id"] == "claude-settings-hooks"
    assert data["results"][0]["fixable_by"] == ["create-settings"]


def test_lint_missing_path(tmp_path):
    result = cli.invoke(app, ["lint", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "Error: Path does not exist" in result.output


def test_lint_fix(tmp_path):
    (tmp_path / ".git").mkdir()
    result = cli.invoke(app, ["lint", str(tmp_path), "--fix", "--json"])
    data = json.loads(result.stdout)
    assert data["fixed_count"] == 1
    assert (tmp_path / ".claude" / "settings.json").exists()

    again = cli.invoke(app, ["lint", str(tmp_path)])
    assert again.exit_code == 0


def test_lint_discovers_config(tmp_path):
    (tmp_path / ".git").mkdir()
    (tmp_path / "lineup.yaml").write_text("rules:\n  claude-settings-hooks:\n    enabled: false\n")
    result = cli.invoke(app, ["lint", str(tmp_path)])
    assert result.exit_code == 0


def test_lint_explicit_config(tmp_path):
    (tmp_path / ".git").mkdir()
    config = tmp_path / "custom.json"
    config.write_text('{"rules": {"claude-settings-hooks": {"severity": "warning"}}}')
    result = cli.invoke(app, ["lint", str(tmp_path), "-c", str(config), "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["warning_count"] == 1


def test_lint_bad_config(tmp_path):
    config = tmp_path / "lineup.yaml"
    config.write_text("rules:\n  husky-init:\n    severity: loud\n")
    result = cli.invoke(app, ["lint", str(tmp_path)])
    assert result.exit_code == 1
    assert "Invalid config" in result.output


def test_verbose_sets_debug_logging(tmp_path, no_log_setup):
    cli.invoke(app, ["lint", str(tmp_path), "-v"])
    no_log_setup.assert_called_once_with("DEBUG")


def test_rules_human():
    result = cli.invoke(app, ["rules"])
    assert result.exit_code == 0
    for rule_id in builtin_registry().ids():
        assert rule_id in result.stdout
    assert "init-husky" in result.stdout


def test_rules_json():
    result = cli.invoke(app, ["rules", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [r["id"] for r in data] == builtin_registry().ids()
    assert data[0]["default_severity"] == "error"
    assert data[0]["can_fix"] is True
    assert data[0]["checks"][0] == {"id": "claude-dir-exists", "description": "Verify .claude directory exists in git repositories"}


def test_default_command_routing():
    assert _with_default_command([]) == ["lint"]
    assert _with_default_command(["."]) == ["lint", "."]
    assert _with_default_command(["--fix", "."]) == ["lint", "--fix", "."]
    assert _with_default_command(["rules", "--json"]) == ["rules", "--json"]
    assert _with_default_command(["lint", "."]) == ["lint", "."]
    assert _with_default_command(["--help"]) == ["--help"]


def test_bare_path_lints(tmp_path):
    (tmp_path / ".git").mkdir()
    result = cli.invoke(app, _with_default_command([str(tmp_path), "--json"]))
    assert result.exit_code == 1
    assert json.loads(result.stdout)["error_count"] == 1
