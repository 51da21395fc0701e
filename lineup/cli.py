"""CLI entry point: lint a tree, optionally fix it, print the report."""

import sys
from pathlib import Path

import typer

from .config import find_config, load_config
from .engine import Runner
from .errors import LineupError
from .format import format_human, format_json, format_rules
from .log import configure_logging

_SUBCOMMANDS = {"lint", "rules"}
# Options that belong to the top-level app rather than to lint
_APP_OPTIONS = {"--help", "--install-completion", "--show-completion"}


def _with_default_command(argv: list[str]) -> list[str]:
    """Route to lint when no subcommand is given, so `lineup .` and `lineup --fix` work."""
    if argv and (argv[0] in _SUBCOMMANDS or argv[0] in _APP_OPTIONS):
        return list(argv)
    return ["lint", *argv]


app = typer.Typer(help="Enforce repository conventions: hooks, husky, cspell, eslint and pnpm.")


def _err(msg: str) -> None:
    """Print a styled error and exit 1; used for all CLI errors."""
    typer.secho(f"Error: {msg}", err=True, fg="red")
    raise typer.Exit(1)


@app.command("lint")
def lint_cmd(
    path: Path = typer.Argument(Path("."), help="Directory to lint (default: .)"),
    fix: bool = typer.Option(False, "--fix", help="Apply automatic fixes"),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file (default: lineup.yaml in PATH)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and rule/check IDs"),
) -> None:
    """Run every enabled rule against PATH (the default command)."""
    configure_logging("DEBUG" if verbose else "WARNING")

    try:
        config = load_config(config_path or find_config(path))
        runner = Runner(config)
        report = runner.run_with_fix(path) if fix else runner.run(path)
    except (LineupError, OSError, UnicodeDecodeError) as e:
        _err(str(e))

    if json_out:
        typer.echo(format_json(report.to_dict()))
    else:
        typer.echo(format_human(report, str(path), verbose=verbose))

    if report.has_errors:
        raise typer.Exit(1)


@app.command("rules")
def rules_cmd(
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List available rules with their checks and fixes."""
    rules = Runner().list_rules()
    if json_out:
        typer.echo(format_json([info.to_dict() for info in rules]))
    else:
        typer.echo(format_rules(rules))


def _main() -> None:
    sys.argv[1:] = _with_default_command(sys.argv[1:])
    app()


if __name__ == "__main__":
    _main()
