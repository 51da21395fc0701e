"""Terminal output formatting: box layout and colors."""

import json
import shutil
import textwrap
from typing import List

import click

from .models import LintReport, LintResult, RuleInfo, Severity

MIN_WIDTH = 60
MAX_WIDTH = 100

_SEVERITY_STYLE = {
    Severity.ERROR: ("●", "red"),
    Severity.WARNING: ("○", "yellow"),
    Severity.INFO: ("·", "blue"),
}


def _get_width() -> int:
    """Terminal width clamped to a readable range."""
    try:
        columns = shutil.get_terminal_size((MAX_WIDTH, 24)).columns
    except OSError:
        return MAX_WIDTH
    return max(MIN_WIDTH, min(MAX_WIDTH, columns))


def _wrap(text: str, indent: int = 0, width: int = MAX_WIDTH) -> List[str]:
    """Wrap at word boundaries; continuation lines hang two columns deeper."""
    return textwrap.wrap(
        text,
        width=width,
        initial_indent=" " * indent,
        subsequent_indent=" " * (indent + 2),
        break_on_hyphens=False,
    ) or [" " * indent]


def _location(r: LintResult) -> str:
    return f"{r.path}:{r.line}" if r.line is not None else r.path


def _result_lines(r: LintResult, width: int, verbose: bool) -> List[str]:
    bullet, color = _SEVERITY_STYLE[r.severity]
    head = f"{bullet} {r.message}"
    if verbose:
        head = f"{head} [{r.rule_id}/{r.check_id}]"
    lines = [click.style(ln, fg=color) for ln in _wrap(head, indent=2, width=width)]
    lines.append(click.style(f"    {_location(r)}", dim=True))
    if r.suggestion:
        for ln in _wrap(f"→ {r.suggestion}", indent=4, width=width):
            lines.append(click.style(ln, dim=True))
    if r.fixable_by:
        lines.append(click.style("    fixable with --fix", fg="green", dim=True))
    return lines


def _summary(report: LintReport) -> str:
    parts = [
        f"{report.error_count} error(s)",
        f"{report.warning_count} warning(s)",
        f"{report.info_count} info",
    ]
    if report.fixed_count:
        parts.append(f"{report.fixed_count} fix(es) applied")
    return ", ".join(parts)


def format_human(report: LintReport, root: str, verbose: bool = False) -> str:
    """Build the human terminal output for a report as a single string."""
    width = _get_width()
    lines = []

    lines.append("┌" + "─" * (width - 2) + "┐")
    lines.append(f" lineup · {root}")
    lines.append("─" * width)

    if report.results:
        ordered = sorted(report.results, key=lambda r: r.severity.rank)
        current = None
        for r in ordered:
            if r.severity != current:
                current = r.severity
                lines.append(f" {current.value.upper()}S" if current != Severity.INFO else " INFO")
            lines.extend(_result_lines(r, width, verbose))
    else:
        lines.append(click.style(" No issues found!", fg="green"))

    lines.append("─" * width)
    color = "red" if report.has_errors else ("yellow" if report.warning_count else "green")
    lines.append(click.style(f" {_summary(report)}", fg=color))
    lines.append("└" + "─" * (width - 2) + "┘")
    return "\n".join(lines)


def format_rules(rules: List[RuleInfo]) -> str:
    """Human listing of rules with their checks and fixes."""
    lines = []
    for i, info in enumerate(rules):
        if i:
            lines.append("")
        fix_note = "fixable" if info.can_fix else "check only"
        lines.append(click.style(f"{info.id}", bold=True) + f"  ({info.default_severity.value}, {fix_note})")
        lines.append(f"  {info.name}: {info.description}")
        if info.checks:
            lines.append("  Checks:")
            for c in info.checks:
                lines.append(f"    - {c.id}: {c.description}")
        if info.fixes:
            lines.append("  Fixes:")
            for f in info.fixes:
                addresses = f" (addresses: {', '.join(f.addresses)})" if f.addresses else ""
                lines.append(f"    - {f.id}: {f.description}{addresses}")
    return "\n".join(lines)


def format_json(data) -> str:
    return json.dumps(data, indent=2)
