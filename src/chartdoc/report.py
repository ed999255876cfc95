"""Rendering of lint reports."""

import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chartdoc.duplicates import DuplicateGroup
from chartdoc.model.snippet import LintReport, Severity

SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def _location(line: int | None, file: str | None) -> str:
    where = file or ""
    if line is not None:
        where = f"{where}:{line}" if where else str(line)
    return where or "-"


def print_report(report: LintReport, console: Console, fail_on: Severity = Severity.ERROR) -> None:
    """Print a report as a table followed by a one-line summary."""
    if report.findings:
        table = Table(title=report.source)
        table.add_column("Line", style="cyan", justify="right")
        table.add_column("Severity")
        table.add_column("Code", style="bold")
        table.add_column("Message", style="white")

        for item in report.sorted_findings():
            style = SEVERITY_STYLES[item.severity]
            table.add_row(
                _location(item.line, item.file),
                f"[{style}]{item.severity.value}[/{style}]",
                item.code,
                escape(item.message),
            )
        console.print(table)

    errors = len(report.errors())
    warnings = len(report.warnings())
    summary = f"{report.source}: {len(report.snippets)} snippet(s), {errors} error(s), {warnings} warning(s)"
    if report.ok(fail_on):
        console.print(f"[green]✓[/green] {summary}")
    else:
        console.print(f"[red]✗[/red] {summary}")


def reports_to_json(reports: list[LintReport], fail_on: Severity = Severity.ERROR) -> str:
    """Serialise reports for machine consumption."""
    payload = []
    for report in reports:
        data = report.model_dump(mode="json", exclude={"snippets"})
        data["ok"] = report.ok(fail_on)
        data["snippet_kinds"] = report.counts_by_kind()
        payload.append(data)
    return json.dumps(payload, indent=2)


def print_snippets(report: LintReport, console: Console) -> None:
    """Print the snippets of a document and how each one is checked."""
    table = Table(title=f"Snippets: {report.source}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Line", style="cyan", justify="right")
    table.add_column("Language", style="white")
    table.add_column("Kind", style="green")
    table.add_column("Section", style="dim")

    for snippet in report.snippets:
        table.add_row(
            str(snippet.index),
            str(snippet.start_line),
            snippet.language or "(none)",
            snippet.kind.value,
            snippet.heading or "",
        )
    console.print(table)


def print_duplicates(groups: list[DuplicateGroup], source: str, console: Console) -> None:
    """Print groups of repeated sections."""
    if not groups:
        console.print(f"[green]No repeated sections in {source}.[/green]")
        return

    table = Table(title=f"Repeated sections: {source}")
    table.add_column("Group", style="dim", justify="right")
    table.add_column("Line", style="cyan", justify="right")
    table.add_column("Heading", style="white")

    for number, group in enumerate(groups, start=1):
        for occurrence in group.occurrences:
            table.add_row(str(number), str(occurrence.line), occurrence.heading or "(untitled)")
    console.print(table)
    repeats = sum(len(group.occurrences) - 1 for group in groups)
    console.print(f"[yellow]{repeats} repeated section(s) in {len(groups)} group(s).[/yellow]")
