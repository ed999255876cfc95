"""CLI entry point for chartdoc."""

from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chartdoc.model.snippet import Severity
from chartdoc.model.validation import ValidationError

app = typer.Typer(
    name="chartdoc",
    help="chartdoc - check the Helm, ArgoCD and GitHub Actions snippets of Markdown tutorials",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main_callback(
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Hide external commands being executed"),
    ] = False,
) -> None:
    """chartdoc documentation checker."""
    from chartdoc.utils.cmd import set_show_commands

    set_show_commands(not quiet)


# Subcommand groups
config_app = typer.Typer(name="config", help="Manage .chartdoc/config.json")

app.add_typer(config_app)

console = Console()


def _handle_error(error: ValidationError) -> None:
    """Handle validation errors with rich formatting."""
    console.print(f"[red]Error ({error.code}):[/red] {escape(error.message)}")
    raise typer.Exit(1)


def _load_config():
    from chartdoc.model.validation import load_config

    try:
        return load_config()
    except ValidationError as e:
        _handle_error(e)


@app.command()
def lint(
    files: Annotated[
        list[Path],
        typer.Argument(help="Markdown files to check", metavar="FILE..."),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table or json"),
    ] = "table",
    fail_on: Annotated[
        Optional[Severity],
        typer.Option("--fail-on", help="Lowest severity that makes the run fail"),
    ] = None,
    no_duplicates: Annotated[
        bool,
        typer.Option("--no-duplicates", help="Do not report repeated sections"),
    ] = False,
    ignore: Annotated[
        Optional[list[str]],
        typer.Option("--ignore", "-i", help="Finding code to ignore (repeatable)"),
    ] = None,
) -> None:
    """Check every code snippet of Markdown tutorials.

    [bold]Example:[/bold]
        chartdoc lint README.md --fail-on warning
    """
    from chartdoc.lint import lint_file
    from chartdoc.report import print_report, reports_to_json

    if output_format not in ("table", "json"):
        console.print(f"[red]Error:[/red] Unknown format '{output_format}' (use table or json)")
        raise typer.Exit(2)

    config = _load_config()
    updates: dict = {}
    if fail_on is not None:
        updates["fail_on"] = fail_on
    if no_duplicates:
        updates["check_duplicates"] = False
    if ignore:
        updates["ignore"] = config.ignore + [code.upper() for code in ignore]
    config = config.model_copy(update=updates)

    reports = []
    try:
        for path in files:
            reports.append(lint_file(path, config))
    except ValidationError as e:
        _handle_error(e)

    if output_format == "json":
        typer.echo(reports_to_json(reports, config.fail_on))
    else:
        for report in reports:
            print_report(report, console, config.fail_on)

    if not all(report.ok(config.fail_on) for report in reports):
        raise typer.Exit(1)


@app.command()
def snippets(
    file: Annotated[Path, typer.Argument(help="Markdown file", metavar="FILE")],
) -> None:
    """List the code snippets of a Markdown file and their detected kind."""
    from chartdoc.lint import classify_snippets, read_markdown
    from chartdoc.model.snippet import LintReport
    from chartdoc.report import print_snippets

    try:
        found, _ = classify_snippets(read_markdown(file))
    except ValidationError as e:
        _handle_error(e)

    if not found:
        console.print(f"[yellow]No code snippets in {file}.[/yellow]")
        raise typer.Exit(0)
    print_snippets(LintReport(source=str(file), snippets=found), console)


@app.command()
def extract(
    file: Annotated[Path, typer.Argument(help="Markdown file", metavar="FILE")],
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Directory receiving one file per snippet"),
    ] = Path("snippets"),
) -> None:
    """Write every checkable snippet to its own file."""
    from chartdoc.lint import extract_to_dir

    try:
        written = extract_to_dir(file, output)
    except ValidationError as e:
        _handle_error(e)

    for path in written:
        console.print(f"  - {path}")
    console.print(f"[green]Extracted {len(written)} snippet(s) to {output}[/green]")


@app.command()
def duplicates(
    file: Annotated[Path, typer.Argument(help="Markdown file", metavar="FILE")],
    min_chars: Annotated[
        Optional[int],
        typer.Option("--min-chars", help="Ignore sections shorter than this once normalised"),
    ] = None,
) -> None:
    """Show sections that are repeated in a Markdown file."""
    from chartdoc.duplicates import find_duplicate_sections
    from chartdoc.lint import read_markdown
    from chartdoc.report import print_duplicates

    config = _load_config()
    try:
        text = read_markdown(file)
    except ValidationError as e:
        _handle_error(e)

    groups = find_duplicate_sections(text, min_chars or config.duplicate_min_chars)
    print_duplicates(groups, str(file), console)


@app.command()
def chart(
    chart_dir: Annotated[Path, typer.Argument(help="Chart directory", metavar="CHART_DIR")],
    helm: Annotated[
        bool,
        typer.Option("--helm", help="Also run 'helm lint' when helm is installed"),
    ] = False,
) -> None:
    """Check a Helm chart directory.

    [bold]Example:[/bold]
        chartdoc chart charts/my-app --helm
    """
    from chartdoc.chart import check_chart
    from chartdoc.report import print_report

    config = _load_config()
    try:
        report = check_chart(chart_dir, run_helm=helm, config=config)
    except ValidationError as e:
        _handle_error(e)

    print_report(report, console, config.fail_on)
    if not report.ok(config.fail_on):
        raise typer.Exit(1)


@app.command()
def scaffold(
    name: Annotated[str, typer.Argument(help="Application and chart name", metavar="NAME")],
    repo_url: Annotated[str, typer.Option("--repo-url", help="Git repository ArgoCD syncs from")],
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Output directory"),
    ] = Path("."),
    image: Annotated[str, typer.Option("--image", help="Container image repository")] = "nginx",
    tag: Annotated[str, typer.Option("--tag", help="Image tag (defaults to the chart appVersion)")] = "",
    replicas: Annotated[int, typer.Option("--replicas", help="Replica count")] = 2,
    port: Annotated[int, typer.Option("--port", help="Service port")] = 80,
    namespace: Annotated[str, typer.Option("--namespace", "-n", help="Destination namespace")] = "default",
    branch: Annotated[str, typer.Option("--branch", help="Branch tracked by ArgoCD and CI")] = "main",
    auto_sync: Annotated[
        bool,
        typer.Option("--auto-sync/--no-auto-sync", help="Enable ArgoCD automated sync"),
    ] = True,
) -> None:
    """Generate a chart, an ArgoCD Application and a GitHub Actions workflow."""
    import pydantic

    from chartdoc.scaffold import ScaffoldConfig
    from chartdoc.scaffold import scaffold as write_scaffold

    try:
        config = ScaffoldConfig(
            name=name,
            repo_url=repo_url,
            image_repository=image,
            image_tag=tag,
            replicas=replicas,
            service_port=port,
            target_port=port,
            namespace=namespace,
            branch=branch,
            target_revision=branch,
            automated_sync=auto_sync,
        )
    except pydantic.ValidationError as e:
        _handle_error(ValidationError("SCAFFOLD_INVALID", str(e)))

    files = write_scaffold(config, output)

    table = Table(title=f"Scaffold: {name}")
    table.add_column("Artifact", style="cyan")
    table.add_column("Path", style="green")
    for artifact, path in files.items():
        table.add_row(artifact, str(path))
    console.print(table)


@config_app.command("init")
def config_init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing configuration"),
    ] = False,
) -> None:
    """Write a default configuration to .chartdoc/config.json."""
    from chartdoc.model.config import LintConfig
    from chartdoc.model.validation import config_path, save_config

    path = config_path()
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    save_config(LintConfig())
    console.print(f"[green]Wrote {path}[/green]")


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration."""
    config = _load_config()
    console.print(escape(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False).rstrip()))


@app.command()
def version() -> None:
    """Show version information."""
    from chartdoc import __version__

    console.print(f"chartdoc version {__version__}")
