"""RepoLens CLI - multi-perspective documentation for GitHub repositories.

Usage:
    repolens generate <owner/repo-or-url> [options]
    repolens generate facebook/react --industry "Media" -O site/
    repolens generate snapshot.json --snapshot --zip
    repolens serve site/
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .github import FetchError, GitHubClient
from .layout import PAGES
from .output import write_analysis, write_archive, write_pages
from .pipeline import run
from .serve import DEFAULT_PORT, start_server
from .snapshot import RawSnapshot, UserContext

console = Console()

DEFAULT_OUTPUT_DIR = "repolens-output"


def _load_snapshot(target: str, from_file: bool, token: str | None, quiet: bool) -> RawSnapshot:
    """Load a saved snapshot file or fetch one from GitHub."""
    if from_file:
        path = Path(target)
        if not path.is_file():
            raise click.ClickException(f"Snapshot file not found: {target}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise click.ClickException(f"Snapshot is not valid JSON: {e}")
        return RawSnapshot.from_dict(data)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=Console(quiet=True) if quiet else console,
    ) as progress:
        task = progress.add_task("Connecting to GitHub...", total=3)

        def on_progress(status, current, total):
            progress.update(task, description=status, completed=current, total=total)

        try:
            with GitHubClient(token=token) as client:
                return client.fetch_snapshot(target, progress_callback=on_progress)
        except FetchError as e:
            raise click.ClickException(str(e))


def _context_options(func):
    """Shared user-context options."""
    options = [
        click.option("--industry", default="", help="Industry label, e.g. 'Healthcare'"),
        click.option("--use-cases", default="", help="Use cases, separated by commas, semicolons or newlines"),
        click.option("--metrics", default="", help="A metric statement, e.g. 'cut onboarding time by 40%'"),
        click.option("--personas", default="", help="Target personas, separated by commas or semicolons"),
        click.option("--snapshot", "from_file", is_flag=True, help="Treat TARGET as a saved snapshot JSON file"),
        click.option("--token", envvar="GITHUB_TOKEN", default=None, help="GitHub token (or GITHUB_TOKEN)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__)
def cli():
    """RepoLens - turn a GitHub repository into five audience-specific documents.

    Heuristic only: no API keys for language models, no accuracy checks.
    """
    pass


@cli.command()
@click.argument("target")
@_context_options
@click.option("--output", "-O", default=None, help="Output directory for generated documents")
@click.option("--zip", "make_zip", is_flag=True, help="Also bundle the documents into a zip archive")
@click.option("--save-snapshot", default=None, type=click.Path(dir_okay=False), help="Write the fetched snapshot to this JSON file")
@click.option("--json-only", is_flag=True, help="Output the analysis as JSON to stdout (for piping)")
def generate(
    target: str,
    industry: str,
    use_cases: str,
    metrics: str,
    personas: str,
    from_file: bool,
    token: str | None,
    output: str | None,
    make_zip: bool,
    save_snapshot: str | None,
    json_only: bool,
):
    """Analyze a repository and write the five documents.

    TARGET is a GitHub URL or owner/repo shorthand, or a snapshot JSON file
    when --snapshot is given.

    Examples:

        repolens generate pallets/flask

        repolens generate https://github.com/facebook/react --industry Media

        repolens generate flask.json --snapshot --zip
    """
    if not json_only:
        console.print()
        console.print(Panel.fit(
            f"[bold cyan]RepoLens v{__version__}[/] - Multi-Perspective Repository Docs",
            border_style="cyan",
        ))

    snapshot = _load_snapshot(target, from_file, token, json_only)
    if save_snapshot:
        Path(save_snapshot).write_text(json.dumps(snapshot.to_dict(), indent=2), encoding="utf-8")

    context = UserContext(industry=industry, use_cases=use_cases, metrics=metrics, personas=personas)
    result = run(snapshot, context)

    if json_only:
        click.echo(json.dumps(result.analysis.to_dict(), indent=2))
        return

    _print_analysis_summary(result.analysis)

    out_dir = Path(output) if output else Path(DEFAULT_OUTPUT_DIR) / f"{snapshot.owner}-{snapshot.repo}"
    written = write_pages(result.pages, out_dir)
    write_analysis(result.analysis, out_dir)
    _print_documents(written)

    if make_zip:
        archive = write_archive(result.pages, out_dir.parent / f"{out_dir.name}.zip")
        console.print(f"[green]Archive written to {archive}[/]")

    console.print(f"\n[green]Output written to {out_dir}/[/]")
    console.print(f"Preview with: [bold]repolens serve {out_dir}[/]")


@cli.command()
@click.argument("target")
@_context_options
@click.option("--json", "as_json", is_flag=True, help="Print the full analysis as JSON")
def analyze(
    target: str,
    industry: str,
    use_cases: str,
    metrics: str,
    personas: str,
    from_file: bool,
    token: str | None,
    as_json: bool,
):
    """Print the heuristic analysis without writing documents."""
    snapshot = _load_snapshot(target, from_file, token, as_json)
    context = UserContext(industry=industry, use_cases=use_cases, metrics=metrics, personas=personas)
    analysis = run(snapshot, context).analysis

    if as_json:
        click.echo(json.dumps(analysis.to_dict(), indent=2))
    else:
        _print_analysis_summary(analysis)


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--port", "-p", default=DEFAULT_PORT, show_default=True, help="Port to serve on")
@click.option("--open", "open_browser", is_flag=True, help="Open the hub in a browser")
def serve(directory: str, port: int, open_browser: bool):
    """Preview generated documents on a local server."""
    console.print(f"Serving [bold]{directory}[/] at http://localhost:{port} (Ctrl+C to stop)")
    try:
        start_server(Path(directory), port=port, open_browser=open_browser)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))


@cli.command()
def version():
    """Show version information."""
    console.print(f"repolens v{__version__}")
    console.print("Heuristic multi-perspective documentation generator")


def _print_analysis_summary(analysis) -> None:
    """Print a compact summary of the analysis."""
    table = Table(title="Repository Analysis", show_header=False, border_style="dim")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in analysis.summary_rows():
        table.add_row(key, escape(value))
    console.print(table)


def _print_documents(paths) -> None:
    labels = dict(PAGES)
    console.print()
    console.print("[bold]Documents:[/]")
    for path in paths:
        console.print(f"  [cyan]{path.name}[/] ({labels.get(path.stem, path.stem)})")


if __name__ == "__main__":
    cli()
