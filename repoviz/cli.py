"""Typer-based CLI for repoviz dependency analysis and drift detection."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .analyzer import ProjectAnalyzer, detect_drift
from . import config_manager
from .config_manager import LOG_LEVELS, load_analysis_config, save_analysis_setting
from .errors import ParseError, RepoVizError
from .file_loader import collect_files
from .graph_builder import find_unresolved_imports
from .graph_export import focused_subgraph, render_dot
from .mermaid import render_mermaid
from .models import AnalysisResult, DriftResult
from .snapshot import load_snapshot, save_snapshot

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="🗺️  repoviz — dependency graphs and drift for TypeScript / JavaScript projects.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration — analysis defaults stored in config.toml.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"repoviz v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
):
    """repoviz: map imports between source files and track how they drift."""
    level = (log_level or load_analysis_config()["log_level"]).upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"Unknown log level '{level}'", param_hint="--log-level")
    configure_logging(level)


# ===================================================================
# Helpers
# ===================================================================

def _fail(exc: RepoVizError) -> None:
    err_console.print(f"❌ {exc.message}", style="red", markup=False)
    if isinstance(exc, ParseError) and exc.cause is not None:
        err_console.print(f"   {exc.cause}", style="dim", markup=False)
    raise typer.Exit(code=1)


def _analyzer(workers: Optional[int]) -> ProjectAnalyzer:
    if workers is None:
        workers = int(load_analysis_config()["max_workers"] or 0)
    return ProjectAnalyzer(max_workers=workers or None)


def _excludes(extra: Optional[List[str]]) -> List[str]:
    return list(load_analysis_config()["exclude"]) + list(extra or [])


def _analyze_dir(path: Path, exclude: Optional[List[str]], workers: Optional[int]) -> AnalysisResult:
    files = collect_files(path, _excludes(exclude))
    return _analyzer(workers).analyze(files)


def _load_side(path: Path, exclude: Optional[List[str]], workers: Optional[int]) -> AnalysisResult:
    """A drift side is either a snapshot file or a directory analyzed on the fly."""
    if path.is_dir():
        return _analyze_dir(path, exclude, workers)
    return load_snapshot(path)


def _summary_table(result: AnalysisResult) -> Table:
    table = Table(title="Analysis Summary", show_lines=False)
    table.add_column("File", style="cyan", min_width=20)
    table.add_column("Exports", justify="right", style="green")
    table.add_column("Imports", justify="right", style="magenta")
    table.add_column("Dependencies", justify="right")

    deps = {node.path: len(node.dependencies) for node in result.graph}
    for parsed in result.files:
        table.add_row(
            escape(parsed.path),
            str(len(parsed.exports)),
            str(len(parsed.imports)),
            str(deps.get(parsed.path, 0)),
        )
    return table


def _deps(dependencies: List[str]) -> str:
    return escape(", ".join(dependencies)) or "-"


def _drift_tables(drift: DriftResult) -> List[Table]:
    tables: List[Table] = []
    by_type = {"added": [], "removed": [], "modified": []}
    for change in drift.changes:
        by_type[change.change_type].append(change)

    if by_type["added"]:
        table = Table(title=f"Added Files ({len(by_type['added'])})", title_style="bold green")
        table.add_column("File", style="green")
        table.add_column("Dependencies")
        for change in by_type["added"]:
            table.add_row(escape(change.path), _deps(change.after.dependencies))
        tables.append(table)

    if by_type["removed"]:
        table = Table(title=f"Removed Files ({len(by_type['removed'])})", title_style="bold red")
        table.add_column("File", style="red")
        table.add_column("Dependencies")
        for change in by_type["removed"]:
            table.add_row(escape(change.path), _deps(change.before.dependencies))
        tables.append(table)

    if by_type["modified"]:
        table = Table(title=f"Modified Files ({len(by_type['modified'])})", title_style="bold yellow")
        table.add_column("File", style="yellow")
        table.add_column("Before")
        table.add_column("After")
        for change in by_type["modified"]:
            table.add_row(
                escape(change.path),
                _deps(change.before.dependencies),
                _deps(change.after.dependencies),
            )
        tables.append(table)

    return tables


# ===================================================================
# Commands
# ===================================================================

@app.command("analyze")
def analyze(
    project_path: Path = typer.Argument(..., help="Directory containing the source files."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the snapshot JSON here."),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Extra path pattern to skip (repeatable)."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=0, help="Parse files on N threads."),
    show_unresolved: bool = typer.Option(False, "--show-unresolved", help="List relative imports that match no file."),
    diagram: bool = typer.Option(True, "--diagram/--no-diagram", help="Print the Mermaid diagram."),
):
    """📊 Analyze a project and print its dependency diagram.

    Example:
      repoviz analyze ./src
      repoviz analyze ./src -o snapshot.json
    """
    try:
        result = _analyze_dir(project_path, exclude, workers)
    except RepoVizError as exc:
        _fail(exc)
        return

    console.print(_summary_table(result))
    edges = sum(len(node.dependencies) for node in result.graph)
    typer.echo(f"Files: {len(result.files)} | Edges: {edges}")

    if show_unresolved:
        unresolved = find_unresolved_imports(result.files, {n.path for n in result.graph})
        if unresolved:
            typer.echo(f"\nUnresolved relative imports ({len(unresolved)}):")
            for item in unresolved:
                typer.echo(f"  {item.path}: {item.source}")
        else:
            typer.echo("\nAll relative imports resolved.")

    if diagram:
        typer.echo("")
        typer.echo(result.diagram)

    if output is not None:
        written = save_snapshot(result, output)
        typer.echo(f"\nSaved snapshot to {written}")


@app.command("render")
def render(
    snapshot_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Snapshot JSON file."),
    fmt: str = typer.Option("mermaid", "--format", "-f", help="Output format: mermaid or dot."),
    focus: str = typer.Option("", "--focus", help="Only show files whose path contains this text, plus neighbours."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the diagram to a file."),
):
    """🖼️  Render a snapshot's dependency graph as Mermaid or Graphviz DOT."""
    fmt = fmt.lower()
    if fmt not in {"mermaid", "dot"}:
        raise typer.BadParameter("Format must be one of: mermaid, dot")

    try:
        result = load_snapshot(snapshot_path)
    except RepoVizError as exc:
        _fail(exc)
        return

    graph = focused_subgraph(result.graph, focus)
    text = render_mermaid(graph) if fmt == "mermaid" else render_dot(graph)

    if output is None:
        typer.echo(text)
    else:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Exported {fmt} diagram to {output}")


@app.command("drift")
def drift(
    current: Path = typer.Argument(..., exists=True, help="Current snapshot file or project directory."),
    previous: Path = typer.Argument(..., exists=True, help="Previous snapshot file or project directory."),
    as_json: bool = typer.Option(False, "--json", help="Print the drift report as JSON."),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Extra path pattern to skip when analyzing a directory."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=0, help="Parse files on N threads."),
    fail_on_drift: bool = typer.Option(False, "--fail-on-drift", help="Exit with code 2 when anything changed."),
):
    """🔀 Compare two snapshots (or directories) and report dependency drift.

    Example:
      repoviz drift ./src baseline.json
      repoviz drift new.json old.json --json
    """
    try:
        current_result = _load_side(current, exclude, workers)
        previous_result = _load_side(previous, exclude, workers)
    except RepoVizError as exc:
        _fail(exc)
        return

    result = detect_drift(current_result, previous_result)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif not result.has_changes:
        typer.echo("✅ No drift detected.")
    else:
        typer.echo(
            f"Drift: {len(result.added)} added | {len(result.removed)} removed | "
            f"{len(result.modified)} modified"
        )
        for table in _drift_tables(result):
            console.print(table)

    if fail_on_drift and result.has_changes:
        raise typer.Exit(code=2)


@config_app.command("show")
def config_show():
    """Show the effective analysis configuration."""
    settings = load_analysis_config()
    typer.echo(f"Config file: {config_manager.CONFIG_FILE}")
    typer.echo(f"exclude = {', '.join(settings['exclude']) or '(none)'}")
    typer.echo(f"max_workers = {settings['max_workers']}")
    typer.echo(f"log_level = {settings['log_level']}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Setting name: exclude, max_workers or log_level."),
    value: str = typer.Argument(..., help="New value (comma-separated for exclude)."),
):
    """Store an analysis setting in config.toml."""
    try:
        stored = save_analysis_setting(key, value)
    except RepoVizError as exc:
        _fail(exc)
        return
    typer.echo(f"Set {key} = {stored}")


if __name__ == "__main__":
    app()
