"""CLI entry point for suitetree."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from suitetree.coverage.scorer import calculate_coverage_summary
from suitetree.models.config import SuiteTreeConfig
from suitetree.session import Session

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _open_session(config: str, with_results: bool = True) -> Session:
    try:
        cfg = SuiteTreeConfig.load(config)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'suitetree init' to create a default config.")
        sys.exit(1)

    session = Session(cfg, base_dir=Path(config).parent)
    try:
        session.load_project()
        if with_results:
            session.apply_results()
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    session.apply_coverage()
    return session


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Reconcile test results and coverage against a project's test tree"""
    setup_logging(verbose)


@cli.command()
@click.option("--config", "-c", default="suitetree.json", help="Config file path")
def summary(config: str) -> None:
    """Show run totals and coverage."""
    session = _open_session(config)
    total = session.store.total_result

    table = Table(title="Run Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Suites passed", f"[green]{total.num_passed_test_suites}[/green]")
    table.add_row("Suites failed", f"[red]{total.num_failed_test_suites}[/red]")
    table.add_row("Tests passed", f"[green]{total.num_passed_tests}[/green]")
    table.add_row("Tests failed", f"[red]{total.num_failed_tests}[/red]")
    table.add_row("Snapshots matched", str(total.matched_snapshots))
    table.add_row("Snapshots unmatched", f"[yellow]{total.unmatched_snapshots}[/yellow]")
    console.print(table)
    console.print(calculate_coverage_summary(session.store))


@cli.command()
@click.option("--config", "-c", default="suitetree.json", help="Config file path")
def failures(config: str) -> None:
    """List failing tests grouped by file."""
    session = _open_session(config)
    failing = session.store.failing_assertions_by_file()
    if not failing:
        console.print("[green]No failing tests[/green]")
        return

    for path, its in failing.items():
        console.print(f"[bold red]{path}[/bold red]")
        for it in its:
            marker = " [yellow](snapshot)[/yellow]" if it.snapshot_error_status == "error" else ""
            console.print(f"  ✕ {it.name}{marker}")
    sys.exit(1)


@cli.command()
@click.argument("text")
@click.option("--files", "files_view", is_flag=True, help="Search the files view instead of tests")
@click.option("--config", "-c", default="suitetree.json", help="Config file path")
def search(text: str, files_view: bool, config: str) -> None:
    """Search files or tests by name or path."""
    session = _open_session(config, with_results=False)
    store = session.store
    store.set_search_text(text)
    matches = store.visible_files() if files_view else store.visible_tests()

    table = Table(title=f"Matches for {text!r}")
    table.add_column("Path")
    table.add_column("Detail")
    for node in matches:
        detail = node.secondary_label
        if node.is_test:
            detail = f"{len(node.it_blocks)} tests"
        table.add_row(node.path, detail)
    console.print(table)


@cli.command()
@click.option("--project-file", "-p", default="suitetree-project.json", help="Project description path")
def init(project_file: str) -> None:
    """Create a default configuration file."""
    config_path = Path("suitetree.json")
    if config_path.exists():
        if not click.confirm("suitetree.json already exists. Overwrite?"):
            return

    cfg = SuiteTreeConfig(project_file=project_file)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nYou can now customize this file and run:")
    console.print("  [blue]suitetree summary[/blue]")


if __name__ == "__main__":
    cli()
