"""CLI interface for cachesweep."""

import logging
import os
from typing import List, Optional

import typer
from rich.logging import RichHandler
from rich.markup import escape

from cachesweep import __version__
from cachesweep.catalog import apply_scan, find_target, get_known_locations
from cachesweep.config import build_engine, load_settings, load_stats, record_freed
from cachesweep.display import (
    confirm_action,
    console,
    format_size,
    show_access_report,
    show_clean_outcome,
    show_cleanup_preview,
    show_scan_result,
    show_scanning_progress,
    show_stats,
    show_targets,
)
from cachesweep.errors import CacheError
from cachesweep.models import CacheTarget
from cachesweep.scanner import expand_path

app = typer.Typer(
    name="cachesweep",
    help="Find, measure and clear cache directories",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"cachesweep version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logger = logging.getLogger("cachesweep")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
) -> None:
    """cachesweep - reclaim disk space taken by caches."""
    setup_logging(verbose)


def select_targets(ids: Optional[List[str]], paths: Optional[List[str]]) -> List[CacheTarget]:
    """Resolve catalog ids and ad-hoc paths into targets (whole catalog if empty)."""
    settings = load_settings()
    catalog = get_known_locations(settings.extra_paths)

    if not ids and not paths:
        return catalog

    selected: List[CacheTarget] = []
    for key in ids or []:
        target = find_target(catalog, key)
        if target is None:
            console.print(f"[red]Unknown location: {key}[/red]")
            console.print("\nAvailable locations:")
            for t in catalog:
                console.print(f"  • [bold]{t.id}[/bold] - {t.name}")
            raise typer.Exit(1)
        selected.append(target)

    for raw in paths or []:
        path = str(expand_path(raw))
        selected.append(
            CacheTarget(id=path, path=path, name=os.path.basename(path) or path)
        )

    return selected


@app.command(name="list")
def list_locations() -> None:
    """List known cache locations."""
    engine = build_engine()
    targets = get_known_locations(load_settings().extra_paths)
    admin_paths = {t.path for t in targets if engine.requires_elevated_privileges(t.path)}
    show_targets(targets, admin_paths)


@app.command()
def scan(
    ids: Optional[List[str]] = typer.Argument(None, help="Location ids to scan (default: all)"),
    path: Optional[List[str]] = typer.Option(None, "--path", "-p", help="Extra directory to scan"),
) -> None:
    """Measure cache locations."""
    targets = select_targets(ids, path)
    engine = build_engine()

    with show_scanning_progress() as progress:
        task = progress.add_task("Scanning...", total=len(targets))

        def update_progress(scanned: str, current: int, total: int):
            progress.update(task, completed=current, description=f"Scanned {scanned}")

        result = engine.scan([t.path for t in targets], progress_callback=update_progress)

    apply_scan(targets, result)
    console.print()
    show_scan_result(targets, result)


@app.command()
def size(path: str = typer.Argument(..., help="Directory to measure")) -> None:
    """Measure a single directory."""
    engine = build_engine()
    expanded = str(expand_path(path))
    try:
        size_bytes = engine.measure(expanded)
    except CacheError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"{expanded}: [bold]{format_size(size_bytes)}[/bold] ({size_bytes} bytes)")


@app.command()
def clean(
    ids: Optional[List[str]] = typer.Argument(None, help="Location ids to clean (default: all)"),
    path: Optional[List[str]] = typer.Option(None, "--path", "-p", help="Extra directory to clean"),
    skip_critical: bool = typer.Option(
        False, "--skip-critical", help="Leave locations marked critical alone"
    ),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
) -> None:
    """Delete the contents of cache locations."""
    targets = select_targets(ids, path)
    if skip_critical:
        targets = [t for t in targets if not t.is_critical]

    if not targets:
        console.print("[yellow]Nothing to clean.[/yellow]")
        raise typer.Exit(0)

    engine = build_engine()
    admin_paths = {t.path for t in targets if engine.requires_elevated_privileges(t.path)}
    show_cleanup_preview(targets, admin_paths)
    if admin_paths:
        if engine.elevated_executor.available():
            console.print("[dim]You will be asked for an administrator password.[/dim]")
        else:
            console.print(
                "[yellow]No way to request administrator rights was found; "
                f"{len(admin_paths)} protected location(s) will fail.[/yellow]"
            )

    if not yes:
        console.print()
        if not confirm_action("Delete the contents of these locations?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    console.print("\n[bold]Cleaning...[/bold]")
    outcome = engine.clean([t.path for t in targets])
    show_clean_outcome(outcome)

    if outcome.freed:
        record_freed(outcome.total_freed)

    if not outcome.success:
        raise typer.Exit(1)


@app.command()
def check(
    paths: Optional[List[str]] = typer.Argument(None, help="Paths to check (default: all known)"),
) -> None:
    """Check existence, access and privilege needs of locations."""
    engine = build_engine()
    if paths:
        to_check = [str(expand_path(p)) for p in paths]
    else:
        to_check = [t.path for t in get_known_locations(load_settings().extra_paths)]

    rows = []
    for p in to_check:
        row = {
            "path": p,
            "exists": engine.path_exists(p),
            "accessible": os.access(p, os.R_OK) and os.access(p, os.W_OK),
            "requires_admin": engine.requires_elevated_privileges(p),
            "size": 0,
            "error": None,
        }
        try:
            row["size"] = engine.measure(p)
        except CacheError as e:
            row["error"] = str(e)
        rows.append(row)

    show_access_report(rows)


@app.command()
def stats() -> None:
    """Show space freed by past cleanups."""
    show_stats(load_stats())


if __name__ == "__main__":
    app()
