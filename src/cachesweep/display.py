"""Rich terminal display for cachesweep."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from cachesweep.catalog import total_size
from cachesweep.config import Stats
from cachesweep.models import CacheTarget, CleanOutcome, MeasureStatus, ScanResult

console = Console()


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (decimal units, KB/MB/GB)."""
    # Choose the unit after rounding
    if round(size_bytes / 1000**2, 1) >= 1000:
        return f"{size_bytes / (1000**3):.1f} GB"
    elif round(size_bytes / 1000) >= 1000:
        return f"{size_bytes / (1000**2):.1f} MB"
    else:
        return f"{size_bytes / 1000:.0f} KB"


def status_label(status: MeasureStatus) -> str:
    labels = {
        MeasureStatus.MEASURED: "[green]ok[/green]",
        MeasureStatus.MISSING: "[dim]missing[/dim]",
        MeasureStatus.UNREADABLE: "[red]unreadable[/red]",
    }
    return labels.get(status, "?")


def show_targets(targets: list[CacheTarget], admin_paths: set[str]) -> None:
    """Display the catalog."""
    table = Table(title="Cache Locations", show_header=True, header_style="bold")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Path")
    table.add_column("Critical", justify="center")
    table.add_column("Admin", justify="center")

    for target in targets:
        table.add_row(
            target.id,
            target.name,
            target.path,
            "[red]yes[/red]" if target.is_critical else "",
            "[yellow]yes[/yellow]" if target.path in admin_paths else "",
        )

    console.print(table)


def show_scan_result(targets: list[CacheTarget], result: ScanResult) -> None:
    """Display sizes found by a scan.

    Expects *targets* to carry the sizes from ``apply_scan``.
    """
    table = Table(title="Scan Results", show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Status")
    table.add_column("Path")

    scanned = [t for t in targets if t.path in result]
    for target in sorted(scanned, key=lambda t: t.size, reverse=True):
        name = f"[red]! {target.name}[/red]" if target.is_critical else target.name
        table.add_row(
            name,
            format_size(target.size),
            status_label(result.status_of(target.path)),
            target.path,
        )

    console.print(table)
    console.print(f"\n[bold]Scan complete! Found {format_size(total_size(scanned))}[/bold]")
    if result.unreadable:
        console.print(
            f"[yellow]{len(result.unreadable)} location(s) could not be read and count as 0.[/yellow]"
        )


def show_cleanup_preview(targets: list[CacheTarget], admin_paths: set[str]) -> None:
    """Display what a clean is about to touch."""
    table = Table(title="Cleanup Preview", show_header=True, header_style="bold")
    table.add_column("", width=3)
    table.add_column("Name")
    table.add_column("Path")
    table.add_column("Admin", justify="center")

    for target in targets:
        icon = "[red]![/red]" if target.is_critical else "[green]•[/green]"
        table.add_row(
            icon,
            target.name,
            target.path,
            "[yellow]yes[/yellow]" if target.path in admin_paths else "",
        )

    console.print(table)
    if any(t.is_critical for t in targets):
        console.print("[red]Critical locations are included in this cleanup.[/red]")


def show_clean_outcome(outcome: CleanOutcome) -> None:
    """Display the result of a clean."""
    for path, size in outcome.freed.items():
        console.print(f"  [green]✓[/green] {path}: {format_size(size)} freed")
    for path, error in outcome.errors.items():
        console.print(f"  [red]✗[/red] {escape(path)}: {escape(str(error))}")

    console.print()
    if outcome.success:
        console.print(f"[bold green]Cleaned {format_size(outcome.total_freed)}![/bold green]")
    else:
        console.print(
            Panel(
                f"[bold]Freed:[/bold] {format_size(outcome.total_freed)}\n"
                f"[bold]Failed:[/bold] {len(outcome.errors)} location(s)",
                title="Cleanup finished with errors",
                border_style="red",
            )
        )


def show_access_report(rows: list[dict]) -> None:
    """Display per-path access checks."""
    table = Table(title="Access Check", show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Exists", justify="center")
    table.add_column("Accessible", justify="center")
    table.add_column("Admin", justify="center")
    table.add_column("Size", justify="right")

    def flag(value: bool) -> str:
        return "[green]yes[/green]" if value else "[red]no[/red]"

    for row in rows:
        if row["error"]:
            size = f"[red]{escape(row['error'])}[/red]"
        else:
            size = format_size(row["size"])
        table.add_row(
            row["path"],
            flag(row["exists"]),
            flag(row["accessible"]),
            "[yellow]yes[/yellow]" if row["requires_admin"] else "no",
            size,
        )

    console.print(table)


def show_stats(stats: Stats) -> None:
    """Display the freed-space counter."""
    last = stats.last_cleaned.strftime("%Y-%m-%d %H:%M") if stats.last_cleaned else "never"
    console.print(f"Total freed: [bold]{format_size(stats.total_freed_bytes)}[/bold]")
    console.print(f"  Cleanups:     {stats.clean_count}")
    console.print(f"  Last cleaned: {last}")


def show_scanning_progress() -> Progress:
    """Create progress bar for scanning and cleaning."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
