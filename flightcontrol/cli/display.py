"""Display components for CLI using Rich."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from flightcontrol.models.build import BuildSystemKind
from flightcontrol.models.job import BatchReport, OutcomeStatus, RepositoryJob

console = Console()

BANNER = r"""
[bold cyan]
   ______ _ _       _     _    ___            _             _
  |  ____| (_)     | |   | |  / __|___  _ __ | |_ _ _ ___  | |
  | |__  | |_  __ _| |__ | |_| |  / _ \| '_ \|  _| '_/ _ \ | |
  |  __| | | |/ _` | '_ \| __| |_| (_) | | | | |_| | | (_) || |
  |_|    |_|_|\__, |_| |_|\__|\___\___/|_| |_|\__|_|  \___/ |_|
               __/ |
              |___/
[/bold cyan]
[dim]Batch builder for Gradle and Maven repositories[/dim]
"""

_OUTCOME_STYLES = {
    OutcomeStatus.COMPILED: "[bold green]COMPILED[/]",
    OutcomeStatus.SKIPPED: "[yellow]SKIPPED[/]",
    OutcomeStatus.FAILED: "[bold red]FAILED[/]",
}


def show_banner() -> None:
    """Display the flightcontrol banner."""
    console.print()
    console.print(Panel(BANNER, border_style="cyan", padding=(0, 2)))
    console.print()


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_info(title: str, message: str) -> None:
    """Display an info message."""
    console.print()
    console.print(
        Panel(
            escape(message),
            title=f"[bold]{escape(title)}[/]",
            border_style="blue",
        )
    )


def _outcome_cell(job: RepositoryJob) -> str:
    if job.outcome is None:
        return f"[dim]{job.state.value.upper()}[/]"
    return _OUTCOME_STYLES[job.outcome.status]


def _detail_cell(job: RepositoryJob) -> str:
    outcome = job.outcome
    if outcome is None:
        return ""
    if outcome.status == OutcomeStatus.FAILED:
        message = outcome.error_message or "Unknown error"
        # Keep the table readable; the full build output is in the log
        if len(message) > 80:
            message = message[:77] + "..."
        return f"[red]{escape(message)}[/]"
    if outcome.artifact_path is not None:
        return escape(str(outcome.artifact_path))
    if job.destination is not None:
        return f"[dim]{escape(str(job.destination))}[/]"
    return ""


def show_batch_report(report: BatchReport) -> None:
    """Display the per-job outcomes of a build run.

    Args:
        report: Report returned by the orchestrator.
    """
    console.print()

    table = Table(title="[bold]Build Report[/]", show_lines=False)
    table.add_column("Module", style="cyan")
    table.add_column("Outcome")
    table.add_column("Build System", style="magenta")
    table.add_column("Artifact / Error")
    table.add_column("Time", justify="right", style="dim")

    for job in report.jobs:
        duration = job.duration_seconds
        table.add_row(
            escape(job.label),
            _outcome_cell(job),
            job.build_system.value if job.build_system else "-",
            _detail_cell(job),
            f"{duration:.1f}s" if duration is not None else "-",
        )

    console.print(table)

    summary = (
        f"[green]{report.compiled_count} compiled[/], "
        f"[yellow]{report.skipped_count} skipped[/], "
        f"[red]{report.failed_count} failed[/] "
        f"in {report.duration_seconds:.2f}s"
    )
    console.print(
        Panel(
            summary,
            title="[bold]Summary[/]",
            border_style="red" if report.has_failures else "green",
        )
    )

    if report.collisions:
        lines = [
            f"{escape(dest)}: {escape(', '.join(locators))}"
            for dest, locators in report.collisions.items()
        ]
        console.print(
            Panel(
                "\n".join(lines),
                title="[bold]Colliding Destinations[/]",
                border_style="yellow",
            )
        )


def show_detection(path: Path, kinds: list[BuildSystemKind]) -> None:
    """Display the build systems detected in a directory.

    Args:
        path: Inspected directory.
        kinds: Matching build systems in priority order.
    """
    console.print()
    table = Table(title="[bold]Build System Detection[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Path", escape(str(path)))
    if kinds:
        table.add_row("Build System", f"[bold green]{kinds[0].value}[/]")
        if len(kinds) > 1:
            table.add_row("Also Matches", ", ".join(k.value for k in kinds[1:]))
    else:
        table.add_row("Build System", "[bold red]UNSUPPORTED[/]")

    console.print(Panel(table, border_style="green" if kinds else "red"))
