"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from loopsmith.domain import Loop

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Loopsmith[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_drawing_info(drawing_path: str, fragments: int, rejected: int) -> None:
    """Print what was read from a drawing.

    Args:
        drawing_path: Path to the drawing
        fragments: Number of line/arc fragments read
        rejected: Number of entities that were not lines or arcs
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(drawing_path)
    console.print(line)
    console.print(f"  {fragments:,} fragments {SYM_DOT} {rejected:,} rejected")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(output_path: str, total_time_s: float, summary: str, errors: int) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        total_time_s: Total processing time in seconds
        summary: One-line summary of what was produced
        errors: Number of errors encountered
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(f"  {summary} {SYM_DOT} [{error_style}]{errors} errors[/{error_style}]")


def print_warning(message: str) -> None:
    """Print a warning line."""
    console.print(f"  [yellow]{SYM_WARN} {message}[/yellow]")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def loop_table(loops: list[Loop], roles: dict[int, str]) -> Table:
    """Build a table describing assembled loops.

    Args:
        loops: Loops in assembly order
        roles: Role label per loop index ("outer", "hole")

    Returns:
        Rich table with one row per loop
    """
    table = Table(show_edge=False, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Area", justify="right")
    table.add_column("Vertices", justify="right")
    table.add_column("Fragments", justify="right")
    table.add_column("Role")
    table.add_column("Status")

    for idx, loop in enumerate(loops):
        status = "[green]closed[/green]" if loop.complete else "[red]open[/red]"
        table.add_row(
            str(loop.order),
            f"{loop.area:.6g}",
            str(len(loop.vertices)),
            str(loop.fragment_count),
            roles.get(idx, "-"),
            status,
        )
    return table
