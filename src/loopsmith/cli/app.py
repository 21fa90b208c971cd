"""CLI application entry point for loopsmith.

This module provides the main CLI interface using Typer.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from loopsmith import __version__
from loopsmith.cli.output import (
    console,
    loop_table,
    print_drawing_info,
    print_error,
    print_header,
    print_step,
    print_success,
    print_warning,
)
from loopsmith.config import (
    CompositionConfig,
    GeometryConfig,
    LoggingConfig,
    LoopsmithSettings,
    OffsetConfig,
)
from loopsmith.core.processor import BoundaryProcessor
from loopsmith.exceptions import DrawingLoadError, DrawingSaveError, LoopsmithError
from loopsmith.io import DrawingWriter

# Create the Typer app
app = typer.Typer(
    name="loopsmith",
    help="Rebuild closed boundaries from exploded line and arc fragments.",
    add_completion=False,
    no_args_is_help=True,
)


@dataclass
class GlobalOptions:
    """Options shared by every command."""

    log_file: Path | None = None
    log_level: str = "WARNING"
    quiet: bool = False


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Loopsmith[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def global_options(
    ctx: typer.Context,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Rebuild closed boundaries from exploded line and arc fragments."""
    ctx.obj = GlobalOptions(log_file=log_file, log_level=log_level.upper(), quiet=quiet)


def _options(ctx: typer.Context) -> GlobalOptions:
    return ctx.obj if isinstance(ctx.obj, GlobalOptions) else GlobalOptions()


def _check_input(input_path: Path) -> None:
    if not input_path.exists():
        print_error(
            f"Input file not found: {input_path}",
            details=f"The file '{input_path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_path.is_file():
        print_error(
            f"Input path is not a file: {input_path}",
            details="Please provide a path to a DXF drawing.",
        )
        raise typer.Exit(code=1)


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Map processing errors to an error message and exit code 1."""
    try:
        yield
    except DrawingLoadError as e:
        print_error(f"Could not load drawing: {e.reason}")
        raise typer.Exit(code=1) from e
    except DrawingSaveError as e:
        print_error(f"Could not save drawing: {e.reason}")
        raise typer.Exit(code=1) from e
    except LoopsmithError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1) from e


def _settings(
    options: GlobalOptions,
    tolerance: float | None = None,
    layers: list[str] | None = None,
    offset: OffsetConfig | None = None,
) -> LoopsmithSettings:
    geometry = GeometryConfig() if tolerance is None else GeometryConfig(tolerance=tolerance)
    return LoopsmithSettings(
        geometry=geometry,
        offset=offset or OffsetConfig(),
        composition=CompositionConfig(layers=layers or None),
        logging=LoggingConfig(
            log_file=options.log_file,
            log_level=options.log_level if not options.quiet else "WARNING",
        ),
    )


@app.command()
def reconstruct(
    ctx: typer.Context,
    input_drawing: Annotated[
        Path,
        typer.Argument(
            help="Path to a DXF drawing with exploded lines and arcs",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-loops.dxf)",
        ),
    ] = None,
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Endpoint matching tolerance in drawing units",
            min=1e-12,
            max=1.0,
        ),
    ] = 1e-6,
    layer: Annotated[
        list[str] | None,
        typer.Option(
            "--layer",
            "-l",
            help="Only read fragments on this layer (repeatable)",
        ),
    ] = None,
) -> None:
    """Rebuild closed loops from fragments and fill each outline minus its holes.

    Example:
        loopsmith reconstruct exploded.dxf

    This will create exploded-loops.dxf with one polyline per loop and a
    filled region for every outer contour.
    """
    options = _options(ctx)
    _check_input(input_drawing)

    if not options.quiet:
        print_header(__version__)

    settings = _settings(options, tolerance=tolerance, layers=layer)
    output_path = output or _default_output(input_drawing, "loops")

    with _reported_errors():
        if not options.quiet:
            print_step("Reconstructing")
        processor = BoundaryProcessor(settings, quiet=options.quiet)
        stats = processor.process(input_drawing, output_path)

        if not options.quiet:
            print_drawing_info(str(input_drawing), stats.fragments_read, stats.fragments_rejected)
            if stats.incomplete_loops:
                print_warning(f"{stats.incomplete_loops} loops did not close")
            if stats.holes_skipped:
                print_warning(f"{stats.holes_skipped} holes could not be subtracted")
            print_success(
                output_path=str(output_path),
                total_time_s=stats.duration_seconds,
                summary=(
                    f"{stats.loops_assembled} loops · {stats.outlines_composed} regions · "
                    f"{stats.holes_subtracted} holes"
                ),
                errors=stats.error_count,
            )


@app.command()
def offset(
    ctx: typer.Context,
    input_drawing: Annotated[
        Path,
        typer.Argument(
            help="Path to a DXF drawing with two nested closed polylines",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-offset.dxf)",
        ),
    ] = None,
    distance: Annotated[
        float,
        typer.Option(
            "--distance",
            "-d",
            help="Inward offset distance",
            min=0.0,
        ),
    ] = 2.0,
    pattern_scale: Annotated[
        float,
        typer.Option(
            "--pattern-scale",
            help="Scale of the hatch pattern between the loops",
            min=0.0,
        ),
    ] = 20.0,
) -> None:
    """Offset the two largest closed polylines inward and fill the bands between them.

    Example:
        loopsmith offset frame.dxf --distance 2

    This will create frame-offset.dxf with both loops, their offsets and
    the band fills.
    """
    options = _options(ctx)
    _check_input(input_drawing)

    if distance <= 0 or pattern_scale <= 0:
        print_error("Distance and pattern scale must be positive")
        raise typer.Exit(code=1)

    if not options.quiet:
        print_header(__version__)

    settings = _settings(
        options,
        offset=OffsetConfig(distance=distance, pattern_scale=pattern_scale),
    )
    output_path = output or _default_output(input_drawing, "offset")

    with _reported_errors():
        if not options.quiet:
            print_step("Offsetting")
        processor = BoundaryProcessor(settings, quiet=options.quiet)
        stats = processor.ordered_offset(input_drawing, output_path)

        if not options.quiet:
            if stats.offsets_missing:
                print_warning(f"{stats.offsets_missing} offsets could not be created")
            print_success(
                output_path=str(output_path),
                total_time_s=stats.duration_seconds,
                summary=f"{stats.offsets_created} offsets · {stats.fills_created} fills",
                errors=stats.error_count,
            )


@app.command()
def loops(
    ctx: typer.Context,
    input_drawing: Annotated[
        Path,
        typer.Argument(
            help="Path to a DXF drawing with exploded lines and arcs",
            show_default=False,
        ),
    ],
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Endpoint matching tolerance in drawing units",
            min=1e-12,
            max=1.0,
        ),
    ] = 1e-6,
) -> None:
    """List the loops that would be assembled, without writing anything."""
    options = _options(ctx)
    _check_input(input_drawing)
    settings = _settings(options, tolerance=tolerance)

    with _reported_errors():
        processor = BoundaryProcessor(settings, quiet=True)
        fragments, reader = processor.read_fragments(input_drawing)
        assembly, hierarchy = processor.assemble(fragments)

        roles = {idx: "outer" for idx in hierarchy.outers}
        roles.update({idx: "hole" for idx in hierarchy.holes})

        rejected = sum(reader.rejected.values())
        console.print(
            f"\n[bold]{len(assembly.loops)} loops[/bold] from {assembly.input_count} fragments"
            f" · {len(assembly.degenerate)} degenerate · {rejected} rejected\n"
        )
        if assembly.loops:
            console.print(loop_table(assembly.loops, roles))


def _default_output(input_path: Path, suffix: str) -> Path:
    return DrawingWriter.get_output_path(input_path, suffix)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
