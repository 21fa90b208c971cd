"""Command-line interface for loopsmith.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- reconstruct: rebuild loops and filled regions from exploded fragments
- offset: ordered inward offsets with band fills
- loops: list assembled loops without writing anything
- Detailed error reporting
"""

from loopsmith.cli.app import cli, main

__all__ = ["cli", "main"]
