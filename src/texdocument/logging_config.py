"""Rich console setup and build reporting helpers."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .models import CompilationResult

console = Console()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logger with Rich handler."""
    level = logging.DEBUG if verbose else (logging.ERROR if quiet else logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def report_result(result: CompilationResult) -> None:
    """Print the passes that ran and any warnings from the log."""
    table = Table(title="Compiler passes", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Command")
    for num, cmd in enumerate(result.passes, 1):
        table.add_row(str(num), " ".join(cmd))
    console.print(table)

    if result.pdf_path:
        console.print(f"[green]PDF:[/] {result.pdf_path}")
    for warning in result.warnings:
        console.print(f"  [yellow]WARNING:[/] {warning.message}")
    if result.unresolved_refs:
        console.print(f"  [yellow]Unresolved references:[/] {', '.join(result.unresolved_refs)}")
