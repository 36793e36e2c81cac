"""XGraph CLI for label graph export.

Provides command-line interface for dumping the label graph of a CAD
document into a STEP-like exchange file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from xdoc.export import export_document, open_document
from xdoc.memory import DocumentFormatError, DocumentNotFoundError
from xdoc.occt_xde import OCCTNotAvailableError, StepImportError, get_occt_info
from xgraph_ir.adapter import DocumentAdapter
from xgraph_ir.builder import build_graph
from xgraph_ir.encoder import OutputUnavailableError
from xgraph_ir.schema import Direction, classify

from .logging_setup import configure_logging, configure_profile

logger = structlog.get_logger(__name__)

# Create Typer app
app = typer.Typer(
    name="xgraph",
    help="XGraph CLI for dumping CAD document label graphs",
    add_completion=False,
)

console = Console()

DOCUMENT_ERRORS = (DocumentNotFoundError, DocumentFormatError, StepImportError, OCCTNotAvailableError)


def _display_error(message: str, error: Optional[Exception] = None) -> None:
    """Display error message with styling."""
    error_text = Text(f"❌ {message}", style="bold red")
    if error:
        error_text.append(f"\n   {str(error)}", style="red")
    console.print(Panel(error_text, title="Error", border_style="red"))


def _display_success(message: str) -> None:
    """Display success message with styling."""
    success_text = Text(f"✅ {message}", style="bold green")
    console.print(Panel(success_text, title="Success", border_style="green"))


def _format_file_size(size: float) -> str:
    """Format file size in human-readable units."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def _load(path: Path) -> DocumentAdapter:
    console.print(f"🔄 Loading document: {path}")
    return open_document(path)


@app.callback()
def main(
    log_profile: Optional[str] = typer.Option(
        None, "--log-profile", help="Logging profile (development, production, testing)"
    ),
) -> None:
    """Configure logging before running a command."""
    if log_profile or not structlog.is_configured():
        try:
            configure_profile(log_profile)
        except ValueError as e:
            _display_error("Invalid logging profile", e)
            raise typer.Exit(1)


@app.command()
def info() -> None:
    """Display XGraph information and OCCT binding status."""
    console.print(Panel(
        "XGraph\n"
        "Label graph extraction for XCAF documents",
        title="XGraph",
        border_style="blue"
    ))

    occt_info = get_occt_info()

    table = Table(title="OCCT Binding Status")
    table.add_column("Binding", style="cyan")
    table.add_column("Available", style="green")
    table.add_column("Version", style="yellow")

    table.add_row(
        "pythonOCC",
        "✅" if occt_info["pythonOCC_available"] else "❌",
        str(occt_info["occt_version"]) if occt_info["pythonOCC_available"] else "N/A",
    )
    console.print(table)

    if not occt_info["pythonOCC_available"]:
        _display_error(
            "No OCCT binding available",
            Exception("Install pythonocc-core to read STEP files; JSON documents still work")
        )


@app.command()
def dump(
    document: str = typer.Argument(..., help="Document file (.json description or .step/.stp)"),
    output: str = typer.Argument(..., help="Output path for the exchange file"),
    upward: bool = typer.Option(False, "--upward", help="Link labels to the parents that reached them"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Dump the label graph of a document to an exchange file."""
    if verbose:
        configure_logging(level="DEBUG")

    direction = Direction.from_flag(upward)

    try:
        adapter = _load(Path(document))
        result = export_document(adapter, Path(output), direction=direction)
    except DOCUMENT_ERRORS as e:
        _display_error("Failed to load document", e)
        raise typer.Exit(1)
    except OutputUnavailableError as e:
        _display_error("Failed to write exchange file", e)
        raise typer.Exit(1)

    _display_result(result)
    _display_success(f"Label graph written to: {result['output']}")


@app.command()
def show(
    document: str = typer.Argument(..., help="Document file (.json description or .step/.stp)"),
    upward: bool = typer.Option(False, "--upward", help="Link labels to the parents that reached them"),
) -> None:
    """Print the label table of a document without writing a file."""
    try:
        adapter = _load(Path(document))
    except DOCUMENT_ERRORS as e:
        _display_error("Failed to load document", e)
        raise typer.Exit(1)

    graph = build_graph(adapter, Direction.from_flag(upward))

    table = Table(title=f"Labels ({graph.direction.value})")
    table.add_column("Id", style="cyan", justify="right")
    table.add_column("Kind", style="yellow")
    table.add_column("Entry", style="white")
    table.add_column("Links", style="green")
    table.add_column("Attributes", style="magenta", justify="right")

    for entry in graph.registry:
        kind = classify(adapter.flags(entry.label))
        links = ", ".join(f"#{related}" for related in graph.relations.rendered_edges_for(entry.id))
        table.add_row(
            f"#{entry.id}",
            kind.tag or "-",
            entry.entry,
            links,
            str(len(adapter.attributes(entry.label))),
        )

    console.print(table)


def _display_result(result: Dict[str, Any]) -> None:
    """Display export statistics in a formatted table."""
    table = Table(title="Export Results")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Output", result["output"])
    table.add_row("Direction", result["direction"])
    table.add_row("Labels", str(result["node_count"]))
    table.add_row("Attributes", str(result["attribute_count"]))
    table.add_row("Links", str(result["edge_count"]))
    table.add_row("Size", _format_file_size(result["size_bytes"]))

    for kind, count in sorted(result["kinds"].items()):
        table.add_row(f"Kind: {kind}", str(count))

    console.print(table)


if __name__ == "__main__":
    app()
