"""Label graph export for loaded documents.

This module ties the pieces together: it opens a document, extracts its label
graph, encodes the exchange file and writes it to disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import structlog

from xgraph_ir.adapter import DocumentAdapter
from xgraph_ir.builder import build_graph
from xgraph_ir.encoder import ExchangeEncoder, dump_exchange
from xgraph_ir.schema import Direction

from .memory import DocumentFormatError, load_document
from .occt_xde import load_step_document

logger = structlog.get_logger(__name__)

STEP_SUFFIXES = (".step", ".stp")
JSON_SUFFIXES = (".json",)


def open_document(path: Union[str, Path]) -> DocumentAdapter:
    """Open a document file with the loader matching its suffix.

    Args:
        path: JSON document description or STEP file

    Returns:
        Document adapter over the loaded document

    Raises:
        DocumentNotFoundError: If the file does not exist
        DocumentFormatError: If the suffix is not supported
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in JSON_SUFFIXES:
        return load_document(path)
    if suffix in STEP_SUFFIXES:
        return load_step_document(path)

    raise DocumentFormatError(
        f"Unsupported document format: {suffix or '<none>'}. Use .json, .step or .stp"
    )


def export_graph_text(adapter: DocumentAdapter, direction: Direction = Direction.DOWNWARD) -> str:
    """Extract the label graph of a document and return the exchange text."""
    graph = build_graph(adapter, direction)
    return ExchangeEncoder(graph, adapter).encode()


def export_document(
    adapter: DocumentAdapter,
    output_path: Union[str, Path],
    direction: Direction = Direction.DOWNWARD,
) -> Dict[str, Any]:
    """Write the label graph of a document to an exchange file.

    The complete text is built in memory before the destination is opened.

    Args:
        adapter: Document to export
        output_path: Destination file path
        direction: Orientation of relationship links

    Returns:
        Dictionary describing the written file and graph statistics

    Raises:
        OutputUnavailableError: If the destination cannot be opened
    """
    direction = Direction(direction)
    logger.info("Exporting label graph", output=str(output_path), direction=direction.value)

    graph = build_graph(adapter, direction)
    encoder = ExchangeEncoder(graph, adapter)
    text = encoder.encode()
    size_bytes = dump_exchange(text, output_path)

    result = {
        "output": str(Path(output_path)),
        "direction": direction.value,
        "node_count": graph.node_count,
        "attribute_count": len(encoder.attributes),
        "edge_count": len(graph.relations.pairs()),
        "kinds": graph.kind_counts(adapter),
        "size_bytes": size_bytes,
    }

    logger.info(
        "Label graph exported",
        output=result["output"],
        node_count=result["node_count"],
        attribute_count=result["attribute_count"],
    )
    return result
