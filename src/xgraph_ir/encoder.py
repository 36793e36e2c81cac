"""Exchange file encoding for extracted label graphs.

The output reuses the ISO-10303-21 header/data framing as a plain container:
one ``#id = TAG(...)`` record per label followed by one ``ATTRIBUTE`` record
per distinct attribute instance. The text depends only on traversal order and
first-discovery order, so identical documents produce identical files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union

import structlog

from .adapter import DocumentAdapter
from .attributes import AttributeDeduplicator
from .builder import LabelGraph
from .schema import AttributeEntry, RegistryEntry, classify

logger = structlog.get_logger(__name__)

HEADER_LINES = (
    "ISO-10303-21;",
    "HEADER;",
    "FILE_DESCRIPTION(('Open CASCADE Model'),'2;1');",
    "ENDSEC;",
    "DATA;",
)

FOOTER_LINES = (
    "ENDSEC;",
    "END-ISO-10303-21;",
)

ATTRIBUTE_TAG = "ATTRIBUTE"


class OutputUnavailableError(Exception):
    """Raised when the exchange file destination cannot be opened for writing."""

    pass


def _quote(value: str) -> str:
    """Wrap a string in single quotes; the content is written as is."""
    return f"'{value}'"


def _id_group(ids: Iterable[int]) -> str:
    return "(" + ", ".join(f"#{value}" for value in ids) + ")"


def format_record(record_id: int, tag: str, name: str, params: Optional[str] = None) -> str:
    """Render a single ``#id = TAG('name', params);`` record."""
    record = f"#{record_id} = {tag}({_quote(name)}"
    if params:
        record += f", {params}"
    return record + ");"


class ExchangeEncoder:
    """Renders a label graph and its attributes into exchange file text.

    A fresh attribute deduplicator is created for every ``encode`` call, so
    attribute numbering always starts right after the last label id.
    """

    def __init__(self, graph: LabelGraph, adapter: DocumentAdapter) -> None:
        self.graph = graph
        self.adapter = adapter
        self.attributes = AttributeDeduplicator(adapter, graph.node_count)

    def encode(self) -> str:
        self.attributes = AttributeDeduplicator(self.adapter, self.graph.node_count)

        lines: List[str] = list(HEADER_LINES)
        for entry in self.graph.registry:
            lines.append(self._label_record(entry))
        for attribute in self.attributes:
            lines.append(self._attribute_record(attribute))
        lines.extend(FOOTER_LINES)

        logger.debug(
            "Encoded exchange records",
            labels=self.graph.node_count,
            attributes=len(self.attributes),
        )
        return "\n".join(lines) + "\n"

    def _label_record(self, entry: RegistryEntry) -> str:
        kind = classify(self.adapter.flags(entry.label))

        params = ""
        related = self.graph.relations.rendered_edges_for(entry.id)
        if related:
            params = _id_group(related) + ", "

        # Allocation order here defines attribute numbering
        attribute_ids = [self.attributes.id_for(att) for att in self.adapter.attributes(entry.label)]
        params += _id_group(attribute_ids)

        return format_record(entry.id, kind.tag, entry.entry, params)

    def _attribute_record(self, attribute: AttributeEntry) -> str:
        display_name = attribute.name or ""
        params = _quote(attribute.type_name)
        if not display_name:
            params += ", " + _quote(self.adapter.attribute_dump(attribute.attribute))
        return format_record(attribute.id, ATTRIBUTE_TAG, display_name, params)


def encode_graph(graph: LabelGraph, adapter: DocumentAdapter) -> str:
    """Convert a label graph to exchange file text.

    Args:
        graph: Completed traversal result
        adapter: Adapter the graph was built from

    Returns:
        Complete exchange file content
    """
    return ExchangeEncoder(graph, adapter).encode()


def dump_exchange(text: str, path: Union[str, Path]) -> int:
    """Write exchange file text to disk in a single write.

    Args:
        text: Complete exchange file content
        path: Output file path

    Returns:
        Number of bytes written

    Raises:
        OutputUnavailableError: If the destination cannot be opened for writing
    """
    path = Path(path)
    data = text.encode("utf-8")

    try:
        handle = open(path, "wb")
    except OSError as e:
        logger.error("Cannot open output file", output=str(path), error=str(e))
        raise OutputUnavailableError(f"Cannot open output file: {path}") from e

    with handle:
        handle.write(data)

    logger.info("Exchange file written", output=str(path), size_bytes=len(data))
    return len(data)
