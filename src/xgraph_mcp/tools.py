"""MCP tools implementation with document session management.

This module provides the tools of the XGraph MCP server. Documents are loaded
once into a session under a name and later referred to by that name, the way
a Draw session refers to documents by handle.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from xdoc.export import export_document, open_document
from xdoc.memory import DocumentFormatError, DocumentNotFoundError
from xdoc.occt_xde import OCCTNotAvailableError, StepImportError
from xgraph_ir.adapter import DocumentAdapter
from xgraph_ir.encoder import OutputUnavailableError
from xgraph_ir.schema import Direction

logger = structlog.get_logger(__name__)


class SessionError(Exception):
    """Raised when session operations fail."""
    pass


class XGraphSession:
    """Session holding named documents."""

    def __init__(self, max_documents: int = 10):
        """Initialize session.

        Args:
            max_documents: Maximum number of documents to keep in memory
        """
        self._documents: Dict[str, DocumentAdapter] = {}
        self._paths: Dict[str, str] = {}
        self._max_documents = max_documents

        logger.info("XGraph session initialized", max_documents=max_documents)

    def _evict_oldest(self) -> None:
        # Dicts keep insertion order, so the first keys are the oldest loads
        while len(self._documents) > self._max_documents:
            oldest = next(iter(self._documents))
            self.remove_document(oldest)

    def add_document(self, name: str, document: DocumentAdapter, path: str = "") -> None:
        if not name:
            raise SessionError("Document name cannot be empty")
        self._documents.pop(name, None)
        self._documents[name] = document
        self._paths[name] = path
        self._evict_oldest()

    def remove_document(self, name: str) -> None:
        if name in self._documents:
            del self._documents[name]
            self._paths.pop(name, None)
            logger.debug("Removed document from session", document=name)

    def has_document(self, name: str) -> bool:
        return name in self._documents

    def get_document(self, name: str) -> DocumentAdapter:
        """Resolve a document handle.

        Raises:
            DocumentNotFoundError: If no document with that name is loaded
        """
        try:
            return self._documents[name]
        except KeyError:
            raise DocumentNotFoundError(f"There is no document {name}") from None

    def get_path(self, name: str) -> str:
        return self._paths.get(name, "")

    def list_documents(self) -> List[str]:
        return list(self._documents.keys())

    def get_session_stats(self) -> Dict[str, Any]:
        return {
            "loaded_documents": len(self._documents),
            "max_documents": self._max_documents,
            "document_names": list(self._documents.keys()),
        }

    def load_document(self, file_path: str, name: Optional[str] = None) -> str:
        """Load a document file and register it in the session.

        Args:
            file_path: JSON description or STEP file
            name: Session name; defaults to the document's own name or file stem

        Returns:
            Name under which the document was registered

        Raises:
            SessionError: If loading fails
        """
        try:
            document = open_document(file_path)
        except (DocumentNotFoundError, DocumentFormatError, StepImportError, OCCTNotAvailableError) as e:
            logger.error("Failed to load document", file_path=file_path, error=str(e))
            raise SessionError(f"Failed to load document: {e}") from e

        doc_name = name or getattr(document, "name", "") or Path(file_path).stem
        self.add_document(doc_name, document, path=str(file_path))
        logger.info("Document loaded", document=doc_name, file_path=file_path)
        return doc_name

    def dump_graph(self, name: str, output_path: str, direction: Direction = Direction.DOWNWARD) -> Dict[str, Any]:
        """Export the label graph of a loaded document.

        Raises:
            DocumentNotFoundError: If the document is not loaded
            OutputUnavailableError: If the output cannot be opened
        """
        document = self.get_document(name)
        return export_document(document, output_path, direction=direction)


# Global session instance for MCP tools
_session = XGraphSession()


def tool_load_document(params: Dict[str, Any]) -> Dict[str, Any]:
    """MCP tool: Load a document file into the session.

    Args:
        params: Tool parameters containing 'path' and optional 'name'

    Returns:
        Dictionary with load results

    Raises:
        ValueError: If parameters are invalid
    """
    if "path" not in params:
        raise ValueError("Missing required parameter: path")

    file_path = params["path"]
    if not file_path:
        raise ValueError("Parameter 'path' cannot be empty")

    try:
        name = _session.load_document(file_path, params.get("name"))
    except SessionError as e:
        return {
            "success": False,
            "error": str(e),
            "document": None,
            "file_path": file_path,
        }

    return {
        "success": True,
        "document": name,
        "file_path": file_path,
        "session_stats": _session.get_session_stats(),
    }


def tool_dump_graph(params: Dict[str, Any]) -> Dict[str, Any]:
    """MCP tool: Dump the label graph of a loaded document.

    Args:
        params: Tool parameters containing 'document', 'output' and optional 'upward'

    Returns:
        Dictionary with export statistics

    Raises:
        ValueError: If parameters are invalid
    """
    for key in ("document", "output"):
        if not params.get(key):
            raise ValueError(f"Missing required parameter: {key}")

    name = params["document"]
    direction = Direction.from_flag(bool(params.get("upward", False)))

    try:
        result = _session.dump_graph(name, params["output"], direction=direction)
    except (DocumentNotFoundError, OutputUnavailableError) as e:
        logger.error("dump_graph tool failed", document=name, error=str(e))
        return {
            "success": False,
            "error": str(e),
            "document": name,
            "output": params["output"],
        }

    return {"success": True, "document": name, **result}


def tool_session_info(params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """MCP tool: Get session information and loaded documents."""
    stats = _session.get_session_stats()

    documents = []
    for name in stats["document_names"]:
        document = _session.get_document(name)
        documents.append({
            "document": name,
            "file_path": _session.get_path(name),
            "roots": len(document.root_labels()),
        })

    return {
        "success": True,
        "session_stats": stats,
        "documents": documents,
        "available_tools": [
            "load_document",
            "dump_graph",
            "session_info",
        ],
    }
