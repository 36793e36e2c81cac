"""XGraph MCP Server implementation.

Provides a stdio-based MCP server exposing label graph export as tools.
"""

from __future__ import annotations

import sys
from typing import Any, Dict

import structlog
from mcp.server.fastmcp import FastMCP

from .tools import tool_dump_graph, tool_load_document, tool_session_info

# Configure structured logging
structlog.configure(
    processors=[
        structlog.dev.ConsoleRenderer(colors=False),  # No colors for stdio
    ],
    logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

app = FastMCP("xgraph")


@app.tool()
def load_document(path: str, name: str | None = None) -> Dict[str, Any]:
    """Load a document file (.json description or .step/.stp) into the session.

    Args:
        path: Absolute path to the document file
        name: Optional session name for the document

    Returns:
        Dictionary containing the registered document name and session info
    """
    try:
        logger.info("MCP tool: load_document", path=path)
        return tool_load_document({"path": path, "name": name})
    except Exception as e:
        logger.error("MCP tool: load_document failed", path=path, error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "document": None,
            "file_path": path,
        }


@app.tool()
def dump_graph(document: str, output: str, upward: bool = False) -> Dict[str, Any]:
    """Dump the label graph of a loaded document to an exchange file.

    Args:
        document: Session name of the document
        output: Output file path
        upward: Link labels to the parents that reached them instead of
            parents to their children

    Returns:
        Dictionary containing the output path and graph statistics
    """
    try:
        logger.info("MCP tool: dump_graph", document=document, output=output, upward=upward)
        return tool_dump_graph({"document": document, "output": output, "upward": upward})
    except Exception as e:
        logger.error("MCP tool: dump_graph failed", document=document, error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "document": document,
            "output": output,
        }


@app.tool()
def session_info() -> Dict[str, Any]:
    """Get information about the current session and loaded documents."""
    try:
        return tool_session_info()
    except Exception as e:
        logger.error("MCP tool: session_info failed", error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "session_stats": {},
            "documents": [],
        }


def main() -> None:
    """Main entry point for the MCP server (stdio mode)."""
    try:
        logger.info("Starting XGraph MCP server")
        app.run()
    except KeyboardInterrupt:
        logger.info("MCP server shutting down (keyboard interrupt)")
        sys.exit(0)
    except Exception as e:
        logger.error("MCP server startup failed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
