"""Document package for label graph export.

This package provides the document sources (JSON descriptions and XCAF
documents read through Open CASCADE) and the export entry points.
"""

from .export import export_document, export_graph_text, open_document
from .memory import (
    DocumentFormatError,
    DocumentNotFoundError,
    MemoryAttribute,
    MemoryDocument,
    MemoryLabel,
    load_document,
)
from .occt_xde import OCCTNotAvailableError, StepImportError, get_occt_info, load_step_document

__version__ = "0.1.0"
__all__ = [
    "MemoryDocument", "MemoryLabel", "MemoryAttribute", "load_document",
    "DocumentNotFoundError", "DocumentFormatError",
    "OCCTNotAvailableError", "StepImportError", "get_occt_info", "load_step_document",
    "open_document", "export_document", "export_graph_text",
]
