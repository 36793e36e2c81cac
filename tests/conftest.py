"""Pytest configuration and shared fixtures.

Provides common test fixtures and configuration for the XGraph test suite.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import orjson
import pytest
import structlog

from xdoc.memory import MemoryAttribute, MemoryDocument, MemoryLabel
from xdoc.occt_xde import get_occt_info
from xgraph_ir.adapter import LabelFlags


# Configure test logging
structlog.configure(
    processors=[
        structlog.testing.LogCapture(),
    ],
    logger_factory=structlog.testing.CapturingLoggerFactory(),
    cache_logger_on_first_use=False,
)

SHAPE = LabelFlags(is_simple_shape=True)
ASSEMBLY = LabelFlags(is_assembly=True, is_simple_shape=True)
COMPONENT = LabelFlags(is_component=True)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def leaf_document() -> MemoryDocument:
    """One free leaf shape without attributes."""
    return MemoryDocument("Leaf", roots=[MemoryLabel("0:1:1:1", flags=SHAPE)])


@pytest.fixture
def bolt_assembly_document() -> MemoryDocument:
    """Assembly with two leaf components, the first one named Bolt."""
    bolt = MemoryLabel(
        "0:1:1:1:1",
        flags=COMPONENT,
        attributes=[MemoryAttribute("TDataStd_Name", name="Bolt")],
    )
    nut = MemoryLabel("0:1:1:1:2", flags=COMPONENT)
    assembly = MemoryLabel("0:1:1:1", flags=ASSEMBLY, components=[bolt, nut])
    return MemoryDocument("Bolts", roots=[assembly])


@pytest.fixture
def shared_document() -> MemoryDocument:
    """Root assembly using the same sub-assembly through two components.

    Layout::

        0:1:1:1 (assembly)
          0:1:1:1:1 -> 0:1:1:2
          0:1:1:1:2 -> 0:1:1:2
        0:1:1:2 (assembly)
          0:1:1:2:1 -> 0:1:1:3
        0:1:1:3 (shape)
    """
    leaf = MemoryLabel("0:1:1:3", flags=SHAPE)
    sub_instance = MemoryLabel("0:1:1:2:1", flags=COMPONENT, ref=leaf)
    sub_assembly = MemoryLabel("0:1:1:2", flags=ASSEMBLY, components=[sub_instance])
    first = MemoryLabel("0:1:1:1:1", flags=COMPONENT, ref=sub_assembly)
    second = MemoryLabel("0:1:1:1:2", flags=COMPONENT, ref=sub_assembly)
    root = MemoryLabel("0:1:1:1", flags=ASSEMBLY, components=[first, second])
    return MemoryDocument("Shared", roots=[root])


@pytest.fixture
def sample_document_dict() -> Dict[str, Any]:
    """JSON description of a small assembly with shared attributes."""
    return {
        "name": "Sample",
        "roots": ["0:1:1:1"],
        "labels": [
            {
                "entry": "0:1:1:1",
                "flags": ["assembly", "shape"],
                "components": ["0:1:1:1:1"],
                "attributes": ["name-asm", "color-red"],
            },
            {
                "entry": "0:1:1:1:1",
                "flags": ["component"],
                "ref": "0:1:1:2",
            },
            {
                "entry": "0:1:1:2",
                "flags": ["shape"],
                "sub_shapes": ["0:1:1:2:1"],
                "attributes": ["name-plate", "color-red"],
            },
            {
                "entry": "0:1:1:2:1",
                "flags": ["shape"],
            },
        ],
        "attributes": [
            {"id": "name-asm", "type": "TDataStd_Name", "name": "Frame"},
            {"id": "name-plate", "type": "TDataStd_Name", "name": "Plate"},
            {"id": "color-red", "type": "XCAFDoc_Color", "dump": {"rgb": [255, 0, 0]}},
        ],
    }


@pytest.fixture
def sample_document_file(temp_dir: Path, sample_document_dict: Dict[str, Any]) -> Path:
    """Write the sample description to a JSON file."""
    path = temp_dir / "sample.json"
    path.write_bytes(orjson.dumps(sample_document_dict))
    return path


@pytest.fixture
def skip_if_no_occt():
    """Skip test if pythonocc-core is not available."""
    if not get_occt_info()["pythonOCC_available"]:
        pytest.skip("No OCCT binding available (pythonocc-core required)")
