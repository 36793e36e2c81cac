"""Tests for document export orchestration."""

from __future__ import annotations

from pathlib import Path

import pytest

from xdoc.export import export_document, export_graph_text, open_document
from xdoc.memory import DocumentFormatError, DocumentNotFoundError, MemoryDocument
from xgraph_ir.encoder import OutputUnavailableError
from xgraph_ir.schema import Direction


class TestOpenDocument:
    """Test cases for suffix dispatch."""

    def test_json(self, sample_document_file: Path):
        document = open_document(sample_document_file)

        assert isinstance(document, MemoryDocument)

    def test_missing_json(self, temp_dir: Path):
        with pytest.raises(DocumentNotFoundError):
            open_document(temp_dir / "missing.json")

    def test_missing_step(self, temp_dir: Path):
        """Test a missing STEP file is reported before any binding is needed."""
        with pytest.raises(DocumentNotFoundError, match="STEP file not found"):
            open_document(temp_dir / "missing.step")

    def test_unsupported_suffix(self, temp_dir: Path):
        with pytest.raises(DocumentFormatError, match="Unsupported document format"):
            open_document(temp_dir / "model.igs")


class TestExportDocument:
    """Test cases for export_document."""

    def test_result(self, temp_dir: Path, shared_document: MemoryDocument):
        output = temp_dir / "shared.stp"

        result = export_document(shared_document, output)

        assert result["output"] == str(output)
        assert result["direction"] == "downward"
        assert result["node_count"] == 6
        assert result["attribute_count"] == 0
        assert result["edge_count"] == 6
        assert result["kinds"] == {"ASSEMBLY": 2, "REFERENCE": 3, "SHAPE": 1}
        assert result["size_bytes"] == output.stat().st_size

    def test_file_matches_text(self, temp_dir: Path, bolt_assembly_document: MemoryDocument):
        output = temp_dir / "bolts.stp"

        export_document(bolt_assembly_document, output, direction=Direction.UPWARD)

        assert output.read_text(encoding="utf-8") == export_graph_text(
            bolt_assembly_document, Direction.UPWARD
        )

    def test_direction_from_string(self, temp_dir: Path, leaf_document: MemoryDocument):
        result = export_document(leaf_document, temp_dir / "leaf.stp", direction="upward")

        assert result["direction"] == "upward"

    def test_output_unavailable(self, temp_dir: Path, leaf_document: MemoryDocument):
        output = temp_dir / "no" / "such" / "dir.stp"

        with pytest.raises(OutputUnavailableError):
            export_document(leaf_document, output)

        assert not output.exists()

    def test_repeated_exports_identical(self, temp_dir: Path, sample_document_file: Path):
        first = temp_dir / "first.stp"
        second = temp_dir / "second.stp"

        export_document(open_document(sample_document_file), first)
        export_document(open_document(sample_document_file), second)

        assert first.read_bytes() == second.read_bytes()
