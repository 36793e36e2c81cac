"""XCAF document access through Open CASCADE.

This module loads STEP files into an XDE (XCAF) document with
pythonocc-core and exposes its label tree through the document adapter
protocol used by the graph builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Hashable, List, Optional, Sequence, Union

import structlog

from xgraph_ir.adapter import LabelFlags

from .memory import DocumentNotFoundError

logger = structlog.get_logger(__name__)

NAME_ATTRIBUTE_TYPE = "TDataStd_Name"
DUMP_DEPTH = 5


class OCCTNotAvailableError(Exception):
    """Raised when no OCCT binding is available."""

    pass


class StepImportError(Exception):
    """Raised when STEP file import into an XCAF document fails."""

    pass


def get_occt_info() -> Dict[str, Any]:
    """Get information about the pythonocc-core binding.

    Returns:
        Dictionary with binding availability and version info
    """
    info: Dict[str, Any] = {
        "pythonOCC_available": False,
        "occt_version": None,
    }

    try:
        import OCC
        from OCC.Core.XCAFDoc import XCAFDoc_DocumentTool  # noqa: F401

        info["pythonOCC_available"] = True
        info["occt_version"] = getattr(OCC, "VERSION", "unknown")
        logger.info("pythonOCC binding detected", version=info["occt_version"])
    except ImportError:
        logger.debug("pythonOCC not available")

    return info


@dataclass(frozen=True)
class OCCTAttribute:
    """An attribute of a label together with its position on that label."""

    label: Any
    entry: str
    position: int
    handle: Any


class OCCTDocumentAdapter:
    """Document adapter over an XCAF ``TDocStd_Document``."""

    def __init__(self, document: Any, name: str = "") -> None:
        try:
            from OCC.Core.XCAFDoc import XCAFDoc_DocumentTool
        except ImportError as e:
            raise OCCTNotAvailableError("pythonocc-core is required for XCAF documents") from e

        self.document = document
        self.name = name
        self._shape_tool = XCAFDoc_DocumentTool.ShapeTool(document.Main())

    @staticmethod
    def _sequence_to_list(sequence: Any) -> List[Any]:
        return [sequence.Value(index) for index in range(1, sequence.Length() + 1)]

    def root_labels(self) -> Sequence[Any]:
        from OCC.Core.TDF import TDF_LabelSequence

        labels = TDF_LabelSequence()
        self._shape_tool.GetFreeShapes(labels)
        return self._sequence_to_list(labels)

    def entry(self, label: Any) -> str:
        from OCC.Core.TCollection import TCollection_AsciiString
        from OCC.Core.TDF import TDF_Tool

        entry = TCollection_AsciiString()
        TDF_Tool.Entry(label, entry)
        return entry.ToCString()

    def flags(self, label: Any) -> LabelFlags:
        tool = self._shape_tool
        return LabelFlags(
            is_reference=bool(tool.IsReference(label)),
            is_assembly=bool(tool.IsAssembly(label)),
            is_component=bool(tool.IsComponent(label)),
            is_extern_ref=bool(tool.IsExternRef(label)),
            is_simple_shape=bool(tool.IsSimpleShape(label)),
        )

    def referred_label(self, label: Any) -> Optional[Any]:
        from OCC.Core.TDF import TDF_Label

        referred = TDF_Label()
        if self._shape_tool.GetReferredShape(label, referred):
            return referred
        return None

    def components(self, label: Any) -> Sequence[Any]:
        from OCC.Core.TDF import TDF_LabelSequence

        components = TDF_LabelSequence()
        if self._shape_tool.GetComponents(label, components, False):
            return self._sequence_to_list(components)
        return []

    def sub_shapes(self, label: Any) -> Sequence[Any]:
        from OCC.Core.TDF import TDF_LabelSequence

        sub_shapes = TDF_LabelSequence()
        if self._shape_tool.GetSubShapes(label, sub_shapes):
            return self._sequence_to_list(sub_shapes)
        return []

    def attributes(self, label: Any) -> Sequence[OCCTAttribute]:
        from OCC.Core.TDF import TDF_AttributeIterator

        entry = self.entry(label)
        attributes = []
        iterator = TDF_AttributeIterator(label)
        while iterator.More():
            attributes.append(
                OCCTAttribute(label=label, entry=entry, position=len(attributes), handle=iterator.Value())
            )
            iterator.Next()
        return attributes

    def attribute_token(self, attribute: OCCTAttribute) -> Hashable:
        # Python wrappers are recreated on every iteration; the label entry and
        # the position on the label identify the underlying instance.
        return (attribute.entry, attribute.position)

    def attribute_type_name(self, attribute: OCCTAttribute) -> str:
        return str(attribute.handle.DynamicType().Name())

    def attribute_name(self, attribute: OCCTAttribute) -> Optional[str]:
        if self.attribute_type_name(attribute) != NAME_ATTRIBUTE_TYPE:
            return None

        from OCC.Core.TDataStd import TDataStd_Name

        name = TDataStd_Name.DownCast(attribute.handle)
        if name is None:
            return None
        return str(name.Get().ToExtString())

    def attribute_dump(self, attribute: OCCTAttribute) -> str:
        dump = getattr(attribute.handle, "DumpJsonToString", None)
        if dump is None:
            logger.debug(
                "Attribute has no JSON dump",
                entry=attribute.entry,
                position=attribute.position,
            )
            return ""
        return str(dump(DUMP_DEPTH))


def _validate_step_file(file_path: Union[str, Path]) -> Path:
    path = Path(file_path).resolve()

    if not path.exists():
        raise DocumentNotFoundError(f"STEP file not found: {path}")

    if not path.is_file():
        raise DocumentNotFoundError(f"Path is not a file: {path}")

    if path.stat().st_size == 0:
        raise StepImportError(f"STEP file is empty: {path}")

    return path


def load_step_document(file_path: Union[str, Path]) -> OCCTDocumentAdapter:
    """Load a STEP file into a new XCAF document.

    Names, colors, layers and materials are transferred so that they show up
    as label attributes.

    Args:
        file_path: Path to the STEP file

    Returns:
        OCCTDocumentAdapter over the populated document

    Raises:
        DocumentNotFoundError: If the file does not exist
        StepImportError: If the file cannot be read or transferred
        OCCTNotAvailableError: If pythonocc-core is not installed
    """
    path = _validate_step_file(file_path)

    try:
        from OCC.Core.IFSelect import IFSelect_RetDone
        from OCC.Core.STEPCAFControl import STEPCAFControl_Reader
        from OCC.Core.TDocStd import TDocStd_Document
    except ImportError as e:
        raise OCCTNotAvailableError(
            "No OCCT Python binding available. "
            "Please install pythonocc-core:\n"
            "  conda install -c conda-forge pythonocc-core"
        ) from e

    logger.info("Loading STEP file into XCAF document", file=str(path))

    document = TDocStd_Document("xgraph-step-import")
    reader = STEPCAFControl_Reader()
    reader.SetColorMode(True)
    reader.SetLayerMode(True)
    reader.SetNameMode(True)
    reader.SetMatMode(True)

    status = reader.ReadFile(str(path))
    if status != IFSelect_RetDone:
        raise StepImportError(f"STEP read failed with status: {status}")

    if not reader.Transfer(document):
        raise StepImportError(f"Failed to transfer STEP content into document: {path}")

    adapter = OCCTDocumentAdapter(document, name=path.stem)
    logger.info("STEP document loaded", file=str(path), roots=len(adapter.root_labels()))
    return adapter
