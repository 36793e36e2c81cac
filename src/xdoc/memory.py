"""In-memory label documents and their JSON description format.

A JSON document description lists labels by entry, the attribute instances
attached to them and the free (root) labels::

    {
      "name": "D",
      "roots": ["0:1:1:1"],
      "labels": [
        {"entry": "0:1:1:1", "flags": ["assembly"], "components": ["0:1:1:1:1"]},
        {"entry": "0:1:1:1:1", "flags": ["component"], "ref": "0:1:1:2",
         "attributes": ["name-1"]},
        {"entry": "0:1:1:2", "flags": ["shape"]}
      ],
      "attributes": [
        {"id": "name-1", "type": "TDataStd_Name", "name": "Bolt"}
      ]
    }

Attributes are referenced by id, so one instance can be attached to several
labels.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Hashable, List, Optional, Sequence, Union

import orjson
import structlog

from xgraph_ir.adapter import LabelFlags

logger = structlog.get_logger(__name__)

NAME_ATTRIBUTE_TYPE = "TDataStd_Name"

FLAG_NAMES = {
    "reference": "is_reference",
    "assembly": "is_assembly",
    "component": "is_component",
    "extern_ref": "is_extern_ref",
    "shape": "is_simple_shape",
}


class DocumentNotFoundError(Exception):
    """Raised when a document handle does not resolve to a document."""

    pass


class DocumentFormatError(Exception):
    """Raised when a document description cannot be interpreted."""

    pass


@dataclass(eq=False)
class MemoryAttribute:
    """Attribute instance attached to one or more labels."""

    type_name: str
    name: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    key: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if not isinstance(self.type_name, str):
            raise TypeError(f"Attribute type name must be a string, got {type(self.type_name).__name__}")
        if not self.type_name:
            raise ValueError("Attribute type name cannot be empty")
        if self.name is not None and not isinstance(self.name, str):
            raise TypeError(f"Attribute name must be a string, got {type(self.name).__name__}")
        if not isinstance(self.payload, dict):
            raise TypeError(f"Attribute dump must be an object, got {type(self.payload).__name__}")


@dataclass(eq=False)
class MemoryLabel:
    """A label of an in-memory document."""

    entry: str
    flags: LabelFlags = field(default_factory=LabelFlags)
    components: List["MemoryLabel"] = field(default_factory=list)
    sub_shapes: List["MemoryLabel"] = field(default_factory=list)
    ref: Optional["MemoryLabel"] = None
    attributes: List[MemoryAttribute] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.entry:
            raise ValueError("Label entry cannot be empty")


class MemoryDocument:
    """Document adapter over plain Python objects."""

    def __init__(self, name: str, roots: Optional[Sequence[MemoryLabel]] = None) -> None:
        self.name = name
        self.roots: List[MemoryLabel] = list(roots or [])

    def root_labels(self) -> Sequence[MemoryLabel]:
        return list(self.roots)

    def entry(self, label: MemoryLabel) -> str:
        return label.entry

    def flags(self, label: MemoryLabel) -> LabelFlags:
        if label.ref is not None and not label.flags.is_reference:
            return LabelFlags(
                is_reference=True,
                is_assembly=label.flags.is_assembly,
                is_component=label.flags.is_component,
                is_extern_ref=label.flags.is_extern_ref,
                is_simple_shape=label.flags.is_simple_shape,
            )
        return label.flags

    def referred_label(self, label: MemoryLabel) -> Optional[MemoryLabel]:
        return label.ref

    def components(self, label: MemoryLabel) -> Sequence[MemoryLabel]:
        return list(label.components)

    def sub_shapes(self, label: MemoryLabel) -> Sequence[MemoryLabel]:
        return list(label.sub_shapes)

    def attributes(self, label: MemoryLabel) -> Sequence[MemoryAttribute]:
        return list(label.attributes)

    def attribute_token(self, attribute: MemoryAttribute) -> Hashable:
        return attribute.key

    def attribute_type_name(self, attribute: MemoryAttribute) -> str:
        return attribute.type_name

    def attribute_name(self, attribute: MemoryAttribute) -> Optional[str]:
        if attribute.type_name == NAME_ATTRIBUTE_TYPE:
            return attribute.name or ""
        return None

    def attribute_dump(self, attribute: MemoryAttribute) -> str:
        data = {"className": attribute.type_name, **attribute.payload}
        return orjson.dumps(data, option=orjson.OPT_SORT_KEYS).decode("utf-8")


def _parse_flags(raw: Any, entry: str) -> LabelFlags:
    if raw is None:
        return LabelFlags()
    if not isinstance(raw, list):
        raise DocumentFormatError(f"Label {entry}: 'flags' must be a list")

    values = {}
    for flag in raw:
        if flag not in FLAG_NAMES:
            raise DocumentFormatError(f"Label {entry}: unknown flag '{flag}'")
        values[FLAG_NAMES[flag]] = True
    return LabelFlags(**values)


def document_from_dict(data: Dict[str, Any]) -> MemoryDocument:
    """Build a MemoryDocument from a parsed JSON description.

    Args:
        data: Parsed document description

    Returns:
        MemoryDocument with all labels and attributes linked

    Raises:
        DocumentFormatError: If the description is malformed or inconsistent
    """
    if not isinstance(data, dict):
        raise DocumentFormatError("Document description must be a JSON object")

    attributes: Dict[str, MemoryAttribute] = {}
    for raw in data.get("attributes", []):
        try:
            key = str(raw["id"])
            attribute = MemoryAttribute(
                type_name=raw["type"],
                name=raw.get("name"),
                payload=raw.get("dump", {}),
                key=key,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DocumentFormatError(f"Invalid attribute description: {raw!r}") from e
        if key in attributes:
            raise DocumentFormatError(f"Duplicate attribute id: {key}")
        attributes[key] = attribute

    raw_labels = data.get("labels", [])
    labels: Dict[str, MemoryLabel] = {}
    for raw in raw_labels:
        if not isinstance(raw, dict) or not raw.get("entry"):
            raise DocumentFormatError(f"Invalid label description: {raw!r}")
        entry = str(raw["entry"])
        if entry in labels:
            raise DocumentFormatError(f"Duplicate label entry: {entry}")
        labels[entry] = MemoryLabel(entry=entry, flags=_parse_flags(raw.get("flags"), entry))

    def resolve(entry: str, owner: str) -> MemoryLabel:
        try:
            return labels[entry]
        except KeyError:
            raise DocumentFormatError(f"Label {owner} refers to unknown label {entry}") from None

    for raw in raw_labels:
        label = labels[str(raw["entry"])]
        label.components = [resolve(child, label.entry) for child in raw.get("components", [])]
        label.sub_shapes = [resolve(child, label.entry) for child in raw.get("sub_shapes", [])]
        if raw.get("ref") is not None:
            label.ref = resolve(raw["ref"], label.entry)
        for key in raw.get("attributes", []):
            if key not in attributes:
                raise DocumentFormatError(f"Label {label.entry} refers to unknown attribute {key}")
            label.attributes.append(attributes[key])

    roots = [resolve(entry, "<roots>") for entry in data.get("roots", [])]

    return MemoryDocument(name=str(data.get("name", "")), roots=roots)


def load_document(path: Union[str, Path]) -> MemoryDocument:
    """Load a JSON document description from disk.

    Args:
        path: Path to the JSON description

    Returns:
        MemoryDocument named after the description (or the file stem)

    Raises:
        DocumentNotFoundError: If the file does not exist
        DocumentFormatError: If the file is not a valid description
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentNotFoundError(f"Document not found: {path}")

    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise DocumentFormatError(f"Failed to parse document {path}: {e}") from e

    document = document_from_dict(data)
    if not document.name:
        document.name = path.stem

    logger.info("Loaded document description", document=document.name, path=str(path), roots=len(document.roots))
    return document
