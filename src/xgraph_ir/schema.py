"""XGraph schema definitions.

This module defines the closed set of label kinds, the edge direction mode and
the record types produced while extracting the label graph of a document.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Optional

from .adapter import LabelFlags


class NodeKind(str, Enum):
    """Role of a label in the document hierarchy.

    The value is the tag written to the exchange file.
    """

    REFERENCE = "REFERENCE"
    ASSEMBLY = "ASSEMBLY"
    COMPONENT = "COMPONENT"
    EXTERN_REF = "EXTERN_REF"
    SHAPE = "SHAPE"
    UNCLASSIFIED = ""

    @property
    def tag(self) -> str:
        return self.value


class Direction(str, Enum):
    """Orientation of recorded relationship edges.

    ``DOWNWARD`` points from the discovering parent to the discovered child,
    ``UPWARD`` from the child back to the parent that reached it.
    """

    DOWNWARD = "downward"
    UPWARD = "upward"

    @classmethod
    def from_flag(cls, upward: bool) -> "Direction":
        return cls.UPWARD if upward else cls.DOWNWARD


# Evaluated top to bottom, first match wins
_KIND_PRIORITY = [
    ("is_reference", NodeKind.REFERENCE),
    ("is_assembly", NodeKind.ASSEMBLY),
    ("is_component", NodeKind.COMPONENT),
    ("is_extern_ref", NodeKind.EXTERN_REF),
    ("is_simple_shape", NodeKind.SHAPE),
]


def classify(flags: LabelFlags) -> NodeKind:
    """Map evaluated label predicates to a single node kind.

    Args:
        flags: Predicates reported by the document adapter

    Returns:
        The highest priority matching kind, or ``NodeKind.UNCLASSIFIED``
    """
    for attr_name, kind in _KIND_PRIORITY:
        if getattr(flags, attr_name):
            return kind
    return NodeKind.UNCLASSIFIED


@dataclass(frozen=True)
class RegistryEntry:
    """A discovered label bound to its identifier."""

    id: int
    entry: str
    label: Any


@dataclass(frozen=True)
class AttributeEntry:
    """A distinct attribute instance bound to its identifier."""

    id: int
    token: Hashable
    attribute: Any
    type_name: str
    name: Optional[str] = None
