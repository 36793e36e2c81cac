"""Document adapter protocol consumed by the graph builder.

The core never touches a document model directly. Everything it needs about
labels and attributes goes through an object implementing ``DocumentAdapter``,
so the same traversal works for in-memory test documents and for real
XCAF documents loaded through OCCT.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class LabelFlags:
    """Evaluated classification predicates of a single label."""

    is_reference: bool = False
    is_assembly: bool = False
    is_component: bool = False
    is_extern_ref: bool = False
    is_simple_shape: bool = False


@runtime_checkable
class DocumentAdapter(Protocol):
    """Read-only view of a hierarchical label document."""

    def root_labels(self) -> Sequence[Any]:
        """Top-level (free) labels in document order."""
        ...

    def entry(self, label: Any) -> str:
        """Canonical path of a label, e.g. ``0:1:1:3``."""
        ...

    def flags(self, label: Any) -> LabelFlags:
        ...

    def referred_label(self, label: Any) -> Optional[Any]:
        """Target of a reference label, ``None`` for anything else."""
        ...

    def components(self, label: Any) -> Sequence[Any]:
        ...

    def sub_shapes(self, label: Any) -> Sequence[Any]:
        ...

    def attributes(self, label: Any) -> Sequence[Any]:
        """Attributes attached to a label, in their natural order."""
        ...

    def attribute_token(self, attribute: Any) -> Hashable:
        """Stable identity of an attribute instance."""
        ...

    def attribute_type_name(self, attribute: Any) -> str:
        ...

    def attribute_name(self, attribute: Any) -> Optional[str]:
        """Name string for name attributes, ``None`` for every other kind."""
        ...

    def attribute_dump(self, attribute: Any) -> str:
        """Generic structured dump of the attribute state."""
        ...
