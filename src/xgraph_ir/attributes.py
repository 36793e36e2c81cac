"""Identity-keyed numbering of attribute instances.

Attribute identifiers continue the label numbering: the first attribute seen
gets ``node_count + 1``. Two distinct instances with identical content get two
identifiers; the same instance attached to several labels gets one.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterator, List

from .adapter import DocumentAdapter
from .schema import AttributeEntry


class AttributeDeduplicator:
    """Assigns identifiers to attribute instances in first-seen order."""

    def __init__(self, adapter: DocumentAdapter, node_count: int) -> None:
        if node_count < 0:
            raise ValueError("node_count cannot be negative")
        self._adapter = adapter
        self._base = node_count
        self._ids: Dict[Hashable, int] = {}
        self._entries: List[AttributeEntry] = []

    def id_for(self, attribute: Any) -> int:
        """Return the identifier of an attribute, allocating one on first sight."""
        token = self._adapter.attribute_token(attribute)
        existing = self._ids.get(token)
        if existing is not None:
            return existing

        attribute_id = self._base + len(self._entries) + 1
        self._ids[token] = attribute_id
        self._entries.append(
            AttributeEntry(
                id=attribute_id,
                token=token,
                attribute=attribute,
                type_name=self._adapter.attribute_type_name(attribute),
                name=self._adapter.attribute_name(attribute),
            )
        )
        return attribute_id

    @property
    def base(self) -> int:
        return self._base

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AttributeEntry]:
        return iter(list(self._entries))
