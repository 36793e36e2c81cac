"""Identity registry mapping label entries to stable identifiers."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Tuple

import structlog

from .schema import RegistryEntry

logger = structlog.get_logger(__name__)


class RegistryConsistencyError(LookupError):
    """Raised when an identifier is requested for an entry never registered.

    This is a defect in the traversal, never an input error.
    """

    pass


class IdentityRegistry:
    """Binds canonical label entries to identifiers in first-seen order.

    Identifiers start at 1 and are never reused. Registering an entry that is
    already known returns its existing identifier.
    """

    def __init__(self) -> None:
        self._ids: Dict[str, int] = {}
        self._entries: List[RegistryEntry] = []

    def register_or_lookup(self, entry: str, label: Any) -> Tuple[int, bool]:
        """Register a label entry or return the identifier it already has.

        Args:
            entry: Canonical path of the label
            label: Adapter handle stored alongside the first registration

        Returns:
            Tuple of (identifier, is_new)
        """
        existing = self._ids.get(entry)
        if existing is not None:
            return existing, False

        label_id = len(self._entries) + 1
        self._ids[entry] = label_id
        self._entries.append(RegistryEntry(id=label_id, entry=entry, label=label))
        logger.debug("Registered label", entry=entry, id=label_id)
        return label_id, True

    def id_of(self, entry: str) -> int:
        try:
            return self._ids[entry]
        except KeyError:
            raise RegistryConsistencyError(f"Label entry was never registered: {entry}") from None

    def get(self, label_id: int) -> RegistryEntry:
        """Return the registry entry for an identifier."""
        if not 1 <= label_id <= len(self._entries):
            raise RegistryConsistencyError(f"Unknown label identifier: {label_id}")
        return self._entries[label_id - 1]

    def __contains__(self, entry: object) -> bool:
        return entry in self._ids

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def size(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(list(self._entries))
