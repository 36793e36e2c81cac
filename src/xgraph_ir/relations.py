"""Relationship recorder for directed label edges."""

from __future__ import annotations

from typing import Dict, List

from .schema import Direction


class RelationshipRecorder:
    """Accumulates directed edges between label identifiers.

    The direction is fixed at construction. In downward mode the edge is stored
    under the parent and points to the child; in upward mode it is stored under
    the child and points back to the parent. Edges are kept in insertion order
    and never deduplicated, so a label reached twice from the same parent shows
    the link twice.
    """

    def __init__(self, direction: Direction = Direction.DOWNWARD) -> None:
        self.direction = Direction(direction)
        self._edges: Dict[int, List[int]] = {}
        self._count = 0

    def add_edge(self, parent_id: int, child_id: int) -> None:
        """Record that ``child_id`` was reached from ``parent_id``.

        A parent of 0 marks a root label; the edge is kept but never rendered.
        """
        if self.direction is Direction.UPWARD:
            source, target = child_id, parent_id
        else:
            source, target = parent_id, child_id

        related = self._edges.get(source)
        if related is None:
            related = self._edges[source] = []
        related.append(target)
        self._count += 1

    def edges_for(self, label_id: int) -> List[int]:
        """Related identifiers recorded under ``label_id`` (copy, may be empty)."""
        return list(self._edges.get(label_id, ()))

    def rendered_edges_for(self, label_id: int) -> List[int]:
        """Related identifiers without the zero placeholder used for roots."""
        return [related for related in self._edges.get(label_id, ()) if related > 0]

    @property
    def edge_count(self) -> int:
        """Number of recorded edges, root placeholders included."""
        return self._count

    def pairs(self) -> List[tuple[int, int]]:
        """All recorded (source, target) pairs with non-zero endpoints."""
        return [
            (source, target)
            for source in sorted(self._edges)
            for target in self._edges[source]
            if source > 0 and target > 0
        ]
