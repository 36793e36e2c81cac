"""Worklist traversal that extracts the label graph of a document.

The traversal uses an explicit stack instead of recursion so deeply nested
assemblies cannot exhaust the interpreter stack. Because the stack is LIFO,
siblings are visited in reverse push order; identifiers follow that order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import structlog

from .adapter import DocumentAdapter
from .registry import IdentityRegistry
from .relations import RelationshipRecorder
from .schema import Direction, NodeKind, RegistryEntry, classify

logger = structlog.get_logger(__name__)


@dataclass
class LabelGraph:
    """Result of one traversal: discovered labels and their relationships."""

    registry: IdentityRegistry
    relations: RelationshipRecorder

    @property
    def direction(self) -> Direction:
        return self.relations.direction

    @property
    def node_count(self) -> int:
        return len(self.registry)

    def kind_of(self, adapter: DocumentAdapter, entry: RegistryEntry) -> NodeKind:
        return classify(adapter.flags(entry.label))

    def kind_counts(self, adapter: DocumentAdapter) -> Dict[str, int]:
        """Number of labels per kind, keyed by kind name."""
        counts: Dict[str, int] = {}
        for entry in self.registry:
            name = self.kind_of(adapter, entry).name
            counts[name] = counts.get(name, 0) + 1
        return counts


def build_graph(adapter: DocumentAdapter, direction: Direction = Direction.DOWNWARD) -> LabelGraph:
    """Discover every label reachable from the document roots.

    Args:
        adapter: Read-only view of the document
        direction: Orientation of the recorded relationship edges

    Returns:
        LabelGraph with a populated registry and relationship recorder
    """
    registry = IdentityRegistry()
    relations = RelationshipRecorder(direction)

    stack: List[Tuple[Any, int]] = [(label, 0) for label in adapter.root_labels()]
    logger.debug("Starting label traversal", roots=len(stack), direction=relations.direction.value)

    while stack:
        label, parent_id = stack.pop()

        label_id, is_new = registry.register_or_lookup(adapter.entry(label), label)
        relations.add_edge(parent_id, label_id)
        if not is_new:
            # Children were scheduled on first discovery
            continue

        referred = adapter.referred_label(label)
        if referred is not None:
            stack.append((referred, label_id))
            continue

        stack.extend((component, label_id) for component in adapter.components(label))
        stack.extend((sub_shape, label_id) for sub_shape in adapter.sub_shapes(label))

    logger.info(
        "Label graph extracted",
        node_count=len(registry),
        edge_count=relations.edge_count,
        direction=relations.direction.value,
    )
    return LabelGraph(registry=registry, relations=relations)
