"""Tests for the label graph traversal."""

from __future__ import annotations

from collections import Counter

from structlog.testing import capture_logs

from xdoc.memory import MemoryDocument, MemoryLabel
from xgraph_ir.adapter import LabelFlags
from xgraph_ir.builder import build_graph
from xgraph_ir.schema import Direction

SHAPE = LabelFlags(is_simple_shape=True)
ASSEMBLY = LabelFlags(is_assembly=True)
COMPONENT = LabelFlags(is_component=True)


def _entries(graph) -> list:
    return [entry.entry for entry in graph.registry]


class TestTraversalOrder:
    """Test cases for discovery order and identifiers."""

    def test_single_leaf(self, leaf_document: MemoryDocument):
        graph = build_graph(leaf_document)

        assert graph.node_count == 1
        assert _entries(graph) == ["0:1:1:1"]
        assert graph.relations.pairs() == []

    def test_siblings_visited_in_reverse(self, bolt_assembly_document: MemoryDocument):
        """Test LIFO traversal assigns identifiers to the last sibling first."""
        graph = build_graph(bolt_assembly_document)

        assert _entries(graph) == ["0:1:1:1", "0:1:1:1:2", "0:1:1:1:1"]
        assert graph.relations.edges_for(1) == [2, 3]

    def test_roots_visited_in_reverse(self):
        first = MemoryLabel("0:1:1:1", flags=SHAPE)
        second = MemoryLabel("0:1:1:2", flags=SHAPE)
        graph = build_graph(MemoryDocument("Roots", roots=[first, second]))

        assert _entries(graph) == ["0:1:1:2", "0:1:1:1"]

    def test_components_before_sub_shapes(self):
        """Test sub-shapes are pushed after components and so popped first."""
        component = MemoryLabel("0:1:1:1:1", flags=COMPONENT)
        sub_shape = MemoryLabel("0:1:1:1:2", flags=SHAPE)
        root = MemoryLabel("0:1:1:1", flags=ASSEMBLY, components=[component], sub_shapes=[sub_shape])
        graph = build_graph(MemoryDocument("Mixed", roots=[root]))

        assert _entries(graph) == ["0:1:1:1", "0:1:1:1:2", "0:1:1:1:1"]

    def test_empty_document(self):
        graph = build_graph(MemoryDocument("Empty"))

        assert graph.node_count == 0
        assert graph.relations.edge_count == 0

    def test_identifiers_are_dense(self, shared_document: MemoryDocument):
        """Test every identifier in [1, node_count] maps to a distinct entry."""
        graph = build_graph(shared_document)
        entries = list(graph.registry)

        assert [e.id for e in entries] == list(range(1, graph.node_count + 1))
        assert len({e.entry for e in entries}) == graph.node_count


class TestReferences:
    """Test cases for reference labels."""

    def test_reference_chain(self):
        """Test a chain of references yields one row per link, linked in sequence."""
        target = MemoryLabel("0:1:1:4", flags=SHAPE)
        middle = MemoryLabel("0:1:1:3", ref=target)
        head = MemoryLabel("0:1:1:2", ref=middle)
        graph = build_graph(MemoryDocument("Chain", roots=[head]))

        assert _entries(graph) == ["0:1:1:2", "0:1:1:3", "0:1:1:4"]
        assert graph.relations.pairs() == [(1, 2), (2, 3)]

    def test_reference_children_not_expanded(self):
        """Test components and sub-shapes of a reference label are never visited."""
        target = MemoryLabel("0:1:1:2", flags=SHAPE)
        hidden_component = MemoryLabel("0:1:1:9:1", flags=COMPONENT)
        hidden_sub_shape = MemoryLabel("0:1:1:9:2", flags=SHAPE)
        reference = MemoryLabel(
            "0:1:1:9",
            flags=LabelFlags(is_reference=True),
            ref=target,
            components=[hidden_component],
            sub_shapes=[hidden_sub_shape],
        )
        graph = build_graph(MemoryDocument("Ref", roots=[reference]))

        assert _entries(graph) == ["0:1:1:9", "0:1:1:2"]


class TestSharing:
    """Test cases for labels reached more than once."""

    def test_shared_sub_assembly_registered_once(self, shared_document: MemoryDocument):
        graph = build_graph(shared_document)

        assert _entries(graph) == [
            "0:1:1:1",
            "0:1:1:1:2",
            "0:1:1:2",
            "0:1:1:2:1",
            "0:1:1:3",
            "0:1:1:1:1",
        ]
        sub_assembly = graph.registry.id_of("0:1:1:2")
        parents = [source for source, target in graph.relations.pairs() if target == sub_assembly]
        assert sorted(parents) == [2, 6]

    def test_shared_sub_assembly_upward(self, shared_document: MemoryDocument):
        graph = build_graph(shared_document, Direction.UPWARD)

        assert graph.relations.edges_for(graph.registry.id_of("0:1:1:2")) == [2, 6]

    def test_shared_label_not_expanded_twice(self, shared_document: MemoryDocument):
        """Test the sub-assembly's children appear once even though it is reached twice."""
        graph = build_graph(shared_document)
        leaf = graph.registry.id_of("0:1:1:3")

        assert [pair for pair in graph.relations.pairs() if pair[1] == leaf] == [(4, leaf)]

    def test_repeated_child_keeps_duplicate_edges(self):
        """Test the same child listed twice under one parent records two edges."""
        child = MemoryLabel("0:1:1:1:1", flags=COMPONENT)
        root = MemoryLabel("0:1:1:1", flags=ASSEMBLY, components=[child, child])
        graph = build_graph(MemoryDocument("Twice", roots=[root]))

        assert graph.node_count == 2
        assert graph.relations.edges_for(1) == [2, 2]


class TestDirection:
    """Test cases for the direction mode."""

    def test_direction_reverses_every_edge(self, shared_document: MemoryDocument):
        downward = build_graph(shared_document, Direction.DOWNWARD)
        upward = build_graph(shared_document, Direction.UPWARD)

        assert _entries(downward) == _entries(upward)
        assert Counter(downward.relations.pairs()) == Counter(
            (target, source) for source, target in upward.relations.pairs()
        )
        assert upward.direction is Direction.UPWARD


class TestDeepHierarchy:
    """Test cases for deep nesting."""

    def test_deep_nesting_does_not_recurse(self):
        """Test a hierarchy deeper than the recursion limit is traversed."""
        depth = 5000
        label = MemoryLabel(f"0:1:1:{depth}", flags=SHAPE)
        for level in range(depth - 1, 0, -1):
            label = MemoryLabel(f"0:1:1:{level}", flags=ASSEMBLY, components=[label])

        graph = build_graph(MemoryDocument("Deep", roots=[label]))

        assert graph.node_count == depth
        assert graph.relations.edges_for(depth - 1) == [depth]


def test_kind_counts(shared_document: MemoryDocument):
    graph = build_graph(shared_document)

    assert graph.kind_counts(shared_document) == {"ASSEMBLY": 2, "REFERENCE": 3, "SHAPE": 1}


def test_extraction_logged(shared_document: MemoryDocument):
    with capture_logs() as logs:
        build_graph(shared_document)

    summary = [log for log in logs if log["event"] == "Label graph extracted"]
    assert summary == [
        {
            "event": "Label graph extracted",
            "log_level": "info",
            "node_count": 6,
            "edge_count": 7,
            "direction": "downward",
        }
    ]
