"""XGraph label graph extraction package.

This package provides the traversal, identifier registries and exchange file
encoder that turn a hierarchical CAD document into a deterministic dump.
"""

from .adapter import DocumentAdapter, LabelFlags
from .attributes import AttributeDeduplicator
from .builder import LabelGraph, build_graph
from .encoder import OutputUnavailableError, dump_exchange, encode_graph
from .registry import IdentityRegistry, RegistryConsistencyError
from .relations import RelationshipRecorder
from .schema import Direction, NodeKind, classify

__version__ = "0.1.0"
__all__ = [
    "DocumentAdapter", "LabelFlags", "NodeKind", "Direction", "classify",
    "IdentityRegistry", "RegistryConsistencyError", "RelationshipRecorder",
    "LabelGraph", "build_graph", "AttributeDeduplicator",
    "encode_graph", "dump_exchange", "OutputUnavailableError",
]
