"""Structural graph queries: union-find, connected components, spanning trees."""

from graphkit.structure.components import (
    component_of,
    connected_components,
    is_connected,
    largest_connected_component,
)
from graphkit.structure.spanning_tree import SpanningTreeResult, minimum_spanning_tree
from graphkit.structure.union_find import UnionFind

__all__ = [
    "SpanningTreeResult",
    "UnionFind",
    "component_of",
    "connected_components",
    "is_connected",
    "largest_connected_component",
    "minimum_spanning_tree",
]
