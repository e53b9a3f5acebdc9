"""Minimum spanning tree (Kruskal)."""

import logging
from dataclasses import dataclass
from typing import Generic

from graphkit.graph.errors import GraphStructureError
from graphkit.graph.graph import Graph
from graphkit.graph.types import Edge, NodeId
from graphkit.structure.union_find import UnionFind

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpanningTreeResult(Generic[NodeId]):
    """Edges selected by Kruskal's algorithm and their summed weight.

    For a disconnected graph the edges form a spanning forest with
    ``node_count - component_count`` edges.
    """

    edges: tuple[Edge[NodeId], ...]
    total_weight: float


def minimum_spanning_tree(graph: Graph[NodeId]) -> SpanningTreeResult[NodeId]:
    """Kruskal's algorithm on an undirected weighted graph.

    Edges are taken in ascending weight; equal weights keep ``Graph.edges``
    order (stable sort). Self-loops never join the tree.

    Raises:
        GraphStructureError: If the graph is directed.
    """
    if graph.directed:
        raise GraphStructureError("minimum_spanning_tree requires an undirected graph")

    forest: UnionFind[NodeId] = UnionFind(graph.nodes())
    selected: list[Edge[NodeId]] = []
    target_size = graph.node_count - 1
    for edge in sorted(graph.edges(), key=lambda e: e.weight):
        if len(selected) == target_size:
            break
        if forest.union(edge.source, edge.target):
            selected.append(edge)

    total = sum(edge.weight for edge in selected)
    log.debug(
        "Spanning forest: %d edges, total weight %.4f, %d component(s)",
        len(selected),
        total,
        forest.set_count,
    )
    return SpanningTreeResult(edges=tuple(selected), total_weight=total)
