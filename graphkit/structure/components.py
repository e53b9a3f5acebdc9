"""Connected-component queries."""

import logging

from scipy.sparse.csgraph import connected_components as _scipy_components

from graphkit.graph.cache import SnapshotCache, get_snapshot
from graphkit.graph.errors import GraphStructureError, NodeNotFoundError
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId
from graphkit.structure.union_find import UnionFind

log = logging.getLogger(__name__)


def _require_undirected(graph: Graph, algorithm: str) -> None:
    if graph.directed:
        raise GraphStructureError(f"{algorithm} requires an undirected graph")


def connected_components(graph: Graph[NodeId]) -> list[list[NodeId]]:
    """Components of an undirected graph via union-find.

    Each component lists its nodes in insertion order; components are
    ordered by their earliest-inserted node.

    Raises:
        GraphStructureError: If the graph is directed.
    """
    _require_undirected(graph, "connected_components")
    forest: UnionFind[NodeId] = UnionFind(graph.nodes())
    for edge in graph.edges():
        forest.union(edge.source, edge.target)
    return forest.components()


def component_of(graph: Graph[NodeId], node: NodeId) -> list[NodeId]:
    """The component containing node, in insertion order."""
    if not graph.has_node(node):
        raise NodeNotFoundError(node)
    for component in connected_components(graph):
        if node in component:
            return component
    raise AssertionError("unreachable: every node belongs to a component")


def largest_connected_component(graph: Graph[NodeId]) -> list[NodeId]:
    """Largest component (earliest on ties); empty for an empty graph."""
    components = connected_components(graph)
    if not components:
        return []
    return max(components, key=len)


def is_connected(graph: Graph, cache: SnapshotCache | None = None) -> bool:
    """Whether the graph has at most one (weakly) connected component.

    Uses scipy's component labelling on the cached CSR snapshot; directed
    graphs are tested for weak connectivity.
    """
    if graph.node_count <= 1:
        return True
    snapshot = get_snapshot(graph, cache)
    n_components, _ = _scipy_components(
        snapshot.to_scipy(), directed=graph.directed, connection="weak"
    )
    log.debug("Graph has %d connected component(s)", n_components)
    return n_components == 1
