"""Mutable graph store with symmetric undirected and indexed directed adjacency.

The Graph is the source of truth every algorithm reads from. Undirected
edges are mirrored in both endpoints' adjacency maps and every mutation keeps
the mirror in sync. Directed graphs additionally keep an inbound adjacency
map so in-degree and in-neighbor queries are O(1).

Each instance carries a process-unique ``uid`` and a ``version`` counter that
increments on every mutation; together they key the CSR snapshot cache.
"""

import itertools
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Generic

from graphkit.graph.errors import EdgeNotFoundError, NodeNotFoundError
from graphkit.graph.types import DEFAULT_WEIGHT, Edge, NodeId

_uid_counter = itertools.count(1)


class Graph(Generic[NodeId]):
    """Weighted graph with node insertion order preserved.

    Args:
        directed: Whether edges are directed. Fixed for the graph's lifetime.
    """

    def __init__(self, directed: bool = False) -> None:
        self._directed = directed
        self._adj: dict[NodeId, dict[NodeId, float]] = {}
        # For undirected graphs the inbound view is the adjacency itself.
        self._pred: dict[NodeId, dict[NodeId, float]] = (
            {} if directed else self._adj
        )
        self._edge_count = 0
        self._uid = next(_uid_counter)
        self._version = 0

    # ── identity ──────────────────────────────────────────────────────

    @property
    def directed(self) -> bool:
        return self._directed

    @property
    def uid(self) -> int:
        """Process-unique identity, never reused by another Graph."""
        return self._uid

    @property
    def version(self) -> int:
        """Mutation counter; changes whenever nodes or edges change."""
        return self._version

    @property
    def node_count(self) -> int:
        return len(self._adj)

    @property
    def edge_count(self) -> int:
        """Number of edges, counting each undirected edge once."""
        return self._edge_count

    def __len__(self) -> int:
        return len(self._adj)

    def __contains__(self, node: object) -> bool:
        return node in self._adj

    def __repr__(self) -> str:
        kind = "directed" if self._directed else "undirected"
        return (
            f"Graph({kind}, nodes={self.node_count}, "
            f"edges={self.edge_count}, version={self._version})"
        )

    # ── mutation ──────────────────────────────────────────────────────

    def add_node(self, node: NodeId) -> None:
        """Add a node; adding an existing node is a no-op."""
        if node in self._adj:
            return
        self._adj[node] = {}
        if self._directed:
            self._pred[node] = {}
        self._version += 1

    def add_nodes_from(self, nodes: Iterable[NodeId]) -> None:
        for node in nodes:
            self.add_node(node)

    def add_edge(
        self, source: NodeId, target: NodeId, weight: float = DEFAULT_WEIGHT
    ) -> None:
        """Add an edge, creating missing endpoints.

        Re-adding an existing edge overwrites its weight. For undirected
        graphs the mirrored entry is installed in the same call.
        """
        self.add_node(source)
        self.add_node(target)
        weight = float(weight)
        is_new = target not in self._adj[source]
        self._adj[source][target] = weight
        if self._directed:
            self._pred[target][source] = weight
        else:
            self._adj[target][source] = weight
        if is_new:
            self._edge_count += 1
        self._version += 1

    def add_edges_from(
        self, edges: Iterable[tuple[NodeId, NodeId] | tuple[NodeId, NodeId, float]]
    ) -> None:
        for edge in edges:
            self.add_edge(*edge)

    def remove_edge(self, source: NodeId, target: NodeId) -> None:
        """Remove an edge (and its mirror for undirected graphs)."""
        if source not in self._adj:
            raise NodeNotFoundError(source)
        if target not in self._adj:
            raise NodeNotFoundError(target)
        if target not in self._adj[source]:
            raise EdgeNotFoundError(source, target)
        del self._adj[source][target]
        if self._directed:
            del self._pred[target][source]
        elif source != target:
            del self._adj[target][source]
        self._edge_count -= 1
        self._version += 1

    def remove_node(self, node: NodeId) -> None:
        """Remove a node and every edge referencing it."""
        if node not in self._adj:
            raise NodeNotFoundError(node)
        if self._directed:
            for target in self._adj[node]:
                if target != node:
                    del self._pred[target][node]
            for source in self._pred[node]:
                if source != node:
                    del self._adj[source][node]
            removed = len(self._adj[node]) + len(self._pred[node])
            if node in self._adj[node]:
                removed -= 1
            del self._pred[node]
        else:
            for neighbor in self._adj[node]:
                if neighbor != node:
                    del self._adj[neighbor][node]
            removed = len(self._adj[node])
        del self._adj[node]
        self._edge_count -= removed
        self._version += 1

    def copy(self) -> "Graph[NodeId]":
        """Return an independent copy with a fresh uid."""
        clone: Graph[NodeId] = Graph(directed=self._directed)
        clone.add_nodes_from(self._adj)
        for edge in self.edges():
            clone.add_edge(edge.source, edge.target, edge.weight)
        return clone

    # ── queries ───────────────────────────────────────────────────────

    def _require(self, node: NodeId) -> None:
        if node not in self._adj:
            raise NodeNotFoundError(node)

    def has_node(self, node: NodeId) -> bool:
        return node in self._adj

    def has_edge(self, source: NodeId, target: NodeId) -> bool:
        adj = self._adj.get(source)
        return adj is not None and target in adj

    def edge_weight(self, source: NodeId, target: NodeId) -> float:
        """Weight of an existing edge; raises EdgeNotFoundError otherwise."""
        self._require(source)
        self._require(target)
        try:
            return self._adj[source][target]
        except KeyError:
            raise EdgeNotFoundError(source, target) from None

    def adjacency(self, node: NodeId) -> Mapping[NodeId, float]:
        """Read-only view of the outgoing neighbor -> weight map of a node."""
        self._require(node)
        return MappingProxyType(self._adj[node])

    def in_adjacency(self, node: NodeId) -> Mapping[NodeId, float]:
        """Read-only view of the incoming neighbor -> weight map of a node."""
        self._require(node)
        return MappingProxyType(self._pred[node])

    def out_degree(self, node: NodeId) -> int:
        self._require(node)
        return len(self._adj[node])

    def in_degree(self, node: NodeId) -> int:
        self._require(node)
        return len(self._pred[node])

    def degree(self, node: NodeId) -> int:
        """Number of incident adjacency entries (in + out for directed)."""
        self._require(node)
        if self._directed:
            return len(self._adj[node]) + len(self._pred[node])
        return len(self._adj[node])

    def out_neighbors(self, node: NodeId) -> Iterator[NodeId]:
        self._require(node)
        return iter(list(self._adj[node]))

    def in_neighbors(self, node: NodeId) -> Iterator[NodeId]:
        self._require(node)
        return iter(list(self._pred[node]))

    def neighbors(self, node: NodeId) -> Iterator[NodeId]:
        """Outgoing neighbors (all neighbors for undirected graphs)."""
        return self.out_neighbors(node)

    def nodes(self) -> Iterator[NodeId]:
        return iter(list(self._adj))

    def edges(self) -> Iterator[Edge[NodeId]]:
        """Iterate edges; undirected edges appear once in canonical order.

        The canonical endpoint order for an undirected edge puts first the
        endpoint that was inserted into the graph first.
        """
        if self._directed:
            for source, targets in list(self._adj.items()):
                for target, weight in list(targets.items()):
                    yield Edge(source, target, weight)
            return

        emitted: set[NodeId] = set()
        for source, targets in list(self._adj.items()):
            for target, weight in list(targets.items()):
                if target not in emitted:
                    yield Edge(source, target, weight)
            emitted.add(source)


def new_graph(directed: bool = False) -> Graph:
    """Construct an empty graph."""
    return Graph(directed=directed)
