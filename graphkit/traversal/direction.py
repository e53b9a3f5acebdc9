"""Direction-optimized breadth-first search over a CSR snapshot.

Implements the Beamer et al. (2012) hybrid: each level is expanded either
top-down (scan the out-rows of every frontier node) or bottom-up (scan the
in-rows of every unvisited node until a frontier parent is found), chosen by
a cost model over frontier and unvisited edge counts.

Both expansions assign the lowest-index frontier predecessor as parent, so
the resulting distance and parent maps do not depend on which strategy ran
at any level.
"""

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic

import numpy as np

from graphkit.bitpacked import CompactDistanceArray, GraphBitSet, VisitedBitArray
from graphkit.config.options import TraversalOptions
from graphkit.graph.csr import CompactRowGraph
from graphkit.graph.types import NodeId

log = logging.getLogger(__name__)


class TraversalDirection(enum.Enum):
    TOP_DOWN = "top_down"
    BOTTOM_UP = "bottom_up"


@dataclass(frozen=True)
class BFSResult(Generic[NodeId]):
    """Outcome of a (multi-)source breadth-first search.

    Attributes:
        distances: Hop count from the nearest source, reached nodes only.
        parents: BFS-tree parent of each reached node; None for sources.
        visited_count: Number of reached nodes including the sources.
        directions: Expansion strategy used at each level, in level order.
    """

    distances: dict[NodeId, int]
    parents: dict[NodeId, NodeId | None]
    visited_count: int
    directions: tuple[TraversalDirection, ...]


class DirectionOptimizedBFS(Generic[NodeId]):
    """Hybrid top-down / bottom-up BFS bound to one snapshot.

    Args:
        csr: Snapshot to traverse. Directed snapshots must carry reverse rows.
        options: Switching parameters; defaults to alpha=15, beta=20.
        force: Pin every level to one strategy (for testing and benchmarks).
    """

    def __init__(
        self,
        csr: CompactRowGraph[NodeId],
        options: TraversalOptions | None = None,
        force: TraversalDirection | None = None,
    ) -> None:
        self.csr = csr
        self.options = options if options is not None else TraversalOptions()
        self.force = force

    def search(self, source: NodeId) -> BFSResult[NodeId]:
        return self.search_multiple([source])

    def search_multiple(self, sources: Iterable[NodeId]) -> BFSResult[NodeId]:
        """Run one BFS seeded from every source at distance 0.

        Raises:
            NodeNotFoundError: If any source is absent from the snapshot.
        """
        csr = self.csr
        n = csr.node_count()
        source_indices = sorted({csr.node_to_index(s) for s in sources})

        visited = VisitedBitArray(n)
        distance = CompactDistanceArray(n)
        parent = np.full(n, -1, dtype=np.int64)
        frontier = GraphBitSet(n)
        next_frontier = GraphBitSet(n)
        degrees = csr.out_degrees()

        for index in source_indices:
            visited.set(index)
            distance.set(index, 0)
            frontier.add(index)
        unvisited_edges = int(degrees.sum()) - int(degrees[source_indices].sum())

        direction = TraversalDirection.TOP_DOWN
        directions: list[TraversalDirection] = []
        level = 0
        while not frontier.is_empty():
            frontier_indices = frontier.to_array()
            frontier_edges = int(degrees[frontier_indices].sum())
            direction = self._next_direction(
                direction, frontier_edges, unvisited_edges, len(frontier), n
            )
            log.debug(
                "Level %d: %s (frontier=%d, frontier_edges=%d, unvisited_edges=%d)",
                level,
                direction.value,
                len(frontier),
                frontier_edges,
                unvisited_edges,
            )
            if direction is TraversalDirection.TOP_DOWN:
                self._top_down_step(frontier_indices, visited, parent, next_frontier)
            else:
                self._bottom_up_step(frontier, visited, parent, next_frontier)
            directions.append(direction)

            level += 1
            discovered = next_frontier.to_array()
            if discovered.size:
                distance.set_many(discovered, level)
                unvisited_edges -= int(degrees[discovered].sum())
            frontier.swap(next_frontier)
            next_frontier.clear()

        distances: dict[NodeId, int] = {}
        parents: dict[NodeId, NodeId | None] = {}
        for index in visited.set_indices().tolist():
            node = csr.index_to_node_id(index)
            distances[node] = distance.get(index)
            p = int(parent[index])
            parents[node] = None if p < 0 else csr.index_to_node_id(p)

        return BFSResult(
            distances=distances,
            parents=parents,
            visited_count=len(distances),
            directions=tuple(directions),
        )

    def _next_direction(
        self,
        current: TraversalDirection,
        frontier_edges: int,
        unvisited_edges: int,
        frontier_size: int,
        n: int,
    ) -> TraversalDirection:
        if self.force is not None:
            return self.force
        if current is TraversalDirection.TOP_DOWN:
            if frontier_edges * self.options.alpha < unvisited_edges:
                return TraversalDirection.TOP_DOWN
            return TraversalDirection.BOTTOM_UP
        if frontier_size * self.options.beta < n:
            return TraversalDirection.TOP_DOWN
        return TraversalDirection.BOTTOM_UP

    def _top_down_step(
        self,
        frontier_indices: np.ndarray,
        visited: VisitedBitArray,
        parent: np.ndarray,
        next_frontier: GraphBitSet,
    ) -> None:
        # Ascending frontier order: the first claim is the lowest-index parent.
        for u in frontier_indices.tolist():
            for v in self.csr.neighbor_indices(u).tolist():
                if not visited.get(v):
                    visited.set(v)
                    parent[v] = u
                    next_frontier.add(v)

    def _bottom_up_step(
        self,
        frontier: GraphBitSet,
        visited: VisitedBitArray,
        parent: np.ndarray,
        next_frontier: GraphBitSet,
    ) -> None:
        unvisited = np.flatnonzero(~visited.to_mask())
        for v in unvisited.tolist():
            for u in self.csr.in_neighbor_indices(v).tolist():
                if frontier.contains(u):
                    visited.set(v)
                    parent[v] = u
                    next_frontier.add(v)
                    break


def top_down_bfs(
    csr: CompactRowGraph[NodeId], sources: Iterable[NodeId]
) -> BFSResult[NodeId]:
    """Level-synchronous top-down BFS with plain Python containers.

    Reference implementation for the hybrid search: same canonical parent
    rule, no bit-packed state, no direction switching.
    """
    source_indices = sorted({csr.node_to_index(s) for s in sources})
    dist = {i: 0 for i in source_indices}
    par: dict[int, int] = {}
    frontier = source_indices
    levels = 0
    while frontier:
        discovered: list[int] = []
        for u in frontier:
            for v in csr.neighbor_indices(u).tolist():
                if v not in dist:
                    dist[v] = dist[u] + 1
                    par[v] = u
                    discovered.append(v)
        frontier = sorted(discovered)
        levels += 1

    distances = {csr.index_to_node_id(i): d for i, d in dist.items()}
    parents = {
        csr.index_to_node_id(i): (
            csr.index_to_node_id(par[i]) if i in par else None
        )
        for i in dist
    }
    return BFSResult(
        distances=distances,
        parents=parents,
        visited_count=len(distances),
        directions=(TraversalDirection.TOP_DOWN,) * levels,
    )
