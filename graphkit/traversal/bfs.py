"""Breadth-first search entry points on the mutable Graph.

Small graphs are traversed directly with a queue; graphs above
``TraversalOptions.optimize_threshold`` nodes are snapshotted (through the
snapshot cache) and searched with the direction-optimized BFS.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Generic

from graphkit.config.options import TraversalOptions
from graphkit.graph.cache import SnapshotCache, get_snapshot
from graphkit.graph.errors import NodeNotFoundError
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId
from graphkit.traversal.direction import DirectionOptimizedBFS

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraversalResult(Generic[NodeId]):
    """Visit order, BFS level and BFS-tree parent of every reached node."""

    order: tuple[NodeId, ...]
    levels: dict[NodeId, int]
    tree: dict[NodeId, NodeId | None]


def _queue_bfs(graph: Graph[NodeId], start: NodeId) -> TraversalResult[NodeId]:
    levels = {start: 0}
    tree: dict[NodeId, NodeId | None] = {start: None}
    order = [start]
    queue = deque([start])
    while queue:
        node = queue.popleft()
        for neighbor in graph.out_neighbors(node):
            if neighbor not in levels:
                levels[neighbor] = levels[node] + 1
                tree[neighbor] = node
                order.append(neighbor)
                queue.append(neighbor)
    return TraversalResult(order=tuple(order), levels=levels, tree=tree)


def naive_bfs(graph: Graph[NodeId], start: NodeId) -> dict[NodeId, int]:
    """Hop distances from start via a FIFO queue over the Graph itself."""
    if not graph.has_node(start):
        raise NodeNotFoundError(start)
    return _queue_bfs(graph, start).levels


def breadth_first_search(
    graph: Graph[NodeId],
    start: NodeId,
    options: TraversalOptions | None = None,
    cache: SnapshotCache | None = None,
) -> TraversalResult[NodeId]:
    """BFS from start, choosing the implementation by graph size.

    ``order`` lists reached nodes level by level. Within a level the queue
    implementation keeps discovery order while the snapshot implementation
    uses snapshot index order.

    Args:
        graph: Graph to traverse (directed graphs follow out-edges).
        start: Source node.
        options: Traversal options; ``optimize_threshold`` selects the
            implementation.
        cache: Snapshot cache for the optimized path (module default if None).

    Raises:
        NodeNotFoundError: If start is not in the graph.
    """
    if not graph.has_node(start):
        raise NodeNotFoundError(start)
    if options is None:
        options = TraversalOptions()

    if graph.node_count <= options.optimize_threshold:
        return _queue_bfs(graph, start)

    log.debug(
        "Graph has %d nodes (> %d), using direction-optimized BFS",
        graph.node_count,
        options.optimize_threshold,
    )
    snapshot = get_snapshot(graph, cache)
    result = DirectionOptimizedBFS(snapshot, options).search(start)
    order = sorted(
        result.distances,
        key=lambda node: (result.distances[node], snapshot.node_to_index(node)),
    )
    return TraversalResult(
        order=tuple(order), levels=result.distances, tree=result.parents
    )


def shortest_path_bfs(
    graph: Graph[NodeId], source: NodeId, target: NodeId
) -> list[NodeId] | None:
    """Fewest-hop path from source to target, or None if unreachable."""
    for node in (source, target):
        if not graph.has_node(node):
            raise NodeNotFoundError(node)
    if source == target:
        return [source]

    parents: dict[NodeId, NodeId] = {source: source}
    queue = deque([source])
    while queue:
        node = queue.popleft()
        for neighbor in graph.out_neighbors(node):
            if neighbor in parents:
                continue
            parents[neighbor] = node
            if neighbor == target:
                path = [target]
                step = node
                while step != source:
                    path.append(step)
                    step = parents[step]
                path.append(source)
                path.reverse()
                return path
            queue.append(neighbor)
    return None


def bfs_path_counts(graph: Graph[NodeId], source: NodeId) -> dict[NodeId, int]:
    """Number of distinct shortest paths from source to every reached node."""
    if not graph.has_node(source):
        raise NodeNotFoundError(source)
    levels = {source: 0}
    counts = {source: 1}
    queue = deque([source])
    while queue:
        node = queue.popleft()
        for neighbor in graph.out_neighbors(node):
            if neighbor not in levels:
                levels[neighbor] = levels[node] + 1
                counts[neighbor] = 0
                queue.append(neighbor)
            if levels[neighbor] == levels[node] + 1:
                counts[neighbor] += counts[node]
    return counts
