"""Breadth-first traversal: direction-optimized BFS and queue-based variants."""

from graphkit.traversal.bfs import (
    TraversalResult,
    bfs_path_counts,
    breadth_first_search,
    naive_bfs,
    shortest_path_bfs,
)
from graphkit.traversal.direction import (
    BFSResult,
    DirectionOptimizedBFS,
    TraversalDirection,
    top_down_bfs,
)

__all__ = [
    "BFSResult",
    "DirectionOptimizedBFS",
    "TraversalDirection",
    "TraversalResult",
    "bfs_path_counts",
    "breadth_first_search",
    "naive_bfs",
    "shortest_path_bfs",
    "top_down_bfs",
]
