"""Compressed sparse-row snapshot of a Graph for cache-friendly traversal.

The snapshot owns three flat numpy arrays (row pointers, column indices,
weights) plus a bijective node id <-> index table. Columns are sorted
ascending within each row so edge lookups are binary searches. Index order
follows the source graph's node insertion order.

Directed snapshots additionally hold reverse rows (incoming neighbors) for
bottom-up traversal; undirected snapshots share the forward rows because the
adjacency is symmetric.
"""

import logging
from collections.abc import Iterator, Sequence
from typing import Generic

import numpy as np
import scipy.sparse

from graphkit.graph.errors import NodeNotFoundError
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId

log = logging.getLogger(__name__)


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def _build_rows(
    n: int, sources: np.ndarray, targets: np.ndarray, weights: np.ndarray
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Group (source, target, weight) triples into sorted CSR rows.

    Row pointers come from a prefix sum over per-source counts; a lexsort on
    (target, source) orders every row's columns ascending.
    """
    counts = np.bincount(sources, minlength=n)
    row_start = np.zeros(n + 1, dtype=np.int64)
    np.cumsum(counts, out=row_start[1:])

    order = np.lexsort((targets, sources))
    columns = targets[order].astype(np.int32, copy=False)
    sorted_weights = weights[order].astype(np.float64, copy=False)
    return row_start, columns, sorted_weights


class CompactRowGraph(Generic[NodeId]):
    """Immutable CSR view of a graph.

    Use ``CompactRowGraph.from_graph`` rather than the constructor.
    """

    def __init__(
        self,
        index_to_node: Sequence[NodeId],
        row_start: np.ndarray,
        columns: np.ndarray,
        weights: np.ndarray,
        directed: bool,
        in_row_start: np.ndarray | None = None,
        in_columns: np.ndarray | None = None,
        source_uid: int | None = None,
        source_version: int | None = None,
    ) -> None:
        n = len(index_to_node)
        if row_start.shape != (n + 1,):
            raise ValueError(
                f"row_start must have length n+1={n + 1}, got {row_start.shape}"
            )
        if columns.shape != weights.shape:
            raise ValueError(
                f"columns {columns.shape} and weights {weights.shape} "
                f"must be parallel"
            )
        self._index_to_node: tuple[NodeId, ...] = tuple(index_to_node)
        self._node_to_index: dict[NodeId, int] = {
            node: i for i, node in enumerate(self._index_to_node)
        }
        self._row_start = _readonly(row_start)
        self._columns = _readonly(columns)
        self._weights = _readonly(weights)
        self._directed = directed
        if directed:
            if in_row_start is None or in_columns is None:
                raise ValueError("directed snapshots need reverse rows")
            self._in_row_start = _readonly(in_row_start)
            self._in_columns = _readonly(in_columns)
        else:
            self._in_row_start = self._row_start
            self._in_columns = self._columns
        self._out_degrees = _readonly(np.diff(self._row_start))
        self.source_uid = source_uid
        self.source_version = source_version

    @classmethod
    def from_graph(cls, graph: Graph[NodeId]) -> "CompactRowGraph[NodeId]":
        """Snapshot a graph in O(n + m log d).

        Every node is walked once to collect its outgoing adjacency; for
        undirected graphs both directions of each edge are collected, so
        ``edge_count()`` is twice the undirected edge count (a self-loop
        occupies one slot).
        """
        nodes = list(graph.nodes())
        node_to_index = {node: i for i, node in enumerate(nodes)}
        n = len(nodes)

        sources: list[int] = []
        targets: list[int] = []
        weights: list[float] = []
        for i, node in enumerate(nodes):
            for neighbor, weight in graph.adjacency(node).items():
                sources.append(i)
                targets.append(node_to_index[neighbor])
                weights.append(weight)

        src = np.asarray(sources, dtype=np.int64)
        dst = np.asarray(targets, dtype=np.int64)
        w = np.asarray(weights, dtype=np.float64)
        row_start, columns, sorted_weights = _build_rows(n, src, dst, w)

        in_row_start = in_columns = None
        if graph.directed:
            in_row_start, in_columns, _ = _build_rows(n, dst, src, w)

        log.debug(
            "Built CSR snapshot: n=%d, slots=%d, directed=%s",
            n,
            columns.shape[0],
            graph.directed,
        )
        return cls(
            nodes,
            row_start,
            columns,
            sorted_weights,
            directed=graph.directed,
            in_row_start=in_row_start,
            in_columns=in_columns,
            source_uid=graph.uid,
            source_version=graph.version,
        )

    # ── raw arrays ────────────────────────────────────────────────────

    @property
    def row_start(self) -> np.ndarray:
        return self._row_start

    @property
    def columns(self) -> np.ndarray:
        return self._columns

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def directed(self) -> bool:
        return self._directed

    # ── counts and lookups ────────────────────────────────────────────

    def node_count(self) -> int:
        return len(self._index_to_node)

    def edge_count(self) -> int:
        """Number of stored directed slots."""
        return int(self._columns.shape[0])

    def has_node(self, node: NodeId) -> bool:
        return node in self._node_to_index

    def nodes(self) -> Iterator[NodeId]:
        return iter(self._index_to_node)

    def node_to_index(self, node: NodeId) -> int:
        try:
            return self._node_to_index[node]
        except KeyError:
            raise NodeNotFoundError(node, "snapshot") from None

    def index_to_node_id(self, index: int) -> NodeId:
        if not 0 <= index < len(self._index_to_node):
            raise NodeNotFoundError(index, "snapshot index table")
        return self._index_to_node[index]

    def _slot(self, source_index: int, target_index: int) -> int:
        """Position of target in source's row, or -1 (binary search)."""
        start = self._row_start[source_index]
        end = self._row_start[source_index + 1]
        pos = start + int(
            np.searchsorted(self._columns[start:end], target_index)
        )
        if pos < end and self._columns[pos] == target_index:
            return int(pos)
        return -1

    def has_edge(self, source: NodeId, target: NodeId) -> bool:
        i = self._node_to_index.get(source)
        j = self._node_to_index.get(target)
        if i is None or j is None:
            return False
        return self._slot(i, j) >= 0

    def edge_weight(self, source: NodeId, target: NodeId) -> float | None:
        """Weight of source -> target, or None if no such edge."""
        slot = self._slot(self.node_to_index(source), self.node_to_index(target))
        if slot < 0:
            return None
        return float(self._weights[slot])

    # ── neighbors and degrees ─────────────────────────────────────────

    def neighbor_indices(self, index: int) -> np.ndarray:
        """Sorted outgoing neighbor indices of a node (read-only view)."""
        return self._columns[self._row_start[index]:self._row_start[index + 1]]

    def neighbor_weights(self, index: int) -> np.ndarray:
        return self._weights[self._row_start[index]:self._row_start[index + 1]]

    def in_neighbor_indices(self, index: int) -> np.ndarray:
        """Sorted incoming neighbor indices of a node (read-only view)."""
        return self._in_columns[
            self._in_row_start[index]:self._in_row_start[index + 1]
        ]

    def neighbors(self, node: NodeId) -> Iterator[NodeId]:
        for j in self.neighbor_indices(self.node_to_index(node)):
            yield self._index_to_node[j]

    def out_degree(self, node: NodeId) -> int:
        return self.out_degree_by_index(self.node_to_index(node))

    def out_degree_by_index(self, index: int) -> int:
        return int(self._out_degrees[index])

    def out_degrees(self) -> np.ndarray:
        """Vector of out-degrees indexed by node index."""
        return self._out_degrees

    # ── numerical views ───────────────────────────────────────────────

    def to_scipy(self) -> scipy.sparse.csr_matrix:
        """Weighted adjacency as a scipy CSR matrix (row = source)."""
        n = self.node_count()
        return scipy.sparse.csr_matrix(
            (self._weights, self._columns, self._row_start),
            shape=(n, n),
            copy=True,
        )

    def __repr__(self) -> str:
        return (
            f"CompactRowGraph(nodes={self.node_count()}, "
            f"slots={self.edge_count()}, directed={self._directed})"
        )
