"""Eigenvector centrality by power iteration."""

import logging
from collections.abc import Mapping

import numpy as np
import scipy.sparse

from graphkit.centrality.power import (
    CentralityResult,
    ConvergenceStatus,
    PowerIterationState,
    rescale_unit_interval,
)
from graphkit.config.options import CentralityOptions
from graphkit.graph.cache import SnapshotCache, get_snapshot
from graphkit.graph.errors import NodeNotFoundError
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId

log = logging.getLogger(__name__)


def eigenvector_centrality(
    graph: Graph[NodeId],
    options: CentralityOptions | None = None,
    initial: Mapping[NodeId, float] | None = None,
    cache: SnapshotCache | None = None,
) -> CentralityResult[NodeId]:
    """Dominant-eigenvector centrality of the adjacency matrix.

    Each iteration computes ``x <- A^T x``, so a node takes the sum of its
    in-neighbors' previous values, then L2-normalizes. With
    ``options.shift`` set the iteration runs on ``(A + I)^T`` instead, which
    keeps the dominant eigenvector but stops the iterate from oscillating on
    bipartite graphs. Iteration stops when the largest per-node change drops
    below ``options.tolerance`` or after ``options.max_iterations``
    iterations. For directed graphs a node scores
    by the centrality of nodes pointing at it.

    Graphs without edges, start vectors with zero norm, and iterates that
    reach zero (e.g. on a directed acyclic graph) yield all-zero scores with
    status CONVERGED.

    Args:
        graph: Graph to score. Not modified.
        options: Iteration bounds and output normalization.
        initial: Optional start vector; nodes it omits start at 0.
        cache: Snapshot cache (module default if None).

    Raises:
        NodeNotFoundError: If initial names a node absent from the graph.
    """
    if options is None:
        options = CentralityOptions()
    snapshot = get_snapshot(graph, cache)
    nodes = list(snapshot.nodes())
    n = len(nodes)

    if initial is None:
        x = np.ones(n, dtype=np.float64)
    else:
        x = np.zeros(n, dtype=np.float64)
        for node, value in initial.items():
            if not snapshot.has_node(node):
                raise NodeNotFoundError(node)
            x[snapshot.node_to_index(node)] = value

    norm = np.linalg.norm(x)
    if snapshot.edge_count() == 0 or norm == 0:
        log.debug("Eigenvector centrality on an edgeless graph or zero vector")
        return CentralityResult(
            scores={node: 0.0 for node in nodes},
            iterations=0,
            status=ConvergenceStatus.CONVERGED,
            delta=0.0,
        )
    x /= norm

    adjacency = snapshot.to_scipy()
    if options.shift:
        adjacency = adjacency + scipy.sparse.identity(n, format="csr")
    transposed = adjacency.T.tocsr()
    state = PowerIterationState(options.max_iterations, options.tolerance)
    while state.running:
        y = transposed @ x
        norm = np.linalg.norm(y)
        if norm == 0:
            x = np.zeros(n, dtype=np.float64)
            state.advance(0.0)
            break
        y /= norm
        state.advance(np.abs(y - x).max())
        x = y

    if state.status is ConvergenceStatus.MAX_ITERATIONS_REACHED:
        log.warning(
            "Eigenvector centrality did not converge in %d iterations (delta=%.3g)",
            state.iteration,
            state.delta,
        )
    else:
        log.debug(
            "Eigenvector centrality converged after %d iterations", state.iteration
        )

    scores = rescale_unit_interval(x) if options.normalized else x
    return CentralityResult(
        scores=dict(zip(nodes, scores.tolist())),
        iterations=state.iteration,
        status=state.status,
        delta=state.delta,
    )
