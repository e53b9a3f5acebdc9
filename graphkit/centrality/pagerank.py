"""PageRank with uniform teleportation."""

import logging

import numpy as np
import scipy.sparse

from graphkit.centrality.power import (
    CentralityResult,
    ConvergenceStatus,
    PowerIterationState,
)
from graphkit.config.options import PageRankOptions
from graphkit.graph.cache import SnapshotCache, get_snapshot
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId

log = logging.getLogger(__name__)


def pagerank(
    graph: Graph[NodeId],
    options: PageRankOptions | None = None,
    cache: SnapshotCache | None = None,
) -> CentralityResult[NodeId]:
    """Stationary distribution of the damped random walk.

    Transition probabilities follow edge weights. Rank held by dangling
    nodes (no out-edges) is spread uniformly over all nodes. Iteration stops
    when the L1 change drops below ``options.tolerance``. Scores sum to 1.
    """
    if options is None:
        options = PageRankOptions()
    snapshot = get_snapshot(graph, cache)
    nodes = list(snapshot.nodes())
    n = len(nodes)
    if n == 0:
        return CentralityResult({}, 0, ConvergenceStatus.CONVERGED, 0.0)

    adjacency = snapshot.to_scipy()
    out_weight = np.asarray(adjacency.sum(axis=1)).ravel()
    dangling = out_weight == 0
    inverse = np.divide(1.0, out_weight, out=np.zeros(n), where=~dangling)
    transition_t = (scipy.sparse.diags(inverse) @ adjacency).T.tocsr()

    d = options.damping
    x = np.full(n, 1.0 / n)
    state = PowerIterationState(options.max_iterations, options.tolerance)
    while state.running:
        y = d * (transition_t @ x) + (d * x[dangling].sum() + 1.0 - d) / n
        state.advance(np.abs(y - x).sum())
        x = y

    if state.status is ConvergenceStatus.MAX_ITERATIONS_REACHED:
        log.warning(
            "PageRank did not converge in %d iterations (delta=%.3g)",
            state.iteration,
            state.delta,
        )
    return CentralityResult(
        scores=dict(zip(nodes, x.tolist())),
        iterations=state.iteration,
        status=state.status,
        delta=state.delta,
    )
