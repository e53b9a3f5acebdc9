"""Katz centrality by fixed-point iteration."""

import logging

import numpy as np

from graphkit.centrality.power import (
    CentralityResult,
    ConvergenceStatus,
    PowerIterationState,
    rescale_unit_interval,
)
from graphkit.config.options import KatzOptions
from graphkit.graph.cache import SnapshotCache, get_snapshot
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId

log = logging.getLogger(__name__)


def katz_centrality(
    graph: Graph[NodeId],
    options: KatzOptions | None = None,
    cache: SnapshotCache | None = None,
) -> CentralityResult[NodeId]:
    """Katz centrality: iterate ``x <- alpha * A^T x + beta`` from x = 0.

    The fixed point counts walks of every length ending at a node, a walk of
    length l weighted by alpha^l, so a larger alpha gives distant nodes more
    influence. The series only converges for alpha < 1 / lambda_max; beyond
    that the run ends with MAX_ITERATIONS_REACHED.

    Returns:
        CentralityResult with raw scores, or min-max rescaled into [0, 1]
        when ``options.normalized`` is set.
    """
    if options is None:
        options = KatzOptions()
    snapshot = get_snapshot(graph, cache)
    nodes = list(snapshot.nodes())
    n = len(nodes)

    transposed = snapshot.to_scipy().T.tocsr()
    x = np.zeros(n, dtype=np.float64)
    state = PowerIterationState(options.max_iterations, options.tolerance)
    if n == 0:
        state.advance(0.0)
    while state.running:
        y = options.alpha * (transposed @ x) + options.beta
        state.advance(np.abs(y - x).max())
        x = y

    if state.status is ConvergenceStatus.MAX_ITERATIONS_REACHED:
        log.warning(
            "Katz centrality did not converge in %d iterations (alpha=%g, delta=%.3g)",
            state.iteration,
            options.alpha,
            state.delta,
        )

    scores = rescale_unit_interval(x) if options.normalized else x
    return CentralityResult(
        scores=dict(zip(nodes, scores.tolist())),
        iterations=state.iteration,
        status=state.status,
        delta=state.delta,
    )
