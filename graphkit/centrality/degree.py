"""Degree centrality."""

from graphkit.centrality.power import CentralityResult, ConvergenceStatus
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId


def degree_centrality(
    graph: Graph[NodeId], normalized: bool = True
) -> CentralityResult[NodeId]:
    """Unweighted degree of every node.

    When normalized, degrees are divided by the largest loop-free degree
    possible: n - 1, or 2(n - 1) for directed graphs where in- and
    out-degree both count.
    """
    n = graph.node_count
    max_degree = (2 if graph.directed else 1) * (n - 1)
    scale = 1.0 / max_degree if normalized and max_degree > 0 else 1.0
    scores = {node: graph.degree(node) * scale for node in graph.nodes()}
    return CentralityResult(
        scores=scores, iterations=0, status=ConvergenceStatus.CONVERGED, delta=0.0
    )
