"""Node centrality measures built on power iteration."""

from graphkit.centrality.degree import degree_centrality
from graphkit.centrality.eigenvector import eigenvector_centrality
from graphkit.centrality.katz import katz_centrality
from graphkit.centrality.pagerank import pagerank
from graphkit.centrality.power import (
    CentralityResult,
    ConvergenceStatus,
    PowerIterationState,
    rescale_unit_interval,
)

__all__ = [
    "CentralityResult",
    "ConvergenceStatus",
    "PowerIterationState",
    "degree_centrality",
    "eigenvector_centrality",
    "katz_centrality",
    "pagerank",
    "rescale_unit_interval",
]
