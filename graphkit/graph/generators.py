"""Planted-partition graph generator with optional degree correction and retry.

Implements an undirected stochastic block model (optionally degree-corrected,
Karrer & Newman 2011) that produces a Graph with known ground-truth
communities. Used by run_analysis.py and by the community-detection tests.
"""

import logging
from dataclasses import dataclass

import numpy as np
import scipy.sparse
from scipy.sparse.csgraph import connected_components

from graphkit.config.options import GeneratorConfig
from graphkit.graph.degree_correction import sample_theta
from graphkit.graph.errors import GraphGenerationError
from graphkit.graph.graph import Graph
from graphkit.reproducibility.seed import make_rng

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlantedGraph:
    """Generated graph plus its planted block structure and provenance.

    Omits slots=True since numpy arrays don't interact well with __slots__.
    """

    graph: Graph  # undirected, integer node ids 0..n-1
    block_assignments: np.ndarray  # int array of length n, node -> block
    theta: np.ndarray  # degree propensities (all ones without correction)
    generation_seed: int  # seed used for the successful attempt
    attempt: int  # which retry attempt produced this graph (0-indexed)


def block_sizes(n: int, K: int) -> list[int]:
    """Split n nodes into K contiguous blocks whose sizes differ by at most one."""
    base, extra = divmod(n, K)
    return [base + 1 if b < extra else base for b in range(K)]


def build_probability_matrix(
    blocks: np.ndarray, p_in: float, p_out: float, theta: np.ndarray
) -> np.ndarray:
    """Build the edge probability matrix P[i,j] = theta_i theta_j omega(b_i, b_j).

    Args:
        blocks: Node -> block assignment of shape (n,).
        p_in: In-block edge probability.
        p_out: Cross-block edge probability.
        theta: Degree propensities of shape (n,).

    Returns:
        Symmetric matrix of shape (n, n) with values in [0, 1] and a zero
        diagonal.
    """
    same_block = blocks[:, None] == blocks[None, :]
    P = np.where(same_block, p_in, p_out) * np.outer(theta, theta)
    # Degree correction can push above 1 for high-theta nodes
    np.clip(P, 0.0, 1.0, out=P)
    np.fill_diagonal(P, 0.0)
    return P


def sample_adjacency(
    P: np.ndarray, rng: np.random.Generator
) -> scipy.sparse.csr_matrix:
    """Sample a symmetric 0/1 adjacency matrix from P (upper triangle, mirrored)."""
    n = P.shape[0]
    upper = np.triu(rng.random((n, n)) < P, k=1)
    edges = (upper | upper.T).astype(np.float64)
    return scipy.sparse.csr_matrix(edges)


def validate_planted(adj: scipy.sparse.csr_matrix, blocks: np.ndarray) -> list[str]:
    """Validate a sampled adjacency matrix.

    Checks (cheapest first):
    1. No isolated nodes
    2. Connectivity
    3. Every block has at least one internal edge

    Returns:
        List of error strings (empty = valid graph).
    """
    errors: list[str] = []

    degrees = np.asarray(adj.sum(axis=1)).ravel()
    isolated = int((degrees == 0).sum())
    if isolated:
        errors.append(f"{isolated} isolated nodes")

    n_components, _ = connected_components(adj, directed=False)
    if n_components != 1:
        errors.append(f"Not connected: {n_components} components found")

    coo = adj.tocoo()
    internal = blocks[coo.row] == blocks[coo.col]
    blocks_with_edges = set(blocks[coo.row[internal]].tolist())
    empty = sorted(set(blocks.tolist()) - blocks_with_edges)
    if empty:
        errors.append(f"Blocks without internal edges: {empty}")

    return errors


def generate_planted_partition(
    config: GeneratorConfig, seed: int, max_retries: int = 10
) -> PlantedGraph:
    """Generate a valid connected planted-partition graph.

    Pipeline per attempt:
    1. Sample degree propensities (Zipf alpha=1.0) if enabled
    2. Build probability matrix
    3. Sample edges via Bernoulli draws
    4. Validate (isolated nodes, connectivity, internal edges)
    5. Retry with incremented seed on failure

    Raises:
        GraphGenerationError: If no valid graph produced after max_retries.
    """
    sizes = block_sizes(config.n, config.K)
    blocks = np.repeat(np.arange(config.K), sizes)
    last_errors: list[str] = []

    for attempt in range(max_retries):
        rng = make_rng(seed + attempt)

        if config.degree_correction:
            theta = sample_theta(sizes, 1.0, rng)
        else:
            theta = np.ones(config.n, dtype=np.float64)
        P = build_probability_matrix(blocks, config.p_in, config.p_out, theta)
        adj = sample_adjacency(P, rng)

        errors = validate_planted(adj, blocks)
        if not errors:
            graph: Graph[int] = Graph(directed=False)
            graph.add_nodes_from(range(config.n))
            coo = scipy.sparse.triu(adj, k=1).tocoo()
            for i, j in zip(coo.row.tolist(), coo.col.tolist()):
                graph.add_edge(i, j)
            log.info(
                "Planted partition generated on attempt %d (n=%d, K=%d, edges=%d)",
                attempt,
                config.n,
                config.K,
                graph.edge_count,
            )
            return PlantedGraph(
                graph=graph,
                block_assignments=blocks,
                theta=theta,
                generation_seed=seed + attempt,
                attempt=attempt,
            )

        last_errors = errors
        log.warning(
            "Planted partition attempt %d failed: %s",
            attempt,
            "; ".join(errors),
        )

    raise GraphGenerationError(
        f"Failed to generate valid graph after {max_retries} attempts. "
        f"Last errors: {'; '.join(last_errors)}"
    )
