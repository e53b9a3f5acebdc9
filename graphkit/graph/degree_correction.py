"""Degree correction parameter sampling following Zipf's law (Karrer & Newman 2011)."""

import numpy as np


def sample_theta(
    block_sizes: list[int], alpha: float, rng: np.random.Generator
) -> np.ndarray:
    """Sample per-node degree propensities from a Zipf (power-law) distribution.

    Within each block theta_i is proportional to 1/rank^alpha with ranks
    randomly assigned to the block's nodes, then normalized so each block's
    theta values sum to the block size. This keeps the expected total degree
    of the uncorrected model while making degrees heterogeneous.

    Args:
        block_sizes: Number of nodes in each block, in node order.
        alpha: Power-law exponent (1.0 = classic Zipf).
        rng: numpy random Generator for reproducibility.

    Returns:
        Array of shape (sum(block_sizes),) with per-node propensities.
    """
    n = int(sum(block_sizes))
    theta = np.zeros(n, dtype=np.float64)

    start = 0
    for size in block_sizes:
        end = start + size
        ranks = np.arange(1, size + 1, dtype=np.float64)
        raw = 1.0 / (ranks**alpha)
        # Randomize which node gets which rank
        rng.shuffle(raw)
        theta[start:end] = raw * (size / raw.sum())
        start = end

    return theta
