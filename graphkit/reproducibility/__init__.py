"""Reproducibility infrastructure: seeded random generators."""

from graphkit.reproducibility.seed import derive_seed, make_rng, verify_seed_determinism

__all__ = [
    "derive_seed",
    "make_rng",
    "verify_seed_determinism",
]
