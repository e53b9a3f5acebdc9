"""Shared machinery for power-iteration centralities.

A ``PowerIterationState`` is the bounded loop's state machine:
``RUNNING -> CONVERGED | MAX_ITERATIONS_REACHED``. Solvers call
``advance(delta)`` once per iteration and stop as soon as the status leaves
RUNNING.
"""

import enum
from dataclasses import dataclass
from typing import Generic

import numpy as np

from graphkit.graph.types import NodeId


class ConvergenceStatus(enum.Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


@dataclass(slots=True)
class PowerIterationState:
    """Iteration counter, last delta and convergence status of one solve."""

    max_iterations: int
    tolerance: float
    iteration: int = 0
    delta: float = float("inf")
    status: ConvergenceStatus = ConvergenceStatus.RUNNING

    def advance(self, delta: float) -> ConvergenceStatus:
        """Record one completed iteration with the given change and update status.

        Convergence is checked before the iteration bound, so an iteration
        that both converges and exhausts the budget counts as converged.
        """
        if self.status is not ConvergenceStatus.RUNNING:
            raise RuntimeError(f"Cannot advance a finished solve ({self.status.value})")
        self.iteration += 1
        self.delta = float(delta)
        if self.delta < self.tolerance:
            self.status = ConvergenceStatus.CONVERGED
        elif self.iteration >= self.max_iterations:
            self.status = ConvergenceStatus.MAX_ITERATIONS_REACHED
        return self.status

    @property
    def running(self) -> bool:
        return self.status is ConvergenceStatus.RUNNING


def rescale_unit_interval(values: np.ndarray) -> np.ndarray:
    """Min-max rescale into [0, 1].

    If every value is equal the result is all ones when that value is
    positive, all zeros otherwise.
    """
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        return values.copy()
    lo, hi = float(values.min()), float(values.max())
    if hi == lo:
        return np.full_like(values, 1.0 if hi > 0 else 0.0)
    return (values - lo) / (hi - lo)


@dataclass(frozen=True)
class CentralityResult(Generic[NodeId]):
    """Centrality scores with convergence metadata.

    Attributes:
        scores: Node -> non-negative score for every node.
        iterations: Iterations run (0 for closed-form measures).
        status: Terminal convergence status.
        delta: Change measured at the last iteration.
    """

    scores: dict[NodeId, float]
    iterations: int
    status: ConvergenceStatus
    delta: float

    @property
    def converged(self) -> bool:
        return self.status is ConvergenceStatus.CONVERGED
