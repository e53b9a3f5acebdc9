"""Shared graph type aliases and small immutable records."""

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

# Opaque node identifier: only equality and hashing are relied upon.
NodeId = TypeVar("NodeId", bound=Hashable)

DEFAULT_WEIGHT = 1.0


@dataclass(frozen=True, slots=True)
class Edge(Generic[NodeId]):
    """Immutable (source, target, weight) triple yielded by ``Graph.edges``.

    For undirected graphs the endpoint order is canonical: ``source`` is the
    endpoint inserted into the graph first.
    """

    source: NodeId
    target: NodeId
    weight: float = DEFAULT_WEIGHT
