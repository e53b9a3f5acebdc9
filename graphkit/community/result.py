"""Immutable result record shared by the community-detection algorithms."""

from dataclasses import dataclass
from typing import Generic

from graphkit.community.modularity import group_communities
from graphkit.graph.types import NodeId


@dataclass(frozen=True)
class CommunityResult(Generic[NodeId]):
    """Final partition and summary statistics of a community detection run.

    Attributes:
        partition: Node -> dense community label in 0..num_communities-1.
        modularity: Modularity of partition at the run's resolution.
        num_communities: Number of distinct labels.
        levels: Aggregation levels that changed the partition.
        iterations: Total local-moving (or propagation) passes run.
        resolution: Resolution the partition was optimized for.
    """

    partition: dict[NodeId, int]
    modularity: float
    num_communities: int
    levels: int
    iterations: int
    resolution: float = 1.0

    def communities(self) -> list[list[NodeId]]:
        """Members of each community, indexed by label."""
        return group_communities(self.partition)
