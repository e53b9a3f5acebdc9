"""Policy layers over the Louvain core: hierarchy cuts and resolution scans."""

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic

from graphkit.community.louvain import check_louvain_input, louvain, louvain_levels
from graphkit.community.modularity import modularity
from graphkit.community.result import CommunityResult
from graphkit.config.options import LouvainOptions
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommunityLevel(Generic[NodeId]):
    """One level of a Louvain hierarchy, expressed on the original nodes."""

    level: int
    partition: dict[NodeId, int]
    modularity: float
    num_communities: int


@dataclass(frozen=True)
class CommunityHierarchy(Generic[NodeId]):
    """Partitions from every aggregation level, finest first."""

    levels: tuple[CommunityLevel[NodeId], ...]
    resolution: float = 1.0

    def select_cut(self, strategy: str | int = "best") -> CommunityLevel[NodeId]:
        """Pick one level of the hierarchy.

        Args:
            strategy: ``"best"`` (highest modularity, finest on ties),
                ``"finest"``, ``"coarsest"``, or an integer level index.

        Raises:
            ValueError: On an unknown strategy name.
            IndexError: On an out-of-range level index.
        """
        if isinstance(strategy, int):
            if not 0 <= strategy < len(self.levels):
                raise IndexError(
                    f"Level {strategy} out of range [0, {len(self.levels)})"
                )
            return self.levels[strategy]
        if strategy == "finest":
            return self.levels[0]
        if strategy == "coarsest":
            return self.levels[-1]
        if strategy == "best":
            return max(self.levels, key=lambda lvl: lvl.modularity)
        raise ValueError(
            f"Unknown cut strategy {strategy!r}; expected 'best', 'finest', "
            f"'coarsest' or a level index"
        )


def hierarchical_louvain(
    graph: Graph[NodeId], options: LouvainOptions | None = None
) -> CommunityHierarchy[NodeId]:
    """Run Louvain and keep the partition produced at every level.

    When no level improves on the all-singleton partition, the hierarchy
    holds that single partition.

    Raises:
        GraphStructureError: Same preconditions as ``louvain``.
    """
    if options is None:
        options = LouvainOptions()
    check_louvain_input(graph, options)

    partitions, _ = louvain_levels(graph, options)
    if not partitions:
        partitions = [{node: i for i, node in enumerate(graph.nodes())}]

    levels = tuple(
        CommunityLevel(
            level=i,
            partition=partition,
            modularity=modularity(graph, partition, options.resolution),
            num_communities=len(set(partition.values())),
        )
        for i, partition in enumerate(partitions)
    )
    log.info(
        "Hierarchy with %d level(s): %s communities",
        len(levels),
        [lvl.num_communities for lvl in levels],
    )
    return CommunityHierarchy(levels=levels, resolution=options.resolution)


@dataclass(frozen=True)
class ResolutionScanEntry(Generic[NodeId]):
    """Louvain result at one resolution plus its standard (gamma=1) modularity."""

    resolution: float
    result: CommunityResult[NodeId]
    standard_modularity: float


@dataclass(frozen=True)
class ResolutionScan(Generic[NodeId]):
    entries: tuple[ResolutionScanEntry[NodeId], ...]

    def best(self) -> ResolutionScanEntry[NodeId]:
        """Entry with the highest gamma=1 modularity (earliest on ties)."""
        if not self.entries:
            raise ValueError("Resolution scan has no entries")
        return max(self.entries, key=lambda entry: entry.standard_modularity)


def resolution_scan(
    graph: Graph[NodeId],
    resolutions: Iterable[float],
    options: LouvainOptions | None = None,
) -> ResolutionScan[NodeId]:
    """Run Louvain once per resolution and score each partition at gamma=1.

    Args:
        graph: Undirected graph.
        resolutions: Resolution values to try, in order.
        options: Base options; ``resolution`` is overridden per run.
    """
    if options is None:
        options = LouvainOptions()
    check_louvain_input(graph, options)

    entries = []
    for gamma in resolutions:
        result = louvain(graph, dataclasses.replace(options, resolution=gamma))
        standard = modularity(graph, result.partition, 1.0)
        log.debug(
            "Resolution %.3f: %d communities, Q(gamma=1)=%.4f",
            gamma,
            result.num_communities,
            standard,
        )
        entries.append(
            ResolutionScanEntry(
                resolution=gamma, result=result, standard_modularity=standard
            )
        )
    return ResolutionScan(entries=tuple(entries))
