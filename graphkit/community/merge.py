"""Post-processing that dissolves undersized communities."""

import logging
from collections import Counter
from collections.abc import Mapping

from graphkit.community.modularity import (
    modularity_gain,
    neighbor_community_weights,
    node_weighted_degree,
    renumber_partition,
    total_edge_weight,
    validate_partition,
)
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId

log = logging.getLogger(__name__)


def merge_small_communities(
    graph: Graph[NodeId],
    partition: Mapping[NodeId, int],
    min_size: int,
    resolution: float = 1.0,
) -> dict[NodeId, int]:
    """Move members of communities smaller than min_size to a neighbor community.

    Each member of an undersized community joins the adjacent community with
    the best modularity gain. Members with no neighbor outside their own
    community stay where they are. Sweeps repeat until nothing moves.

    Args:
        graph: Graph the partition covers.
        partition: Node -> community label, total over the graph.
        min_size: Communities with fewer members are dissolved.
        resolution: Resolution used to score candidate moves.

    Returns:
        A new, densely renumbered partition.

    Raises:
        PartitionError: If the partition is not total.
        ValueError: If min_size < 1.
    """
    if min_size < 1:
        raise ValueError(f"min_size must be >= 1, got {min_size}")
    validate_partition(graph, partition)
    nodes = list(graph.nodes())
    labels = dict(partition)
    m = total_edge_weight(graph)
    if min_size == 1 or m <= 0:
        return renumber_partition(labels, nodes)

    degree = {node: node_weighted_degree(graph, node) for node in nodes}
    community_degree: dict[int, float] = {}
    for node in nodes:
        community_degree[labels[node]] = (
            community_degree.get(labels[node], 0.0) + degree[node]
        )
    sizes = Counter(labels.values())

    moved_total = 0
    for _ in range(len(nodes)):
        moved = 0
        for node in nodes:
            current = labels[node]
            if sizes[current] >= min_size:
                continue
            weights = neighbor_community_weights(graph, node, labels)
            weights.pop(current, None)
            if not weights:
                continue
            k = degree[node]
            target = max(
                weights,
                key=lambda label: modularity_gain(
                    weights[label], k, community_degree[label], m, resolution
                ),
            )
            labels[node] = target
            sizes[current] -= 1
            sizes[target] += 1
            community_degree[current] -= k
            community_degree[target] += k
            moved += 1
        moved_total += moved
        if moved == 0:
            break

    log.debug(
        "Merged %d node(s) out of communities below size %d", moved_total, min_size
    )
    return renumber_partition(labels, nodes)
