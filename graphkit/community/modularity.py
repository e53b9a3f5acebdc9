"""Modularity scoring and neighbor-community utilities.

Every community algorithm scores partitions and evaluates local moves
through this module. Quantities are defined in adjacency space: ``A_ij`` is
the stored weight of i -> j, a self-loop contributes its weight once, and for
undirected graphs ``2M = sum_i k_i`` where ``k_i = sum_j A_ij``. Under these
conventions the aggregation step of Louvain (intra-community weight becomes
a single self-loop) leaves modularity unchanged.
"""

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass

from graphkit.graph.errors import PartitionError
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId


@dataclass(slots=True)
class CommunityAggregate:
    """Running per-community sums.

    ``internal`` sums A_ij over ordered member pairs (an undirected edge
    inside the community counts twice, a self-loop once). ``total`` is the
    summed weighted degree; for directed graphs it splits into
    ``out_total`` + ``in_total``.
    """

    internal: float = 0.0
    total: float = 0.0
    out_total: float = 0.0
    in_total: float = 0.0


def total_edge_weight(graph: Graph) -> float:
    """M: sum of adjacency weights, halved for undirected graphs."""
    adjacency_sum = sum(
        sum(graph.adjacency(node).values()) for node in graph.nodes()
    )
    if graph.directed:
        return adjacency_sum
    return adjacency_sum / 2.0


def node_weighted_degree(graph: Graph[NodeId], node: NodeId) -> float:
    """Sum of incident adjacency weights (out + in for directed graphs)."""
    degree = sum(graph.adjacency(node).values())
    if graph.directed:
        degree += sum(graph.in_adjacency(node).values())
    return degree


def neighbor_community_weights(
    graph: Graph[NodeId], node: NodeId, partition: Mapping[NodeId, int]
) -> dict[int, float]:
    """Summed edge weight from node to each adjacent community.

    Keys appear in neighbor encounter order, which callers use for
    tie-breaking. Self-loops are excluded. Directed graphs combine out- and
    in-edges.
    """
    weights: dict[int, float] = {}
    adjacencies = [graph.adjacency(node)]
    if graph.directed:
        adjacencies.append(graph.in_adjacency(node))
    for adjacency in adjacencies:
        for neighbor, weight in adjacency.items():
            if neighbor == node:
                continue
            label = partition[neighbor]
            weights[label] = weights.get(label, 0.0) + weight
    return weights


def neighbor_communities(
    graph: Graph[NodeId], node: NodeId, partition: Mapping[NodeId, int]
) -> set[int]:
    """Labels among node's neighbors; own label only if a neighbor shares it."""
    return set(neighbor_community_weights(graph, node, partition))


def community_aggregates(
    graph: Graph[NodeId], partition: Mapping[NodeId, int]
) -> dict[int, CommunityAggregate]:
    """Internal weight and total degree of every community in one edge pass."""
    aggregates: dict[int, CommunityAggregate] = {}
    for node in graph.nodes():
        label = partition[node]
        agg = aggregates.get(label)
        if agg is None:
            agg = aggregates[label] = CommunityAggregate()
        out_weight = 0.0
        for neighbor, weight in graph.adjacency(node).items():
            out_weight += weight
            if partition[neighbor] == label:
                agg.internal += weight
        in_weight = (
            sum(graph.in_adjacency(node).values()) if graph.directed else out_weight
        )
        agg.out_total += out_weight
        agg.in_total += in_weight
        agg.total += out_weight + in_weight if graph.directed else out_weight
    return aggregates


def validate_partition(graph: Graph[NodeId], partition: Mapping[NodeId, int]) -> None:
    """Check that partition assigns exactly the graph's nodes a label >= 0.

    Raises:
        PartitionError: On a missing node, an unknown node, or a negative label.
    """
    missing = [node for node in graph.nodes() if node not in partition]
    if missing:
        raise PartitionError(
            f"Partition is not total: {len(missing)} node(s) unassigned, "
            f"e.g. {missing[0]!r}"
        )
    if len(partition) != graph.node_count:
        extra = next(node for node in partition if not graph.has_node(node))
        raise PartitionError(f"Partition assigns node {extra!r} absent from graph")
    negative = [label for label in partition.values() if label < 0]
    if negative:
        raise PartitionError(f"Community labels must be >= 0, got {negative[0]}")


def modularity(
    graph: Graph[NodeId], partition: Mapping[NodeId, int], resolution: float = 1.0
) -> float:
    """Newman modularity of a partition.

    Undirected: ``Q = sum_c [in_c / 2M - resolution * (tot_c / 2M)^2]``.
    Directed (Leicht-Newman): ``Q = sum_c [in_c / M - resolution *
    out_c * in_c / M^2]``.

    Args:
        graph: Graph the partition covers.
        partition: Node -> community label, total over the graph.
        resolution: Gamma; higher values favor smaller communities.

    Returns:
        The modularity score, or 0.0 for an edgeless graph.

    Raises:
        PartitionError: If the partition is not total.
    """
    validate_partition(graph, partition)
    m = total_edge_weight(graph)
    if m <= 0:
        return 0.0

    q = 0.0
    if graph.directed:
        for agg in community_aggregates(graph, partition).values():
            q += agg.internal / m - resolution * agg.out_total * agg.in_total / (m * m)
        return q

    two_m = 2.0 * m
    for agg in community_aggregates(graph, partition).values():
        q += agg.internal / two_m - resolution * (agg.total / two_m) ** 2
    return q


def modularity_gain(
    weight_to_community: float,
    node_degree: float,
    community_degree: float,
    m: float,
    resolution: float = 1.0,
) -> float:
    """Gain of inserting an isolated node into a community.

    ``w / m - resolution * sum_tot * k / (2 m^2)``, where w is the edge
    weight between node and community, k the node's weighted degree,
    sum_tot the community's total degree (excluding the node) and m the
    total edge weight. Differences of this value between two communities
    give the gain of moving a node between them.
    """
    if m <= 0:
        return 0.0
    return (
        weight_to_community / m
        - resolution * community_degree * node_degree / (2.0 * m * m)
    )


def renumber_partition(
    partition: Mapping[NodeId, Hashable], order: Iterable[NodeId]
) -> dict[NodeId, int]:
    """Relabel densely to 0..k-1 by first appearance along order.

    Nodes of partition absent from order keep their relative position after
    the ordered ones.
    """
    labels: dict[Hashable, int] = {}
    renumbered: dict[NodeId, int] = {}
    for node in order:
        renumbered[node] = labels.setdefault(partition[node], len(labels))
    for node, label in partition.items():
        if node not in renumbered:
            renumbered[node] = labels.setdefault(label, len(labels))
    return renumbered


def group_communities(partition: Mapping[NodeId, int]) -> list[list[NodeId]]:
    """Members of each community, ordered by label."""
    groups: dict[int, list[NodeId]] = {}
    for node, label in partition.items():
        groups.setdefault(label, []).append(node)
    return [groups[label] for label in sorted(groups)]
