"""Leiden community detection (Traag, Waltman & van Eck 2019).

Leiden adds a refinement phase between Louvain's local moving and
aggregation. Each community found by local moving is split into
well-connected subsets, and the coarse graph is built from those subsets
rather than from the communities themselves. The next level starts its local
moving from the unrefined communities, so a badly connected node can still
leave the community it was merged into.
"""

import logging
from collections.abc import Hashable

from graphkit.community.louvain import (
    _MIN_GAIN,
    aggregate_graph,
    check_louvain_input,
    local_moving,
)
from graphkit.community.modularity import (
    modularity,
    modularity_gain,
    neighbor_community_weights,
    node_weighted_degree,
    renumber_partition,
    total_edge_weight,
)
from graphkit.community.result import CommunityResult
from graphkit.config.options import LeidenOptions
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId
from graphkit.reproducibility.seed import derive_seed, make_rng
from graphkit.structure.union_find import UnionFind

log = logging.getLogger(__name__)

# Offset of the refinement stream below each level's visit-order seed.
_REFINE_STREAM = 1


def _refine_order(
    graph: Graph[Hashable], options: LeidenOptions, level: int
) -> list[Hashable]:
    nodes = list(graph.nodes())
    if options.seed is None:
        return nodes
    rng = make_rng(derive_seed(derive_seed(options.seed, level), _REFINE_STREAM))
    return [nodes[i] for i in rng.permutation(len(nodes))]


def refine_partition(
    graph: Graph[Hashable],
    community: dict[Hashable, int],
    options: LeidenOptions,
    level: int = 0,
) -> dict[Hashable, int]:
    """Split every community into well-connected subsets.

    Nodes start as singleton subsets. Visiting nodes in seeded order, a node
    that is still a singleton may merge into an adjacent subset of the same
    community. Both the node and the target subset must be well connected
    to the rest of their community, that is, their edge weight into it must
    reach ``resolution * d * (K - d) / 2m`` where ``d`` is their degree and
    ``K`` the community's degree. Among qualifying subsets the one with the
    largest positive modularity gain wins.

    Every returned subset lies inside one community and induces a connected
    subgraph.

    Returns:
        Dense refined labels, numbered by first appearance in node order.
    """
    nodes = list(graph.nodes())
    refined = {node: i for i, node in enumerate(nodes)}
    m = total_edge_weight(graph)
    if m <= 0:
        return refined

    resolution = options.resolution
    degree = {node: node_weighted_degree(graph, node) for node in nodes}
    community_total: dict[int, float] = {}
    for node in nodes:
        label = community[node]
        community_total[label] = community_total.get(label, 0.0) + degree[node]

    subset_degree = {refined[node]: degree[node] for node in nodes}
    subset_community = {refined[node]: community[node] for node in nodes}
    subset_size = {refined[node]: 1 for node in nodes}
    # Edge weight from each subset to the rest of its community.
    external: dict[int, float] = {}
    for node in nodes:
        own = community[node]
        external[refined[node]] = sum(
            weight
            for neighbor, weight in graph.adjacency(node).items()
            if neighbor != node and community[neighbor] == own
        )

    def well_connected(subset: int, total: float) -> bool:
        d = subset_degree[subset]
        return external[subset] >= resolution * d * (total - d) / (2.0 * m)

    merges = 0
    for node in _refine_order(graph, options, level):
        own = refined[node]
        if subset_size[own] > 1:
            continue
        label = community[node]
        total = community_total[label]
        if not well_connected(own, total):
            continue

        k = degree[node]
        weights = neighbor_community_weights(graph, node, refined)
        best, best_gain = own, 0.0
        for subset, weight in weights.items():
            if subset == own or subset_community[subset] != label:
                continue
            if not well_connected(subset, total):
                continue
            gain = modularity_gain(weight, k, subset_degree[subset], m, resolution)
            if gain > best_gain + _MIN_GAIN:
                best, best_gain = subset, gain
        if best == own:
            continue

        external[best] += external[own] - 2.0 * weights[best]
        subset_degree[best] += k
        subset_size[best] += 1
        refined[node] = best
        for table in (external, subset_degree, subset_size, subset_community):
            del table[own]
        merges += 1

    log.debug("Level %d refinement: %d merge(s)", level, merges)
    return renumber_partition(refined, nodes)


def _split_disconnected(
    graph: Graph[NodeId], partition: dict[NodeId, int]
) -> dict[NodeId, int]:
    """Give each connected piece of a community its own label."""
    pieces: UnionFind[NodeId] = UnionFind(partition)
    for edge in graph.edges():
        if partition[edge.source] == partition[edge.target]:
            pieces.union(edge.source, edge.target)
    roots = {node: pieces.find(node) for node in partition}
    return renumber_partition(roots, partition)


def leiden(
    graph: Graph[NodeId], options: LeidenOptions | None = None
) -> CommunityResult[NodeId]:
    """Detect communities by Leiden modularity optimization.

    Each level runs local moving, refines the resulting communities, then
    aggregates the refined subsets. Stops when local moving leaves every
    node of the current graph alone, when a level's modularity gain falls
    below ``options.tolerance`` (that level is still kept), when refinement
    leaves every node a singleton, or after ``options.max_levels`` levels.

    Args:
        graph: Undirected weighted graph. Not modified.
        options: Algorithm parameters; defaults to ``LeidenOptions()``.

    Returns:
        CommunityResult whose communities each induce a connected subgraph.

    Raises:
        GraphStructureError: On directed input, or disconnected input when
            ``options.require_connected`` is set. Raised before any work.
    """
    if options is None:
        options = LeidenOptions()
    check_louvain_input(graph, options, "Leiden")

    nodes = list(graph.nodes())
    resolution = options.resolution
    partition = {node: i for i, node in enumerate(nodes)}
    previous_q = modularity(graph, partition, resolution)

    assignment: dict[NodeId, Hashable] = {node: node for node in nodes}
    current: Graph[Hashable] = graph
    initial: dict[Hashable, int] | None = None
    levels = 0
    iterations = 0
    for level in range(options.max_levels):
        community, passes, _ = local_moving(current, options, level, initial)
        iterations += passes
        community = renumber_partition(community, current.nodes())
        partition = {node: community[assignment[node]] for node in nodes}
        if len(set(community.values())) == current.node_count:
            break

        levels += 1
        q = modularity(current, community, resolution)
        log.debug(
            "Level %d: %d communities, modularity %.6f (gain %.3g)",
            level,
            len(set(community.values())),
            q,
            q - previous_q,
        )
        if q - previous_q < options.tolerance:
            break
        previous_q = q

        refined = refine_partition(current, community, options, level)
        if len(set(refined.values())) == current.node_count:
            break
        initial = {refined[node]: community[node] for node in current.nodes()}
        assignment = {node: refined[assignment[node]] for node in nodes}
        current = aggregate_graph(current, refined)

    partition = _split_disconnected(graph, renumber_partition(partition, nodes))
    q = modularity(graph, partition, resolution)
    num_communities = len(set(partition.values()))
    log.info(
        "Leiden: %d nodes -> %d communities, modularity %.4f "
        "(%d level(s), %d pass(es))",
        len(nodes),
        num_communities,
        q,
        levels,
        iterations,
    )
    return CommunityResult(
        partition=partition,
        modularity=q,
        num_communities=num_communities,
        levels=levels,
        iterations=iterations,
        resolution=resolution,
    )
