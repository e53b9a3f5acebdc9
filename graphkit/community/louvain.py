"""Louvain community detection (Blondel et al. 2008).

Two alternating phases: local moving greedily relocates single nodes to the
neighbor community with the largest modularity gain; aggregation collapses
every community into one weighted super-node. The two phases repeat on the
coarser graph until a level stops improving.
"""

import logging
from collections.abc import Hashable

from graphkit.community.merge import merge_small_communities
from graphkit.community.modularity import (
    modularity,
    modularity_gain,
    neighbor_community_weights,
    node_weighted_degree,
    renumber_partition,
    total_edge_weight,
)
from graphkit.community.result import CommunityResult
from graphkit.config.options import LeidenOptions, LouvainOptions
from graphkit.graph.errors import GraphStructureError
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId
from graphkit.reproducibility.seed import derive_seed, make_rng
from graphkit.structure.components import is_connected

log = logging.getLogger(__name__)

# Gains at or below this are float noise, not improvements.
_MIN_GAIN = 1e-12


def check_louvain_input(
    graph: Graph,
    options: LouvainOptions | LeidenOptions,
    algorithm: str = "Louvain",
) -> None:
    """Reject inputs Louvain (or Leiden) cannot partition meaningfully.

    Raises:
        GraphStructureError: If the graph is directed, or disconnected while
            ``options.require_connected`` is set.
    """
    if graph.directed:
        raise GraphStructureError(
            f"{algorithm} requires an undirected graph; got a directed graph"
        )
    if options.require_connected and not is_connected(graph):
        raise GraphStructureError(
            f"{algorithm} was configured with require_connected=True but the "
            "graph is disconnected"
        )


def _visit_order(
    graph: Graph[Hashable], options: LouvainOptions | LeidenOptions, level: int
) -> list[Hashable]:
    nodes = list(graph.nodes())
    if options.seed is None:
        return nodes
    rng = make_rng(derive_seed(options.seed, level))
    return [nodes[i] for i in rng.permutation(len(nodes))]


def local_moving(
    graph: Graph[Hashable],
    options: LouvainOptions | LeidenOptions,
    level: int = 0,
    initial: dict[Hashable, int] | None = None,
) -> tuple[dict[Hashable, int], int, int]:
    """Greedy single-node moves until a pass makes no move.

    Each node starts in its own community, or in its ``initial`` label. A
    node moves to the adjacent community whose gain exceeds that of staying
    by the largest margin; on equal gains the first community encountered
    wins.

    Returns:
        (community assignment, passes run, total moves made).
    """
    m = total_edge_weight(graph)
    nodes = list(graph.nodes())
    if initial is None:
        community = {node: i for i, node in enumerate(nodes)}
    else:
        community = dict(initial)
    if m <= 0:
        return community, 0, 0

    resolution = options.resolution
    degree = {node: node_weighted_degree(graph, node) for node in nodes}
    community_degree: dict[int, float] = {}
    for node in nodes:
        label = community[node]
        community_degree[label] = community_degree.get(label, 0.0) + degree[node]
    order = _visit_order(graph, options, level)

    passes = 0
    total_moves = 0
    while passes < options.max_iterations:
        passes += 1
        moves = 0
        for node in order:
            current = community[node]
            k = degree[node]
            weights = neighbor_community_weights(graph, node, community)
            community_degree[current] -= k

            best = current
            best_gain = modularity_gain(
                weights.get(current, 0.0), k, community_degree[current], m, resolution
            )
            for label, weight in weights.items():
                if label == current:
                    continue
                gain = modularity_gain(
                    weight, k, community_degree[label], m, resolution
                )
                if gain > best_gain + _MIN_GAIN:
                    best, best_gain = label, gain

            community_degree[best] += k
            if best != current:
                community[node] = best
                moves += 1
        total_moves += moves
        log.debug("Level %d pass %d: %d move(s)", level, passes, moves)
        if moves == 0:
            break
    return community, passes, total_moves


def aggregate_graph(
    graph: Graph[Hashable], community: dict[Hashable, int]
) -> Graph[int]:
    """Collapse each community (dense labels 0..k-1) into a super-node.

    Crossing weights between two communities are summed onto one edge; the
    intra-community adjacency weight becomes the super-node's self-loop.
    """
    k = max(community.values()) + 1 if community else 0
    coarse: Graph[int] = Graph(directed=False)
    coarse.add_nodes_from(range(k))

    internal = [0.0] * k
    crossing: dict[tuple[int, int], float] = {}
    for edge in graph.edges():
        cu, cv = community[edge.source], community[edge.target]
        if cu == cv:
            # Adjacency weight: an undirected edge counts from both ends.
            loop = edge.source == edge.target
            internal[cu] += edge.weight if loop else 2 * edge.weight
        else:
            key = (cu, cv) if cu < cv else (cv, cu)
            crossing[key] = crossing.get(key, 0.0) + edge.weight

    for (cu, cv), weight in crossing.items():
        coarse.add_edge(cu, cv, weight)
    for label, weight in enumerate(internal):
        if weight > 0:
            coarse.add_edge(label, label, weight)
    return coarse


def louvain_levels(
    graph: Graph[NodeId], options: LouvainOptions
) -> tuple[list[dict[NodeId, int]], int]:
    """Run local moving + aggregation and keep every level's partition.

    Stops when a level makes no move, when a level's modularity gain falls
    below ``options.tolerance`` (that level is still kept), or after
    ``options.max_levels`` levels.

    Returns:
        (partitions of the original nodes after each level, finest first and
        renumbered, total local-moving passes).
    """
    nodes = list(graph.nodes())
    assignment: dict[NodeId, Hashable] = {node: node for node in nodes}
    current: Graph[Hashable] = graph
    singletons = {node: i for i, node in enumerate(nodes)}
    previous_q = modularity(graph, singletons, options.resolution)

    levels: list[dict[NodeId, int]] = []
    iterations = 0
    for level in range(options.max_levels):
        community, passes, moves = local_moving(current, options, level)
        iterations += passes
        if moves == 0:
            break

        community = renumber_partition(community, current.nodes())
        q = modularity(current, community, options.resolution)
        assignment = {node: community[assignment[node]] for node in nodes}
        levels.append(renumber_partition(assignment, nodes))
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
        current = aggregate_graph(current, community)
    return levels, iterations


def louvain(
    graph: Graph[NodeId], options: LouvainOptions | None = None
) -> CommunityResult[NodeId]:
    """Detect communities by Louvain modularity optimization.

    Args:
        graph: Undirected weighted graph. Not modified.
        options: Algorithm parameters; defaults to ``LouvainOptions()``.

    Returns:
        CommunityResult with a dense partition of every node.

    Raises:
        GraphStructureError: On directed input, or disconnected input when
            ``options.require_connected`` is set. Raised before any work.
    """
    if options is None:
        options = LouvainOptions()
    check_louvain_input(graph, options)

    nodes = list(graph.nodes())
    levels, iterations = louvain_levels(graph, options)
    if levels:
        partition = levels[-1]
    else:
        partition = {node: i for i, node in enumerate(nodes)}

    if options.min_community_size > 1:
        partition = merge_small_communities(
            graph, partition, options.min_community_size, options.resolution
        )

    q = modularity(graph, partition, options.resolution)
    num_communities = len(set(partition.values()))
    log.info(
        "Louvain: %d nodes -> %d communities, modularity %.4f "
        "(%d level(s), %d pass(es))",
        len(nodes),
        num_communities,
        q,
        len(levels),
        iterations,
    )
    return CommunityResult(
        partition=partition,
        modularity=q,
        num_communities=num_communities,
        levels=len(levels),
        iterations=iterations,
        resolution=options.resolution,
    )
