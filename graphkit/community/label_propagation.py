"""Asynchronous label propagation (Raghavan et al. 2007)."""

import logging

from graphkit.community.modularity import (
    modularity,
    neighbor_community_weights,
    renumber_partition,
)
from graphkit.community.result import CommunityResult
from graphkit.config.options import LabelPropagationOptions
from graphkit.graph.graph import Graph
from graphkit.graph.types import NodeId
from graphkit.reproducibility.seed import make_rng

log = logging.getLogger(__name__)


def label_propagation(
    graph: Graph[NodeId], options: LabelPropagationOptions | None = None
) -> CommunityResult[NodeId]:
    """Each node repeatedly adopts the heaviest label among its neighbors.

    Nodes are visited in a fresh seeded permutation every pass and update in
    place, so later nodes in a pass see earlier updates. Ties between labels
    of equal weight go to the smallest label. Stops when a pass changes no
    label or after ``max_iterations`` passes.

    Returns:
        CommunityResult; ``levels`` is always 1 and modularity is scored at
        resolution 1.
    """
    if options is None:
        options = LabelPropagationOptions()
    rng = make_rng(options.seed)
    nodes = list(graph.nodes())
    labels = {node: i for i, node in enumerate(nodes)}

    iterations = 0
    converged = not nodes
    while iterations < options.max_iterations and not converged:
        iterations += 1
        changed = 0
        for i in rng.permutation(len(nodes)):
            node = nodes[i]
            weights = neighbor_community_weights(graph, node, labels)
            if not weights:
                continue
            heaviest = max(weights.values())
            best = min(label for label, w in weights.items() if w == heaviest)
            if best != labels[node]:
                labels[node] = best
                changed += 1
        log.debug("Label propagation pass %d: %d change(s)", iterations, changed)
        converged = changed == 0

    if not converged:
        log.warning(
            "Label propagation did not converge within %d passes",
            options.max_iterations,
        )

    partition = renumber_partition(labels, nodes)
    num_communities = len(set(partition.values()))
    q = modularity(graph, partition)
    log.info(
        "Label propagation: %d communities, modularity %.4f after %d pass(es)",
        num_communities,
        q,
        iterations,
    )
    return CommunityResult(
        partition=partition,
        modularity=q,
        num_communities=num_communities,
        levels=1,
        iterations=iterations,
    )
