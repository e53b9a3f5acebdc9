"""Community detection: modularity framework, Louvain, Leiden and variants."""

from graphkit.community.label_propagation import label_propagation
from graphkit.community.leiden import leiden, refine_partition
from graphkit.community.louvain import aggregate_graph, local_moving, louvain
from graphkit.community.merge import merge_small_communities
from graphkit.community.modularity import (
    CommunityAggregate,
    community_aggregates,
    group_communities,
    modularity,
    modularity_gain,
    neighbor_communities,
    neighbor_community_weights,
    node_weighted_degree,
    renumber_partition,
    total_edge_weight,
    validate_partition,
)
from graphkit.community.result import CommunityResult
from graphkit.community.variants import (
    CommunityHierarchy,
    CommunityLevel,
    ResolutionScan,
    ResolutionScanEntry,
    hierarchical_louvain,
    resolution_scan,
)

__all__ = [
    "CommunityAggregate",
    "CommunityHierarchy",
    "CommunityLevel",
    "CommunityResult",
    "ResolutionScan",
    "ResolutionScanEntry",
    "aggregate_graph",
    "community_aggregates",
    "group_communities",
    "hierarchical_louvain",
    "label_propagation",
    "leiden",
    "local_moving",
    "louvain",
    "merge_small_communities",
    "modularity",
    "modularity_gain",
    "neighbor_communities",
    "neighbor_community_weights",
    "node_weighted_degree",
    "refine_partition",
    "renumber_partition",
    "total_edge_weight",
    "validate_partition",
]
