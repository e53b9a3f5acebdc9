"""Graph data model: mutable Graph, immutable CSR snapshots, and their cache."""

from graphkit.graph.cache import (
    DEFAULT_SNAPSHOT_CACHE,
    SnapshotCache,
    get_snapshot,
    snapshot_cache_key,
)
from graphkit.graph.csr import CompactRowGraph
from graphkit.graph.degree_correction import sample_theta
from graphkit.graph.errors import (
    DistanceOverflowError,
    EdgeNotFoundError,
    GraphError,
    GraphGenerationError,
    GraphStructureError,
    NodeNotFoundError,
    PartitionError,
)
from graphkit.graph.generators import (
    PlantedGraph,
    block_sizes,
    build_probability_matrix,
    generate_planted_partition,
    validate_planted,
)
from graphkit.graph.graph import Graph, new_graph
from graphkit.graph.types import DEFAULT_WEIGHT, Edge, NodeId

__all__ = [
    "CompactRowGraph",
    "DEFAULT_SNAPSHOT_CACHE",
    "DEFAULT_WEIGHT",
    "DistanceOverflowError",
    "Edge",
    "EdgeNotFoundError",
    "Graph",
    "GraphError",
    "GraphGenerationError",
    "GraphStructureError",
    "NodeId",
    "NodeNotFoundError",
    "PartitionError",
    "PlantedGraph",
    "SnapshotCache",
    "block_sizes",
    "build_probability_matrix",
    "generate_planted_partition",
    "get_snapshot",
    "new_graph",
    "sample_theta",
    "snapshot_cache_key",
    "validate_planted",
]
