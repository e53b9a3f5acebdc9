"""Exception hierarchy shared by the graph model and every algorithm.

All failures surface synchronously to the caller. Numerical edge cases
(edgeless graphs, zero-norm vectors) are not errors and never raise.
"""


class GraphError(Exception):
    """Base class for all graphkit errors."""


class NodeNotFoundError(GraphError, LookupError):
    """Raised when an operation references a node absent from the graph."""

    def __init__(self, node: object, where: str = "graph") -> None:
        super().__init__(f"Node {node!r} not found in {where}")
        self.node = node


class EdgeNotFoundError(GraphError, LookupError):
    """Raised when removing or querying an edge that does not exist."""

    def __init__(self, source: object, target: object) -> None:
        super().__init__(f"Edge {source!r} -> {target!r} not found in graph")
        self.source = source
        self.target = target


class GraphStructureError(GraphError, ValueError):
    """Raised when an algorithm's structural precondition is violated.

    Examples: a directed graph given to an undirected-only algorithm, or a
    disconnected graph given to a variant that requires connectivity.
    """


class DistanceOverflowError(GraphError, OverflowError):
    """Raised when a distance at or above the unvisited sentinel is stored."""


class PartitionError(GraphError, ValueError):
    """Raised when a partition does not assign every graph node a label."""


class GraphGenerationError(GraphError):
    """Raised when graph generation fails after all retry attempts."""
