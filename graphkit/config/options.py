"""Algorithm option records, all frozen and slotted for immutability.

Every algorithm entry point takes ``(graph, options)``. Options are plain
dataclasses with documented defaults; per-field validation runs in
``__post_init__`` so invalid values are rejected at construction.
"""

from dataclasses import dataclass, field


def _check_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")


def _check_iterations(value: int) -> None:
    if value < 1:
        raise ValueError(f"max_iterations must be >= 1, got {value}")


@dataclass(frozen=True, slots=True)
class TraversalOptions:
    """Direction-optimized BFS switching parameters (Beamer et al. 2012)."""

    alpha: float = 15.0  # top-down -> bottom-up when frontier_edges * alpha >= unvisited_edges
    beta: float = 20.0  # bottom-up -> top-down when |frontier| * beta < n
    optimize_threshold: int = 10_000  # node count above which breadth_first_search uses DOBFS

    def __post_init__(self) -> None:
        if self.alpha < 0:
            raise ValueError(f"alpha must be >= 0, got {self.alpha}")
        if self.beta < 0:
            raise ValueError(f"beta must be >= 0, got {self.beta}")
        if self.optimize_threshold < 0:
            raise ValueError(
                f"optimize_threshold must be >= 0, got {self.optimize_threshold}"
            )


@dataclass(frozen=True, slots=True)
class LouvainOptions:
    """Louvain local-moving + aggregation parameters."""

    resolution: float = 1.0
    max_iterations: int = 100  # local-moving passes per level
    max_levels: int = 32  # aggregation levels
    tolerance: float = 1e-7  # minimum modularity gain for another level
    seed: int | None = None  # None = visit nodes in insertion order
    min_community_size: int = 1  # >1 merges smaller communities afterwards
    require_connected: bool = False

    def __post_init__(self) -> None:
        _check_positive("resolution", self.resolution)
        _check_iterations(self.max_iterations)
        if self.max_levels < 1:
            raise ValueError(f"max_levels must be >= 1, got {self.max_levels}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.min_community_size < 1:
            raise ValueError(
                f"min_community_size must be >= 1, got {self.min_community_size}"
            )


@dataclass(frozen=True, slots=True)
class LeidenOptions:
    """Leiden local-moving + refinement + aggregation parameters (Traag et al. 2019)."""

    resolution: float = 1.0
    max_iterations: int = 100  # local-moving passes per level
    max_levels: int = 32  # aggregation levels
    tolerance: float = 1e-7  # minimum modularity gain for another level
    seed: int | None = 42  # visit and refinement order; None = insertion order
    require_connected: bool = False

    def __post_init__(self) -> None:
        _check_positive("resolution", self.resolution)
        _check_iterations(self.max_iterations)
        if self.max_levels < 1:
            raise ValueError(f"max_levels must be >= 1, got {self.max_levels}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")


@dataclass(frozen=True, slots=True)
class LabelPropagationOptions:
    """Asynchronous label propagation parameters."""

    max_iterations: int = 100
    seed: int = 42

    def __post_init__(self) -> None:
        _check_iterations(self.max_iterations)


@dataclass(frozen=True, slots=True)
class CentralityOptions:
    """Eigenvector centrality power-iteration parameters."""

    max_iterations: int = 100
    tolerance: float = 1e-6
    normalized: bool = True  # min-max rescale into [0, 1]
    shift: bool = False  # iterate on (A + I)^T so bipartite graphs converge

    def __post_init__(self) -> None:
        _check_iterations(self.max_iterations)
        _check_positive("tolerance", self.tolerance)


@dataclass(frozen=True, slots=True)
class KatzOptions:
    """Katz centrality fixed-point parameters: x <- alpha * A^T x + beta."""

    alpha: float = 0.1  # attenuation; must stay below 1 / lambda_max to converge
    beta: float = 1.0  # baseline score per node
    max_iterations: int = 1000
    tolerance: float = 1e-6
    normalized: bool = True

    def __post_init__(self) -> None:
        _check_positive("alpha", self.alpha)
        _check_positive("beta", self.beta)
        _check_iterations(self.max_iterations)
        _check_positive("tolerance", self.tolerance)


@dataclass(frozen=True, slots=True)
class PageRankOptions:
    """PageRank power-iteration parameters."""

    damping: float = 0.85
    max_iterations: int = 100
    tolerance: float = 1e-6

    def __post_init__(self) -> None:
        if not 0.0 < self.damping < 1.0:
            raise ValueError(f"damping must be in (0, 1), got {self.damping}")
        _check_iterations(self.max_iterations)
        _check_positive("tolerance", self.tolerance)


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Planted-partition (degree-corrected SBM) generation parameters."""

    n: int = 200  # number of nodes
    K: int = 4  # number of planted communities
    p_in: float = 0.2  # in-community edge probability
    p_out: float = 0.01  # cross-community edge probability
    degree_correction: bool = False  # Zipf-distributed per-node propensities

    def __post_init__(self) -> None:
        if self.K < 1:
            raise ValueError(f"K must be >= 1, got {self.K}")
        if self.n < self.K:
            raise ValueError(f"n ({self.n}) must be >= K ({self.K})")
        for name, p in (("p_in", self.p_in), ("p_out", self.p_out)):
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {p}")


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Top-level configuration for run_analysis.py composing all option records.

    Cross-parameter validation runs in __post_init__ to reject invalid
    configurations early.
    """

    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    traversal: TraversalOptions = field(default_factory=TraversalOptions)
    louvain: LouvainOptions = field(default_factory=LouvainOptions)
    leiden: LeidenOptions = field(default_factory=LeidenOptions)
    centrality: CentralityOptions = field(default_factory=CentralityOptions)
    katz: KatzOptions = field(default_factory=KatzOptions)
    pagerank: PageRankOptions = field(default_factory=PageRankOptions)
    bfs_source: int = 0  # generated graphs use integer node ids 0..n-1
    seed: int = 42
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0 <= self.bfs_source < self.generator.n:
            raise ValueError(
                f"bfs_source ({self.bfs_source}) must be a node id in "
                f"[0, {self.generator.n})"
            )
