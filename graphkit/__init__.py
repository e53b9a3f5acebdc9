"""In-memory graph analytics: CSR snapshots, hybrid BFS, Louvain, Leiden, centrality."""

__version__ = "0.1.0"
