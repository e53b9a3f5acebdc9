"""Result summaries, schema validation, writing, and analysis ID generation."""

from graphkit.results.schema import (
    generate_analysis_id,
    load_result,
    summarize_centrality,
    summarize_communities,
    summarize_spanning_tree,
    summarize_traversal,
    validate_result,
    write_result,
)

__all__ = [
    "generate_analysis_id",
    "load_result",
    "summarize_centrality",
    "summarize_communities",
    "summarize_spanning_tree",
    "summarize_traversal",
    "validate_result",
    "write_result",
]
