"""Option records and configuration system with frozen, hashable, serializable dataclasses."""

from graphkit.config.options import (
    AnalysisConfig,
    CentralityOptions,
    GeneratorConfig,
    KatzOptions,
    LabelPropagationOptions,
    LeidenOptions,
    LouvainOptions,
    PageRankOptions,
    TraversalOptions,
)
from graphkit.config.defaults import DEFAULT_CONFIG
from graphkit.config.hashing import config_hash, graph_config_hash, full_config_hash
from graphkit.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
    options_from_dict,
)

__all__ = [
    "AnalysisConfig",
    "CentralityOptions",
    "GeneratorConfig",
    "KatzOptions",
    "LabelPropagationOptions",
    "LeidenOptions",
    "LouvainOptions",
    "PageRankOptions",
    "TraversalOptions",
    "DEFAULT_CONFIG",
    "config_hash",
    "graph_config_hash",
    "full_config_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
    "options_from_dict",
]
