"""Result summaries, analysis IDs, schema validation and writing.

Algorithm results are converted into JSON-able dicts by the ``summarize_*``
helpers. A Python validation function (not jsonschema) checks required
fields and types before result.json is written.
"""

import json
from collections import Counter
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from graphkit.centrality.power import CentralityResult
from graphkit.community.result import CommunityResult
from graphkit.config.hashing import full_config_hash, graph_config_hash
from graphkit.config.options import AnalysisConfig
from graphkit.structure.spanning_tree import SpanningTreeResult
from graphkit.traversal.direction import BFSResult

SCHEMA_VERSION = "1.0"

REQUIRED_TOP_FIELDS = {
    "schema_version",
    "analysis_id",
    "timestamp",
    "description",
    "tags",
    "config",
    "metrics",
}

REQUIRED_METRICS_FIELDS = {"scalars"}

# Optional metric blocks and the fields each must carry when present.
OPTIONAL_BLOCK_FIELDS = {
    "traversal": ["visited_count", "max_distance", "directions"],
    "communities": ["num_communities", "modularity", "sizes"],
    "spanning_tree": ["edge_count", "total_weight"],
}

CENTRALITY_FIELDS = ["iterations", "status", "converged", "top"]


def generate_analysis_id(config: AnalysisConfig) -> str:
    """Scannable analysis ID: generator slug, graph hash prefix and UTC time.

    Format: n{n}_K{K}_pin{p_in}_pout{p_out}_s{seed}_g{graph_hash[:8]}_{YYYYMMDD}_{HHMMSS}
    Example: n200_K4_pin0.2_pout0.01_s42_g3fa94c1e_20260224_143012

    Runs that analyze the same generated graph share everything up to the
    timestamp, so their result directories sort together.
    """
    gen = config.generator
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return (
        f"n{gen.n}_K{gen.K}_pin{gen.p_in:g}_pout{gen.p_out:g}"
        f"_s{config.seed}_g{graph_config_hash(config)[:8]}_{ts}"
    )


def _key(node: Any) -> Any:
    """Node ids as JSON-safe scalars."""
    if isinstance(node, (str, int, float, bool)) or node is None:
        return node
    return repr(node)


def summarize_traversal(result: BFSResult) -> dict[str, Any]:
    """Reach, depth and per-level strategy of a BFS."""
    level_sizes = Counter(result.distances.values())
    return {
        "visited_count": result.visited_count,
        "max_distance": max(level_sizes, default=0),
        "level_sizes": [level_sizes[d] for d in range(len(level_sizes))],
        "directions": [d.value for d in result.directions],
    }


def summarize_communities(result: CommunityResult) -> dict[str, Any]:
    """Community count, modularity and size distribution (largest first)."""
    sizes = sorted(
        (len(members) for members in result.communities()), reverse=True
    )
    return {
        "num_communities": result.num_communities,
        "modularity": result.modularity,
        "resolution": result.resolution,
        "levels": result.levels,
        "iterations": result.iterations,
        "sizes": sizes,
    }


def summarize_centrality(result: CentralityResult, top_k: int = 10) -> dict[str, Any]:
    """Convergence metadata plus the top_k highest-scoring nodes."""
    ranked = sorted(result.scores.items(), key=lambda item: item[1], reverse=True)
    return {
        "iterations": result.iterations,
        "status": result.status.value,
        "converged": result.converged,
        "delta": result.delta,
        "top": [[_key(node), score] for node, score in ranked[:top_k]],
    }


def summarize_spanning_tree(result: SpanningTreeResult) -> dict[str, Any]:
    return {
        "edge_count": len(result.edges),
        "total_weight": result.total_weight,
    }


def validate_result(result: dict[str, Any]) -> list[str]:
    """Validate a result dict against the project schema.

    Returns a list of error strings. An empty list means the result is valid.

    Checks:
    - All required top-level fields are present
    - metrics.scalars is present
    - schema_version is a string, tags a list, config a dict
    - timestamp parses as ISO 8601
    - Optional metric blocks carry their required fields
    """
    errors: list[str] = []

    missing = REQUIRED_TOP_FIELDS - set(result.keys())
    if missing:
        errors.append(f"Missing required top-level fields: {sorted(missing)}")

    if "schema_version" in result and not isinstance(result["schema_version"], str):
        errors.append("schema_version must be a string")

    if "tags" in result and not isinstance(result["tags"], list):
        errors.append("tags must be a list")

    if "config" in result and not isinstance(result["config"], dict):
        errors.append("config must be a dict")

    if "timestamp" in result:
        ts = result["timestamp"]
        if not isinstance(ts, str):
            errors.append("timestamp must be a string")
        else:
            try:
                datetime.fromisoformat(ts)
            except ValueError:
                errors.append("timestamp must be in ISO 8601 format")

    metrics = result.get("metrics")
    if "metrics" in result and not isinstance(metrics, dict):
        errors.append("metrics must be a dict")
        return errors
    if metrics is None:
        return errors

    for field in sorted(REQUIRED_METRICS_FIELDS - set(metrics)):
        errors.append(f"metrics.{field} is required")

    for block_name, fields in OPTIONAL_BLOCK_FIELDS.items():
        block = metrics.get(block_name)
        if block is None:
            continue
        if not isinstance(block, dict):
            errors.append(f"metrics.{block_name} must be a dict")
            continue
        for field in fields:
            if field not in block:
                errors.append(f"metrics.{block_name} missing field: {field}")

    # centrality: {measure_name: summary}
    centrality = metrics.get("centrality")
    if centrality is not None:
        if not isinstance(centrality, dict):
            errors.append("metrics.centrality must be a dict")
        else:
            for measure, summary in centrality.items():
                if not isinstance(summary, dict):
                    errors.append(f"metrics.centrality.{measure} must be a dict")
                    continue
                for field in CENTRALITY_FIELDS:
                    if field not in summary:
                        errors.append(
                            f"metrics.centrality.{measure} missing field: {field}"
                        )

    return errors


def write_result(
    config: AnalysisConfig,
    metrics: dict[str, Any],
    metadata: dict[str, Any] | None = None,
    results_dir: str | Path = "results",
) -> Path:
    """Write result.json under results/{analysis_id}/.

    Args:
        config: The analysis configuration.
        metrics: Metrics dict (must include 'scalars' key).
        metadata: Optional additional metadata to merge into the metadata block.
        results_dir: Base directory for result output.

    Returns:
        Path to the written result.json.

    Raises:
        ValueError: If the assembled result fails validation.
    """
    analysis_id = generate_analysis_id(config)
    result = {
        "schema_version": SCHEMA_VERSION,
        "analysis_id": analysis_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "description": config.description,
        "tags": list(config.tags),
        "config": asdict(config),
        "metrics": metrics,
        "metadata": {
            "config_hash": full_config_hash(config),
            "graph_config_hash": graph_config_hash(config),
            "seed": config.seed,
            **(metadata or {}),
        },
    }

    errors = validate_result(result)
    if errors:
        raise ValueError(
            "Result validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    out_dir = Path(results_dir) / analysis_id
    out_dir.mkdir(parents=True, exist_ok=True)
    result_path = out_dir / "result.json"
    with open(result_path, "w") as f:
        json.dump(result, f, indent=2)
    return result_path


def load_result(result_path: str | Path) -> dict[str, Any]:
    """Load and validate a result.json file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the loaded result fails validation.
    """
    path = Path(result_path)
    with open(path) as f:
        result = json.load(f)

    errors = validate_result(result)
    if errors:
        raise ValueError(
            f"Result validation failed for {path}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    return result
