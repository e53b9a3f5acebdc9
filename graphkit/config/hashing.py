"""Deterministic config hashing using SHA-256 over sorted JSON."""

import hashlib
import json
from dataclasses import asdict
from typing import Any

from graphkit.config.options import AnalysisConfig


def _digest(d: dict[str, Any]) -> str:
    serialized = json.dumps(
        d,
        sort_keys=True,
        ensure_ascii=True,
        separators=(",", ":"),
        indent=None,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:16]


def config_hash(config: Any) -> str:
    """Deterministic SHA-256 hash of an options record.

    Args:
        config: Any dataclass instance (top-level config or one option record).

    Returns:
        First 16 hex characters of the SHA-256 hash.
    """
    return _digest(asdict(config))


def graph_config_hash(config: AnalysisConfig) -> str:
    """Hash of the generated graph's identity: generator params plus seed.

    Algorithm options, description and tags do not change the graph, so two
    configs differing only in those share a graph hash.
    """
    return _digest({"generator": asdict(config.generator), "seed": config.seed})


def full_config_hash(config: AnalysisConfig) -> str:
    """Hash for full analysis identity, including every option record."""
    return config_hash(config)
