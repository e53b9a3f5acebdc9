"""Tests for result summaries, schema validation, writing, and analysis ID generation."""

import json
import re
from dataclasses import replace

import pytest

from graphkit.centrality import CentralityResult, ConvergenceStatus
from graphkit.community import CommunityResult
from graphkit.config import (
    DEFAULT_CONFIG,
    GeneratorConfig,
    LouvainOptions,
    graph_config_hash,
)
from graphkit.graph import CompactRowGraph, Edge, Graph
from graphkit.results import (
    generate_analysis_id,
    load_result,
    summarize_centrality,
    summarize_communities,
    summarize_spanning_tree,
    summarize_traversal,
    validate_result,
    write_result,
)
from graphkit.structure import SpanningTreeResult
from graphkit.traversal import DirectionOptimizedBFS


class TestSummaries:
    """summarize_* turn algorithm results into JSON-able blocks."""

    def test_summarize_traversal(self):
        g = Graph()
        g.add_edges_from([("a", "b"), ("b", "c")])
        result = DirectionOptimizedBFS(CompactRowGraph.from_graph(g)).search("a")
        summary = summarize_traversal(result)
        assert summary["visited_count"] == 3
        assert summary["max_distance"] == 2
        assert summary["level_sizes"] == [1, 1, 1]
        assert all(d in ("top_down", "bottom_up") for d in summary["directions"])
        json.dumps(summary)

    def test_summarize_communities(self):
        result = CommunityResult(
            partition={"a": 0, "b": 0, "c": 1, "d": 0},
            modularity=0.25,
            num_communities=2,
            levels=1,
            iterations=3,
        )
        summary = summarize_communities(result)
        assert summary["sizes"] == [3, 1]
        assert summary["modularity"] == 0.25
        assert summary["resolution"] == 1.0

    def test_summarize_centrality_top_k(self):
        result = CentralityResult(
            scores={"a": 0.1, "b": 0.9, "c": 0.5},
            iterations=12,
            status=ConvergenceStatus.CONVERGED,
            delta=1e-7,
        )
        summary = summarize_centrality(result, top_k=2)
        assert summary["top"] == [["b", 0.9], ["c", 0.5]]
        assert summary["status"] == "converged"
        assert summary["converged"] is True

    def test_summarize_centrality_tuple_nodes(self):
        result = CentralityResult(
            scores={(0, 1): 1.0},
            iterations=1,
            status=ConvergenceStatus.MAX_ITERATIONS_REACHED,
            delta=0.5,
        )
        summary = summarize_centrality(result)
        assert summary["top"] == [["(0, 1)", 1.0]]
        assert summary["converged"] is False

    def test_summarize_spanning_tree(self):
        result = SpanningTreeResult(
            edges=(Edge("a", "b", 1.0), Edge("b", "c", 2.5)), total_weight=3.5
        )
        assert summarize_spanning_tree(result) == {
            "edge_count": 2,
            "total_weight": 3.5,
        }


class TestValidateResult:
    """validate_result accepts valid dicts and rejects invalid ones."""

    @pytest.fixture
    def valid_result(self):
        return {
            "schema_version": "1.0",
            "analysis_id": "n200_K4_pin0.2_pout0.01_s42_20260224_120000",
            "timestamp": "2026-02-24T12:00:00+00:00",
            "description": "test analysis",
            "tags": ["test"],
            "config": {"generator": {"n": 200}},
            "metrics": {"scalars": {"modularity": 0.5}},
        }

    def test_validate_result_valid(self, valid_result):
        assert validate_result(valid_result) == []

    def test_validate_result_missing_fields(self):
        errors = validate_result({"schema_version": "1.0"})
        assert any("Missing required" in e for e in errors)

    def test_validate_result_missing_scalars(self, valid_result):
        valid_result["metrics"] = {"traversal": {}}
        errors = validate_result(valid_result)
        assert any("scalars" in e for e in errors)

    def test_validate_result_bad_schema_version_type(self, valid_result):
        valid_result["schema_version"] = 1
        errors = validate_result(valid_result)
        assert any("schema_version" in e for e in errors)

    def test_validate_result_bad_tags_type(self, valid_result):
        valid_result["tags"] = "not-a-list"
        errors = validate_result(valid_result)
        assert any("tags" in e for e in errors)

    def test_validate_result_bad_timestamp(self, valid_result):
        valid_result["timestamp"] = "yesterday"
        errors = validate_result(valid_result)
        assert any("ISO 8601" in e for e in errors)

    def test_validate_result_incomplete_block(self, valid_result):
        valid_result["metrics"]["communities"] = {"num_communities": 3}
        errors = validate_result(valid_result)
        assert "metrics.communities missing field: modularity" in errors
        assert "metrics.communities missing field: sizes" in errors

    def test_validate_result_centrality_block(self, valid_result):
        valid_result["metrics"]["centrality"] = {
            "katz": {"iterations": 3, "status": "converged", "converged": True},
        }
        errors = validate_result(valid_result)
        assert errors == ["metrics.centrality.katz missing field: top"]


class TestGenerateAnalysisId:
    """Analysis IDs encode generator parameters, graph hash and a timestamp."""

    def test_generate_analysis_id_format(self):
        aid = generate_analysis_id(DEFAULT_CONFIG)
        assert re.match(
            r"^n200_K4_pin0\.2_pout0\.01_s42_g[0-9a-f]{8}_\d{8}_\d{6}$", aid
        )

    def test_graph_hash_segment(self):
        aid = generate_analysis_id(DEFAULT_CONFIG)
        assert f"_g{graph_config_hash(DEFAULT_CONFIG)[:8]}_" in aid

    def test_same_graph_shares_prefix(self):
        cfg = replace(DEFAULT_CONFIG, louvain=LouvainOptions(resolution=2.0))
        prefix = generate_analysis_id(DEFAULT_CONFIG).rsplit("_", 2)[0]
        assert generate_analysis_id(cfg).rsplit("_", 2)[0] == prefix

    def test_generate_analysis_id_different_configs(self):
        cfg = replace(DEFAULT_CONFIG, generator=GeneratorConfig(n=300, K=3), seed=7)
        aid = generate_analysis_id(cfg)
        assert aid.startswith("n300_K3_")
        assert "_s7_" in aid


class TestWriteResult:
    """write_result validates and writes result.json."""

    def test_write_result_creates_file(self, tmp_path):
        metrics = {"scalars": {"modularity": 0.41}}
        path = write_result(DEFAULT_CONFIG, metrics, results_dir=tmp_path)
        assert path.name == "result.json"
        assert path.parent.parent == tmp_path
        data = json.loads(path.read_text())
        assert data["metrics"]["scalars"]["modularity"] == 0.41
        assert data["config"]["generator"]["n"] == 200

    def test_write_result_validates_before_write(self, tmp_path):
        with pytest.raises(ValueError, match="validation failed"):
            write_result(DEFAULT_CONFIG, {"traversal": {}}, results_dir=tmp_path)
        assert list(tmp_path.iterdir()) == []

    def test_write_result_metadata(self, tmp_path):
        path = write_result(
            DEFAULT_CONFIG,
            {"scalars": {}},
            metadata={"runtime_seconds": 1.5},
            results_dir=tmp_path,
        )
        metadata = json.loads(path.read_text())["metadata"]
        assert len(metadata["config_hash"]) == 16
        assert len(metadata["graph_config_hash"]) == 16
        assert metadata["seed"] == 42
        assert metadata["runtime_seconds"] == 1.5


class TestLoadResult:
    """load_result reads and validates."""

    def test_load_result(self, tmp_path):
        path = write_result(DEFAULT_CONFIG, {"scalars": {"q": 0.3}}, results_dir=tmp_path)
        data = load_result(path)
        assert data["metrics"]["scalars"]["q"] == 0.3

    def test_load_result_invalid_file(self, tmp_path):
        bad_file = tmp_path / "bad_result.json"
        bad_file.write_text(json.dumps({"schema_version": "1.0"}))
        with pytest.raises(ValueError, match="validation failed"):
            load_result(bad_file)

    def test_load_result_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_result(tmp_path / "nope.json")
