"""Tests for planted-partition graph generation, validation, and degree correction."""

from unittest.mock import patch

import numpy as np
import pytest
import scipy.sparse

from graphkit.config import GeneratorConfig
from graphkit.graph import (
    GraphGenerationError,
    PlantedGraph,
    block_sizes,
    build_probability_matrix,
    generate_planted_partition,
    sample_theta,
    validate_planted,
)
from graphkit.graph.generators import sample_adjacency
from graphkit.structure import is_connected

SMALL = GeneratorConfig(n=60, K=3, p_in=0.5, p_out=0.05)


class TestBlockSizes:
    """Nodes split into near-equal contiguous blocks."""

    def test_even_split(self) -> None:
        assert block_sizes(12, 4) == [3, 3, 3, 3]

    def test_uneven_split(self) -> None:
        sizes = block_sizes(10, 4)
        assert sizes == [3, 3, 2, 2]
        assert sum(sizes) == 10


class TestDegreeCorrection:
    """Tests for theta sampling and normalization."""

    def test_theta_shape(self) -> None:
        theta = sample_theta([125] * 4, 1.0, np.random.default_rng(42))
        assert theta.shape == (500,)

    def test_theta_per_block_normalization(self) -> None:
        sizes = [100, 150, 250]
        theta = sample_theta(sizes, 1.0, np.random.default_rng(42))
        start = 0
        for size in sizes:
            assert abs(theta[start:start + size].sum() - size) < 1e-10
            start += size

    def test_theta_heterogeneity(self) -> None:
        """Degree correction should produce heterogeneous propensities (CV > 0.3)."""
        theta = sample_theta([125] * 4, 1.0, np.random.default_rng(42))
        cv = theta.std() / theta.mean()
        assert cv > 0.3, f"CV too low: {cv}"

    def test_theta_all_positive(self) -> None:
        theta = sample_theta([125] * 4, 1.0, np.random.default_rng(42))
        assert (theta > 0).all(), "All theta values must be positive"


class TestProbabilityMatrix:
    """Tests for the block probability matrix construction."""

    def _blocks(self) -> np.ndarray:
        return np.repeat(np.arange(4), block_sizes(200, 4))

    def test_shape_and_symmetry(self) -> None:
        P = build_probability_matrix(self._blocks(), 0.25, 0.03, np.ones(200))
        assert P.shape == (200, 200)
        assert np.array_equal(P, P.T)

    def test_no_self_loops(self) -> None:
        P = build_probability_matrix(self._blocks(), 0.25, 0.03, np.ones(200))
        assert np.all(np.diag(P) == 0.0)

    def test_block_values(self) -> None:
        P = build_probability_matrix(self._blocks(), 0.25, 0.03, np.ones(200))
        assert P[0, 1] == 0.25
        assert P[0, 199] == 0.03

    def test_values_clipped_with_correction(self) -> None:
        blocks = self._blocks()
        theta = sample_theta(block_sizes(200, 4), 1.0, np.random.default_rng(0))
        P = build_probability_matrix(blocks, 0.9, 0.5, theta)
        assert P.min() >= 0.0
        assert P.max() <= 1.0

    def test_sampled_adjacency_symmetric(self) -> None:
        P = build_probability_matrix(self._blocks(), 0.25, 0.03, np.ones(200))
        adj = sample_adjacency(P, np.random.default_rng(1))
        assert abs(adj - adj.T).max() == 0
        assert adj.diagonal().sum() == 0


class TestValidatePlanted:
    """validate_planted reports every structural defect."""

    def test_rejects_disconnected_graph(self) -> None:
        adj = scipy.sparse.csr_matrix(
            np.array(
                [
                    [0, 1, 0, 0],
                    [1, 0, 0, 0],
                    [0, 0, 0, 1],
                    [0, 0, 1, 0],
                ],
                dtype=np.float64,
            )
        )
        errors = validate_planted(adj, np.array([0, 0, 1, 1]))
        assert any("Not connected" in e for e in errors)

    def test_reports_isolated_nodes(self) -> None:
        adj = scipy.sparse.csr_matrix(
            np.array([[0, 1, 0], [1, 0, 0], [0, 0, 0]], dtype=np.float64)
        )
        errors = validate_planted(adj, np.array([0, 0, 0]))
        assert any("1 isolated nodes" in e for e in errors)

    def test_reports_blocks_without_internal_edges(self) -> None:
        adj = scipy.sparse.csr_matrix(
            np.array([[0, 1, 1], [1, 0, 0], [1, 0, 0]], dtype=np.float64)
        )
        errors = validate_planted(adj, np.array([0, 1, 1]))
        assert errors == ["Blocks without internal edges: [0, 1]"]

    def test_valid_graph(self) -> None:
        adj = scipy.sparse.csr_matrix(
            np.array([[0, 1, 1], [1, 0, 1], [1, 1, 0]], dtype=np.float64)
        )
        assert validate_planted(adj, np.array([0, 0, 0])) == []


class TestGeneratePlantedPartition:
    """Tests for end-to-end planted-partition generation."""

    def test_generates_valid_graph(self) -> None:
        planted = generate_planted_partition(SMALL, seed=42)
        assert isinstance(planted, PlantedGraph)
        assert planted.graph.node_count == 60
        assert planted.block_assignments.shape == (60,)
        assert not planted.graph.directed

    def test_graph_is_connected(self) -> None:
        planted = generate_planted_partition(SMALL, seed=42)
        assert is_connected(planted.graph)

    def test_no_self_loops(self) -> None:
        planted = generate_planted_partition(SMALL, seed=42)
        assert all(e.source != e.target for e in planted.graph.edges())

    def test_node_ids_in_order(self) -> None:
        planted = generate_planted_partition(SMALL, seed=42)
        assert list(planted.graph.nodes()) == list(range(60))

    def test_degree_correction_heterogeneity(self) -> None:
        config = GeneratorConfig(n=400, K=4, p_in=0.3, p_out=0.03, degree_correction=True)
        planted = generate_planted_partition(config, seed=42)
        degrees = np.array([planted.graph.degree(v) for v in planted.graph.nodes()])
        cv = degrees.std() / degrees.mean()
        assert cv > 0.3, f"Realized degree CV too low: {cv}"

    def test_reproducibility_same_seed(self) -> None:
        g1 = generate_planted_partition(SMALL, seed=7).graph
        g2 = generate_planted_partition(SMALL, seed=7).graph
        assert list(g1.edges()) == list(g2.edges())

    def test_different_seed_different_graph(self) -> None:
        g1 = generate_planted_partition(SMALL, seed=7).graph
        g2 = generate_planted_partition(SMALL, seed=8).graph
        assert list(g1.edges()) != list(g2.edges())

    def test_impossible_config_raises(self) -> None:
        config = GeneratorConfig(n=10, K=2, p_in=0.0, p_out=0.0)
        with pytest.raises(GraphGenerationError, match="after 3 attempts"):
            generate_planted_partition(config, seed=0, max_retries=3)

    def test_retry_on_failure(self) -> None:
        """Verify retry logic is invoked when validation fails."""
        call_count = 0
        original_validate = validate_planted

        def mock_validate(*args, **kwargs):
            nonlocal call_count
            call_count += 1
            if call_count <= 2:
                return ["Simulated failure"]
            return original_validate(*args, **kwargs)

        with patch(
            "graphkit.graph.generators.validate_planted", side_effect=mock_validate
        ):
            planted = generate_planted_partition(SMALL, seed=42)

        assert call_count >= 3, "Should have retried at least twice"
        assert planted.attempt >= 2
        assert planted.generation_seed == 42 + planted.attempt
