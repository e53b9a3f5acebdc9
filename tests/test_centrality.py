"""Tests for power-iteration and degree centralities."""

import numpy as np
import pytest

from graphkit.centrality import (
    ConvergenceStatus,
    PowerIterationState,
    degree_centrality,
    eigenvector_centrality,
    katz_centrality,
    pagerank,
    rescale_unit_interval,
)
from graphkit.config import CentralityOptions, KatzOptions, PageRankOptions
from graphkit.graph import CompactRowGraph, Graph, NodeNotFoundError


def _star(leaves: int) -> Graph:
    g = Graph()
    for i in range(1, leaves + 1):
        g.add_edge(0, i)
    return g


def _random_connected(n: int, p: float, seed: int) -> Graph:
    rng = np.random.default_rng(seed)
    g = Graph()
    for i in range(n - 1):
        g.add_edge(i, i + 1)
    for i in range(n):
        for j in range(i + 2, n):
            if rng.random() < p:
                g.add_edge(i, j)
    return g


class TestPowerIterationState:
    """Running -> Converged | MaxIterationsReached."""

    def test_converges_on_small_delta(self) -> None:
        state = PowerIterationState(max_iterations=10, tolerance=1e-3)
        assert state.advance(0.5) is ConvergenceStatus.RUNNING
        assert state.advance(1e-4) is ConvergenceStatus.CONVERGED
        assert state.iteration == 2
        assert not state.running

    def test_stops_at_max_iterations(self) -> None:
        state = PowerIterationState(max_iterations=2, tolerance=1e-9)
        state.advance(1.0)
        assert state.advance(1.0) is ConvergenceStatus.MAX_ITERATIONS_REACHED

    def test_cannot_advance_finished(self) -> None:
        state = PowerIterationState(max_iterations=1, tolerance=1e-9)
        state.advance(1.0)
        with pytest.raises(RuntimeError, match="finished"):
            state.advance(0.0)


class TestRescale:
    """Min-max normalization."""

    def test_general(self) -> None:
        out = rescale_unit_interval(np.array([2.0, 4.0, 3.0]))
        np.testing.assert_allclose(out, [0.0, 1.0, 0.5])

    def test_all_equal_positive(self) -> None:
        np.testing.assert_array_equal(rescale_unit_interval(np.full(3, 0.2)), [1, 1, 1])

    def test_all_zero(self) -> None:
        np.testing.assert_array_equal(rescale_unit_interval(np.zeros(3)), [0, 0, 0])

    def test_empty(self) -> None:
        assert rescale_unit_interval(np.array([])).size == 0


class TestEigenvectorCentrality:
    """Shifted power iteration."""

    def test_normalized_in_unit_interval(self) -> None:
        result = eigenvector_centrality(_random_connected(40, 0.1, seed=3))
        values = np.array(list(result.scores.values()))
        assert values.min() >= 0.0
        assert values.max() <= 1.0
        assert values.max() == pytest.approx(1.0)

    def test_star_center_highest(self) -> None:
        result = eigenvector_centrality(_star(6), CentralityOptions(shift=True))
        assert result.converged
        assert result.scores[0] == 1.0
        assert all(result.scores[i] == pytest.approx(0.0) for i in range(1, 7))

    def test_bipartite_converges_with_shift(self) -> None:
        g = Graph()
        for i in range(9):
            g.add_edge(i, i + 1)
        result = eigenvector_centrality(
            g, CentralityOptions(max_iterations=2000, shift=True)
        )
        assert result.status is ConvergenceStatus.CONVERGED

    def test_bipartite_oscillates_without_shift(self) -> None:
        result = eigenvector_centrality(_star(4), CentralityOptions(max_iterations=50))
        assert result.status is ConvergenceStatus.MAX_ITERATIONS_REACHED

    def test_shift_keeps_fixed_point(self) -> None:
        g = _random_connected(25, 0.2, seed=9)
        plain = eigenvector_centrality(
            g, CentralityOptions(max_iterations=5000, tolerance=1e-10)
        )
        shifted = eigenvector_centrality(
            g, CentralityOptions(max_iterations=5000, tolerance=1e-10, shift=True)
        )
        for node in g.nodes():
            assert shifted.scores[node] == pytest.approx(plain.scores[node], abs=1e-6)

    def test_directed_acyclic_reaches_zero(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([("a", "b"), ("b", "c")])
        result = eigenvector_centrality(g, CentralityOptions(normalized=False))
        assert result.scores == {"a": 0.0, "b": 0.0, "c": 0.0}
        assert result.status is ConvergenceStatus.CONVERGED
        assert result.iterations == 3

    def test_isolated_node_scores_exactly_zero(self) -> None:
        g = Graph()
        g.add_edge("a", "b")
        g.add_node("c")
        result = eigenvector_centrality(g, CentralityOptions(normalized=False))
        assert result.scores["c"] == 0.0
        assert result.scores["a"] == pytest.approx(result.scores["b"])
        assert result.converged

    def test_matches_dense_eigenvector(self) -> None:
        g = _random_connected(30, 0.15, seed=8)
        options = CentralityOptions(
            max_iterations=5000, tolerance=1e-12, normalized=False
        )
        result = eigenvector_centrality(g, options)
        dense = CompactRowGraph.from_graph(g).to_scipy().toarray()
        _, vectors = np.linalg.eigh(dense)
        expected = np.abs(vectors[:, -1])
        actual = np.array([result.scores[node] for node in g.nodes()])
        np.testing.assert_allclose(actual, expected, atol=1e-6)

    def test_edgeless_graph_all_zero(self) -> None:
        g = Graph()
        g.add_nodes_from("abc")
        result = eigenvector_centrality(g)
        assert result.scores == {"a": 0.0, "b": 0.0, "c": 0.0}
        assert result.status is ConvergenceStatus.CONVERGED

    def test_zero_initial_vector_all_zero(self) -> None:
        result = eigenvector_centrality(_star(3), initial={0: 0.0})
        assert set(result.scores.values()) == {0.0}

    def test_initial_unknown_node(self) -> None:
        with pytest.raises(NodeNotFoundError):
            eigenvector_centrality(_star(3), initial={"nope": 1.0})

    def test_initial_vector_same_fixed_point(self) -> None:
        g = _random_connected(20, 0.2, seed=1)
        options = CentralityOptions(max_iterations=2000, tolerance=1e-10)
        uniform = eigenvector_centrality(g, options)
        skewed = eigenvector_centrality(g, options, initial={0: 5.0, 1: 1.0})
        for node in g.nodes():
            assert skewed.scores[node] == pytest.approx(uniform.scores[node], abs=1e-6)

    def test_max_iterations_reported(self) -> None:
        result = eigenvector_centrality(
            _random_connected(30, 0.1, seed=2),
            CentralityOptions(max_iterations=1, tolerance=1e-12),
        )
        assert result.status is ConvergenceStatus.MAX_ITERATIONS_REACHED
        assert not result.converged
        assert result.iterations == 1

    def test_directed_scores_by_incoming(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([("a", "hub"), ("b", "hub"), ("c", "hub"), ("hub", "a")])
        result = eigenvector_centrality(
            g, CentralityOptions(max_iterations=1000, shift=True)
        )
        assert result.scores["hub"] >= result.scores["a"] > result.scores["b"]


class TestKatzCentrality:
    """Fixed-point x <- alpha A^T x + beta."""

    def _path(self) -> Graph:
        g = Graph()
        g.add_edges_from([("a", "b"), ("b", "c")])
        return g

    def test_larger_alpha_raises_distant_influence(self) -> None:
        raw_high = katz_centrality(self._path(), KatzOptions(alpha=0.2, normalized=False))
        raw_low = katz_centrality(self._path(), KatzOptions(alpha=0.05, normalized=False))
        assert raw_high.scores["c"] >= raw_low.scores["c"]
        gap_high = raw_high.scores["b"] - raw_high.scores["a"]
        gap_low = raw_low.scores["b"] - raw_low.scores["a"]
        assert gap_high > gap_low

    def test_matches_closed_form(self) -> None:
        g = _random_connected(15, 0.2, seed=4)
        alpha = 0.05
        result = katz_centrality(
            g, KatzOptions(alpha=alpha, normalized=False, tolerance=1e-12)
        )
        adjacency = CompactRowGraph.from_graph(g).to_scipy().toarray()
        expected = np.linalg.solve(
            np.eye(len(adjacency)) - alpha * adjacency.T, np.ones(len(adjacency))
        )
        actual = np.array([result.scores[node] for node in g.nodes()])
        np.testing.assert_allclose(actual, expected, rtol=1e-8)

    def test_normalized_in_unit_interval(self) -> None:
        result = katz_centrality(_random_connected(25, 0.1, seed=6))
        values = list(result.scores.values())
        assert min(values) == 0.0
        assert max(values) == 1.0

    def test_edgeless_all_ones_when_normalized(self) -> None:
        g = Graph()
        g.add_nodes_from("ab")
        result = katz_centrality(g)
        assert result.converged
        assert result.scores == {"a": 1.0, "b": 1.0}

    def test_divergent_alpha_hits_limit(self) -> None:
        g = _star(10)
        result = katz_centrality(g, KatzOptions(alpha=0.9, max_iterations=50))
        assert result.status is ConvergenceStatus.MAX_ITERATIONS_REACHED


class TestPageRank:
    """Damped random walk."""

    def test_sums_to_one(self) -> None:
        result = pagerank(
            _random_connected(30, 0.1, seed=5), PageRankOptions(max_iterations=500)
        )
        assert sum(result.scores.values()) == pytest.approx(1.0)
        assert result.converged

    def test_cycle_is_uniform(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([(0, 1), (1, 2), (2, 0)])
        result = pagerank(g)
        for score in result.scores.values():
            assert score == pytest.approx(1 / 3)

    def test_dangling_mass_redistributed(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([("a", "sink"), ("b", "sink")])
        result = pagerank(g, PageRankOptions(tolerance=1e-10))
        assert sum(result.scores.values()) == pytest.approx(1.0)
        assert result.scores["sink"] > result.scores["a"]

    def test_empty_graph(self) -> None:
        result = pagerank(Graph())
        assert result.scores == {}
        assert result.converged


class TestDegreeCentrality:
    """Closed-form degree scores."""

    def test_star_normalized(self) -> None:
        result = degree_centrality(_star(4))
        assert result.scores[0] == 1.0
        assert result.scores[1] == 0.25

    def test_unnormalized(self) -> None:
        result = degree_centrality(_star(4), normalized=False)
        assert result.scores[0] == 4

    def test_directed_within_unit_interval(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([("a", "b"), ("b", "a")])
        result = degree_centrality(g)
        assert result.scores == {"a": 1.0, "b": 1.0}
