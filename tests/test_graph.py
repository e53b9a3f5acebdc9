"""Tests for the mutable Graph model."""

import pytest

from graphkit.graph import (
    Edge,
    EdgeNotFoundError,
    Graph,
    GraphError,
    NodeNotFoundError,
    new_graph,
)


def _triangle() -> Graph:
    g = Graph()
    g.add_edges_from([("A", "B"), ("A", "C"), ("B", "C")])
    return g


class TestConstruction:
    """Adding nodes and edges."""

    def test_new_graph_is_empty(self) -> None:
        g = new_graph()
        assert g.node_count == 0
        assert g.edge_count == 0
        assert not g.directed

    def test_add_edge_creates_endpoints(self) -> None:
        g = Graph()
        g.add_edge("A", "B")
        assert g.has_node("A") and g.has_node("B")
        assert g.node_count == 2

    def test_default_weight_is_one(self) -> None:
        g = Graph()
        g.add_edge("A", "B")
        assert g.edge_weight("A", "B") == 1.0

    def test_add_existing_node_is_noop(self) -> None:
        g = Graph()
        g.add_node("A")
        version = g.version
        g.add_node("A")
        assert g.node_count == 1
        assert g.version == version

    def test_readding_edge_overwrites_weight(self) -> None:
        g = Graph()
        g.add_edge("A", "B", 2.0)
        g.add_edge("A", "B", 5.0)
        assert g.edge_count == 1
        assert g.edge_weight("B", "A") == 5.0

    def test_node_ids_of_mixed_types(self) -> None:
        g = Graph()
        g.add_edge(1, "one")
        g.add_edge(("t", 2), 1)
        assert g.node_count == 3
        assert g.has_edge("one", 1)


class TestUndirectedSymmetry:
    """Undirected edges are mirrored in both adjacency maps."""

    def test_edge_is_mirrored(self) -> None:
        g = _triangle()
        assert g.has_edge("A", "B") and g.has_edge("B", "A")
        assert g.adjacency("B")["A"] == 1.0

    def test_remove_edge_removes_mirror(self) -> None:
        g = _triangle()
        g.remove_edge("B", "A")
        assert not g.has_edge("A", "B")
        assert not g.has_edge("B", "A")
        assert g.edge_count == 2

    def test_edges_deduplicated(self) -> None:
        g = _triangle()
        edges = list(g.edges())
        assert len(edges) == 3
        assert Edge("A", "B", 1.0) in edges
        assert Edge("B", "A", 1.0) not in edges

    def test_self_loop_stored_once(self) -> None:
        g = Graph()
        g.add_edge("A", "A", 2.0)
        assert g.edge_count == 1
        assert g.degree("A") == 1
        assert list(g.edges()) == [Edge("A", "A", 2.0)]

    def test_degree_counts_neighbors(self) -> None:
        g = _triangle()
        assert g.degree("A") == 2
        assert sorted(g.neighbors("A")) == ["B", "C"]


class TestDirected:
    """Directed graphs track inbound adjacency."""

    def test_in_and_out_degree(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([("A", "B"), ("C", "B"), ("B", "D")])
        assert g.in_degree("B") == 2
        assert g.out_degree("B") == 1
        assert g.degree("B") == 3
        assert sorted(g.in_neighbors("B")) == ["A", "C"]
        assert list(g.out_neighbors("B")) == ["D"]

    def test_edge_not_mirrored(self) -> None:
        g = Graph(directed=True)
        g.add_edge("A", "B")
        assert g.has_edge("A", "B")
        assert not g.has_edge("B", "A")

    def test_edges_keep_direction(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([("A", "B"), ("B", "A")])
        assert g.edge_count == 2
        assert len(list(g.edges())) == 2

    def test_remove_node_updates_inbound(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([("A", "B"), ("B", "C"), ("C", "A")])
        g.remove_node("B")
        assert g.edge_count == 1
        assert g.out_degree("A") == 0
        assert g.in_degree("C") == 0

    def test_remove_node_with_self_loop(self) -> None:
        g = Graph(directed=True)
        g.add_edges_from([("A", "A"), ("A", "B"), ("C", "A")])
        g.remove_node("A")
        assert g.edge_count == 0
        assert g.node_count == 2


class TestRemoval:
    """Removing nodes and edges."""

    def test_remove_node_removes_incident_edges(self) -> None:
        g = _triangle()
        g.remove_node("A")
        assert g.node_count == 2
        assert g.edge_count == 1
        assert list(g.neighbors("B")) == ["C"]

    def test_remove_missing_edge_raises(self) -> None:
        g = Graph()
        g.add_nodes_from(["A", "B"])
        with pytest.raises(EdgeNotFoundError, match="'A' -> 'B'"):
            g.remove_edge("A", "B")

    def test_remove_edge_unknown_node_raises(self) -> None:
        g = _triangle()
        with pytest.raises(NodeNotFoundError, match="'Z'"):
            g.remove_edge("A", "Z")

    def test_remove_unknown_node_raises(self) -> None:
        with pytest.raises(NodeNotFoundError):
            Graph().remove_node("A")


class TestQueries:
    """Read-only queries and their failure modes."""

    def test_unknown_node_degree_raises(self) -> None:
        g = _triangle()
        with pytest.raises(NodeNotFoundError):
            g.degree("Z")
        with pytest.raises(NodeNotFoundError):
            list(g.neighbors("Z"))

    def test_errors_share_base_class(self) -> None:
        with pytest.raises(GraphError):
            Graph().out_degree("missing")

    def test_neighbors_restartable(self) -> None:
        g = _triangle()
        assert list(g.neighbors("A")) == list(g.neighbors("A"))

    def test_neighbors_snapshot_survives_mutation(self) -> None:
        g = _triangle()
        it = g.neighbors("A")
        g.add_edge("A", "D")
        assert sorted(it) == ["B", "C"]

    def test_adjacency_is_read_only(self) -> None:
        g = _triangle()
        with pytest.raises(TypeError):
            g.adjacency("A")["Z"] = 1.0  # type: ignore[index]

    def test_nodes_in_insertion_order(self) -> None:
        g = Graph()
        g.add_edge("z", "a")
        g.add_node("m")
        assert list(g.nodes()) == ["z", "a", "m"]


class TestIdentityAndVersion:
    """uid and version drive snapshot caching."""

    def test_uids_are_unique(self) -> None:
        assert Graph().uid != Graph().uid

    def test_every_mutation_bumps_version(self) -> None:
        g = Graph()
        versions = [g.version]
        g.add_node("A")
        versions.append(g.version)
        g.add_edge("A", "B")
        versions.append(g.version)
        g.remove_edge("A", "B")
        versions.append(g.version)
        g.remove_node("B")
        versions.append(g.version)
        assert versions == sorted(set(versions))

    def test_copy_is_independent(self) -> None:
        g = _triangle()
        clone = g.copy()
        clone.remove_node("A")
        assert g.node_count == 3
        assert clone.uid != g.uid
        assert clone.edge_count == 1
