import networkx as nx
import numpy as np
import pytest

from netsci.community.graph import CompressedGraph


@pytest.fixture
def path_graph():
    """
    Path 0-1-2 (weights 1 and 2) with a self-loop of weight 3 on node 2.
    """
    return CompressedGraph(
        cumulative_degree=[1, 3, 5],
        neighbor_ids=[1, 0, 2, 1, 2],
        neighbor_weights=[1.0, 1.0, 2.0, 2.0, 3.0],
    )


def test_neighbor_range(path_graph):
    ids, weights = path_graph.neighbor_range(1)

    assert ids.tolist() == [0, 2]
    assert weights.tolist() == [1.0, 2.0]
    assert path_graph.degree(0) == 1
    assert path_graph.degree(1) == 2


def test_degrees_and_totals(path_graph):
    assert path_graph.node_count == 3
    assert path_graph.weighted_degree(0) == 1.0
    assert path_graph.weighted_degree(2) == 5.0
    assert path_graph.weighted_degrees.tolist() == [1.0, 3.0, 5.0]
    assert path_graph.total_weight == 9.0
    assert path_graph.total_mass == 3
    assert path_graph.node_weight.tolist() == [1, 1, 1]


def test_self_loops(path_graph):
    """Nodes without a self-loop report 0 rather than failing."""
    assert path_graph.self_loop_weight(0) == 0.0
    assert path_graph.self_loop_weight(2) == 3.0
    assert path_graph.self_loops.tolist() == [0.0, 0.0, 3.0]


def test_max_edge_weight(path_graph):
    assert path_graph.max_edge_weight() == 3.0
    assert CompressedGraph([0, 0], [], []).max_edge_weight() == 0.0


@pytest.mark.parametrize("node", [-1, 3, 10])
def test_invalid_node_index(path_graph, node):
    with pytest.raises(IndexError):
        path_graph.neighbor_range(node)
    with pytest.raises(IndexError):
        path_graph.self_loop_weight(node)


def test_invalid_construction():
    with pytest.raises(ValueError):
        CompressedGraph([2, 1], [0, 1], [1.0, 1.0])
    with pytest.raises(ValueError):
        CompressedGraph([1, 2], [0, 5], [1.0, 1.0])
    with pytest.raises(ValueError):
        CompressedGraph([1, 2], [0, 1], [1.0])
    with pytest.raises(ValueError):
        CompressedGraph([1, 2], [1, 0], [1.0, 1.0], node_weight=[1])


def test_from_network_karate(karate_graph):
    """Level 0 keeps node order and counts every undirected edge twice."""
    graph, vertices = CompressedGraph.from_network(karate_graph)

    assert vertices == list(karate_graph.nodes())
    assert graph.node_count == 34
    assert graph.total_weight == pytest.approx(2 * karate_graph.size(weight="weight"))
    assert graph.degree(0) == karate_graph.degree(0)
    assert graph.weighted_degree(0) == pytest.approx(
        karate_graph.degree(0, weight="weight")
    )
    assert np.all(graph.self_loops == 0.0)


def test_to_csr_matches_networkx(karate_graph):
    graph, vertices = CompressedGraph.from_network(karate_graph)
    expected = nx.to_numpy_array(karate_graph, nodelist=vertices, weight="weight")

    np.testing.assert_allclose(graph.to_csr().toarray(), expected)


def test_empty_graph():
    graph, vertices = CompressedGraph.from_network(nx.Graph())

    assert vertices == []
    assert graph.node_count == 0
    assert graph.total_weight == 0.0
