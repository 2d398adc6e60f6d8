import networkx as nx
import pytest

from netsci.networks import load_weighted_edges, to_adjacency


@pytest.fixture
def edges_setup(tmp_path):
    """
    Creates a small weighted edge list for testing.
    tmp_path is cleaned up automatically by pytest.
    """
    edges_content = "# source target weight\nA B 2\nB C\nA B 1.5\nD D 4\n"
    edges_file = tmp_path / "fake_edges.txt"
    edges_file.write_text(edges_content, encoding="utf-8")
    return str(edges_file)


def test_load_weighted_edges(edges_setup):
    """Repeated pairs accumulate and missing weights default to 1."""
    G = load_weighted_edges(edges_setup)

    assert set(G.nodes()) == {"A", "B", "C", "D"}
    assert G["A"]["B"]["weight"] == pytest.approx(3.5)
    assert G["B"]["C"]["weight"] == pytest.approx(1.0)
    assert G.has_edge("D", "D")


def test_load_directed_edges(edges_setup):
    G = load_weighted_edges(edges_setup, directed=True)

    assert G.is_directed()
    assert G.has_edge("A", "B")
    assert not G.has_edge("B", "A")


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_weighted_edges(str(tmp_path / "missing.txt"))


def test_load_empty_file(tmp_path):
    empty = tmp_path / "empty.txt"
    empty.write_text("", encoding="utf-8")

    G = load_weighted_edges(str(empty))
    assert G.number_of_nodes() == 0


def test_to_adjacency_symmetric_with_self_loop():
    """Undirected edges fill both rows; a self-loop is stored once on the diagonal."""
    G = nx.Graph()
    G.add_edge("a", "b", weight=2.0)
    G.add_edge("b", "c")
    G.add_edge("c", "c", weight=4.0)

    vertices, A = to_adjacency(G)
    dense = A.toarray()

    assert vertices == ["a", "b", "c"]
    assert dense[0, 1] == dense[1, 0] == 2.0
    assert dense[1, 2] == dense[2, 1] == 1.0
    assert dense[2, 2] == 4.0
    assert dense[0, 0] == 0.0


def test_to_adjacency_directed_is_symmetrized():
    G = nx.DiGraph()
    G.add_edge("x", "y", weight=3.0)

    vertices, A = to_adjacency(G)
    dense = A.toarray()

    assert dense[0, 1] == dense[1, 0] == 3.0


def test_to_adjacency_directed_sums_reciprocal_arcs():
    G = nx.DiGraph()
    G.add_edge("a", "b", weight=5.0)
    G.add_edge("b", "a", weight=1.0)
    G.add_edge("a", "a", weight=2.0)

    vertices, A = to_adjacency(G)
    dense = A.toarray()

    assert vertices == ["a", "b"]
    assert dense[0, 1] == dense[1, 0] == 6.0
    assert dense[0, 0] == 2.0


def test_to_adjacency_empty_graph():
    vertices, A = to_adjacency(nx.Graph())

    assert vertices == []
    assert A.shape == (0, 0)
