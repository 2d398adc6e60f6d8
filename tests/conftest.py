import networkx as nx
import pytest


@pytest.fixture
def karate_graph():
    """
    Standard benchmark graph (Zachary's Karate Club).
    Small, connected, weighted and well-understood.
    """
    return nx.karate_club_graph()


@pytest.fixture
def two_triangles():
    """
    Two triangles (0-1-2 and 3-4-5) bridged by the edge 2-3, unit weights.
    The split into triangles has modularity 5/14.
    """
    G = nx.Graph()
    G.add_edges_from([(0, 1), (1, 2), (0, 2), (3, 4), (4, 5), (3, 5), (2, 3)])
    return G


@pytest.fixture
def two_cliques():
    """Two 2-cliques of weight 5 joined by a weak edge of weight 1."""
    G = nx.Graph()
    G.add_edge("a", "b", weight=5.0)
    G.add_edge("c", "d", weight=5.0)
    G.add_edge("b", "c", weight=1.0)
    return G
