import logging
from typing import Hashable, List, Tuple

import networkx as nx
import pandas as pd
from scipy.sparse import csr_matrix, diags

logger = logging.getLogger(__name__)


def load_weighted_edges(edges_file: str, directed: bool = False) -> nx.Graph:
    """
    Reads a whitespace-separated edge list into a weighted NetworkX graph.

    Each line holds ``source target [weight]``; lines starting with '#' are
    skipped. Missing weights count as 1.0 and repeated pairs accumulate weight.

    Args:
        edges_file (str): Path to the edge list.
        directed (bool): Build a DiGraph instead of an undirected Graph.

    Returns:
        nx.Graph: The weighted network (nx.DiGraph when directed).
    """
    logger.info(f"Loading edge list from {edges_file}...")
    G = nx.DiGraph() if directed else nx.Graph()

    try:
        # Vectorized Read: pandas handles comments and ragged weight columns
        df_edges = pd.read_csv(
            edges_file,
            sep=r"\s+",
            comment="#",
            header=None,
            names=["source", "target", "weight"],
            dtype={"source": str, "target": str},
        )
    except FileNotFoundError:
        logger.error(f"Could not find {edges_file}.")
        raise
    except pd.errors.EmptyDataError:
        logger.warning(f"{edges_file} contains no edges. Returning empty graph.")
        return G

    df_edges["weight"] = pd.to_numeric(df_edges["weight"], errors="coerce").fillna(1.0)

    # Collapse repeated pairs before touching the graph
    summed = df_edges.groupby(["source", "target"], sort=False)["weight"].sum()
    for (source, target), weight in summed.items():
        if G.has_edge(source, target):
            G[source][target]["weight"] += float(weight)
        else:
            G.add_edge(source, target, weight=float(weight))

    logger.info(
        f"Loaded {G.number_of_nodes()} nodes and {G.number_of_edges()} edges."
    )
    return G


def to_adjacency(
    G: nx.Graph, weight: str = "weight"
) -> Tuple[List[Hashable], csr_matrix]:
    """
    Snapshots a NetworkX graph as a dense vertex index plus CSR adjacency.

    The vertex list fixes the mapping between integer node index and original
    identifier once, so no per-edge id lookups are needed afterwards.
    Undirected edges appear in both rows; a self-loop appears once on the
    diagonal with its own weight. Directed graphs are symmetrized by summing
    reciprocal arcs (a->b with 5 and b->a with 1 become an edge of 6).

    Args:
        G (nx.Graph): The network graph.
        weight (str): Edge attribute holding the weight (missing means 1).

    Returns:
        Tuple[List, csr_matrix]: Ordered vertices and the (n x n) adjacency.
    """
    vertices = list(G.nodes())
    if not vertices:
        return vertices, csr_matrix((0, 0), dtype=float)

    A = csr_matrix(
        nx.to_scipy_sparse_array(
            G, nodelist=vertices, weight=weight, dtype=float, format="csr"
        )
    )

    if G.is_directed():
        logger.warning("Directed graph supplied; summing reciprocal arc weights.")
        # A directed self-loop is a single arc, so the diagonal is not doubled
        A = csr_matrix(A + A.T - diags(A.diagonal()))

    A.sum_duplicates()

    logger.debug(f"Adjacency snapshot: {A.shape} with {A.nnz} stored entries")
    return vertices, A
