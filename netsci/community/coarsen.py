import logging
from typing import Sequence, Tuple

import numpy as np
from scipy.sparse import csr_matrix

from netsci.community.graph import CompressedGraph

logger = logging.getLogger(__name__)


def renumber_communities(n2c: Sequence[int]) -> Tuple[np.ndarray, int]:
    """
    Maps the surviving community ids of a level onto dense ids 0..k-1.

    Dense ids follow the ascending order of the old ids; communities that
    ended up empty simply do not appear.

    Args:
        n2c (Sequence[int]): Community id per node.

    Returns:
        Tuple[np.ndarray, int]: Dense community id per node and the number k
        of communities.
    """
    labels = np.asarray(n2c, dtype=np.int64)
    if len(labels) and labels.min() < 0:
        raise ValueError("Cannot renumber an assignment with unassigned nodes.")
    uniq, dense = np.unique(labels, return_inverse=True)
    return dense.reshape(-1).astype(np.int64), len(uniq)


def coarsen(graph: CompressedGraph, n2c: Sequence[int]) -> CompressedGraph:
    """
    Collapses every community of a level into a single node of the next level.

    Each new node weighs the sum of its members' node weights and carries one
    self-loop holding all member-to-member entries (previous self-loops
    included, internal edges counted from both ends). Parallel entries
    between two communities are summed.

    Args:
        graph (CompressedGraph): The level that was just optimized.
        n2c (Sequence[int]): Converged community id per node of ``graph``.

    Returns:
        CompressedGraph: The next level.
    """
    if len(n2c) != graph.node_count:
        raise ValueError(
            f"Assignment has {len(n2c)} entries for {graph.node_count} nodes."
        )

    dense, count = renumber_communities(n2c)

    # One explicit diagonal entry per community guarantees exactly one self-loop
    diagonal = np.arange(count, dtype=np.int64)
    rows = np.concatenate((dense[graph.entry_sources], diagonal))
    cols = np.concatenate((dense[graph.neighbor_ids], diagonal))
    data = np.concatenate((graph.neighbor_weights, np.zeros(count)))

    A = csr_matrix((data, (rows, cols)), shape=(count, count))
    node_weight = np.bincount(dense, weights=graph.node_weight, minlength=count)

    coarse = CompressedGraph.from_csr(A, node_weight.astype(np.int64))
    logger.debug(f"Coarsened {graph.node_count} nodes into {coarse.node_count}")
    return coarse
