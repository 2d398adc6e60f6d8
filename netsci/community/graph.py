import logging
from typing import Hashable, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np
from scipy.sparse import csr_matrix

from netsci.networks import to_adjacency

logger = logging.getLogger(__name__)


class CompressedGraph:
    """
    CSR adjacency for one level of the Louvain hierarchy.

    The neighbor range of node ``i`` is
    ``[cumulative_degree[i - 1], cumulative_degree[i])`` (starting at 0 for
    ``i = 0``) inside the parallel ``neighbor_ids`` / ``neighbor_weights``
    arrays. ``node_weight`` is the number of original vertices a node stands
    for, and the self-loop of a coarse node carries the (double-counted) edge
    weight collapsed inside it.

    Instances are read-only once built; a new one is produced per level.
    """

    def __init__(
        self,
        cumulative_degree: Sequence[int],
        neighbor_ids: Sequence[int],
        neighbor_weights: Sequence[float],
        node_weight: Optional[Sequence[int]] = None,
    ):
        self.cumulative_degree = np.asarray(cumulative_degree, dtype=np.int64)
        self.neighbor_ids = np.asarray(neighbor_ids, dtype=np.int64)
        self.neighbor_weights = np.asarray(neighbor_weights, dtype=float)
        self.node_count = len(self.cumulative_degree)

        if node_weight is None:
            node_weight = np.ones(self.node_count, dtype=np.int64)
        self.node_weight = np.asarray(node_weight, dtype=np.int64)

        self._validate()

        self._offsets = np.concatenate(([0], self.cumulative_degree)).astype(np.int64)
        self.entry_sources = np.repeat(
            np.arange(self.node_count, dtype=np.int64), np.diff(self._offsets)
        )

        n = self.node_count
        self.weighted_degrees = np.bincount(
            self.entry_sources, weights=self.neighbor_weights, minlength=n
        ).astype(float)

        # First self-loop entry of each node wins
        loop_entries = np.flatnonzero(self.neighbor_ids == self.entry_sources)
        loop_nodes, first = np.unique(
            self.entry_sources[loop_entries], return_index=True
        )
        self.self_loops = np.zeros(n, dtype=float)
        self.self_loops[loop_nodes] = self.neighbor_weights[loop_entries[first]]

        self.total_weight = float(self.weighted_degrees.sum())
        self.total_mass = int(self.node_weight.sum())

    def _validate(self) -> None:
        n = self.node_count
        if len(self.neighbor_ids) != len(self.neighbor_weights):
            raise ValueError(
                f"neighbor_ids ({len(self.neighbor_ids)}) and neighbor_weights "
                f"({len(self.neighbor_weights)}) must have the same length."
            )
        if len(self.node_weight) != n:
            raise ValueError(
                f"node_weight has {len(self.node_weight)} entries for {n} nodes."
            )
        if n and np.any(np.diff(self.cumulative_degree) < 0):
            raise ValueError("cumulative_degree must be non-decreasing.")
        end = int(self.cumulative_degree[-1]) if n else 0
        if (n and self.cumulative_degree[0] < 0) or end != len(self.neighbor_ids):
            raise ValueError(
                f"cumulative_degree must end at {len(self.neighbor_ids)}, got {end}."
            )
        if len(self.neighbor_ids) and (
            self.neighbor_ids.min() < 0 or self.neighbor_ids.max() >= n
        ):
            raise ValueError(f"Neighbor ids must lie in [0, {n}).")

    @classmethod
    def from_csr(
        cls, matrix: csr_matrix, node_weight: Optional[Sequence[int]] = None
    ) -> "CompressedGraph":
        """Builds a level from a square scipy CSR adjacency (duplicates are summed)."""
        A = csr_matrix(matrix)
        if A.shape[0] != A.shape[1]:
            raise ValueError(f"Adjacency must be square, got shape {A.shape}.")
        A.sum_duplicates()
        return cls(A.indptr[1:], A.indices, A.data, node_weight)

    @classmethod
    def from_network(
        cls, G: nx.Graph, weight: str = "weight"
    ) -> Tuple["CompressedGraph", List[Hashable]]:
        """
        Builds the level-0 graph from a NetworkX network.

        Args:
            G (nx.Graph): The network graph.
            weight (str): Edge attribute holding the weight.

        Returns:
            Tuple[CompressedGraph, List]: The level-0 graph and the ordered
            vertex list mapping node index to original identifier.
        """
        vertices, A = to_adjacency(G, weight=weight)
        return cls.from_csr(A), vertices

    def _check(self, node: int) -> None:
        if node < 0 or node >= self.node_count:
            raise IndexError(
                f"Incorrect vertex index {node}; the graph has {self.node_count} nodes."
            )

    def neighbor_range(self, node: int) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (neighbor ids, neighbor weights) of ``node``."""
        self._check(node)
        start, end = self._offsets[node], self._offsets[node + 1]
        return self.neighbor_ids[start:end], self.neighbor_weights[start:end]

    def degree(self, node: int) -> int:
        """Number of adjacency entries of ``node`` (its self-loop included)."""
        self._check(node)
        return int(self._offsets[node + 1] - self._offsets[node])

    def weighted_degree(self, node: int) -> float:
        """Sum of the weights in the node's neighbor range."""
        _, weights = self.neighbor_range(node)
        return float(weights.sum())

    def self_loop_weight(self, node: int) -> float:
        """Weight of the node's self-loop, 0.0 when it has none."""
        ids, weights = self.neighbor_range(node)
        hits = np.flatnonzero(ids == node)
        return float(weights[hits[0]]) if len(hits) else 0.0

    def max_edge_weight(self) -> float:
        """Largest single entry weight, 0.0 on a level without entries."""
        if not len(self.neighbor_weights):
            return 0.0
        return float(self.neighbor_weights.max())

    def to_csr(self) -> csr_matrix:
        """Returns the level as a scipy CSR matrix (used for inspection and tests)."""
        return csr_matrix(
            (self.neighbor_weights, self.neighbor_ids, self._offsets),
            shape=(self.node_count, self.node_count),
        )

    def __repr__(self) -> str:
        return (
            f"CompressedGraph(nodes={self.node_count}, "
            f"entries={len(self.neighbor_ids)}, total_weight={self.total_weight:g})"
        )
