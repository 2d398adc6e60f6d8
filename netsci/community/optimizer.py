import logging
from typing import Dict, Optional

import numpy as np

from netsci.community.quality import QualityMetric
from netsci.constants import DEFAULT_IMPROVEMENT_EPSILON

logger = logging.getLogger(__name__)


class LevelOptimizer:
    """
    Local moving phase of Louvain for a single hierarchy level.

    Each sweep visits every node once in a fresh random order and moves it
    to the neighboring community with the strictly largest positive gain.
    Sweeps stop once a sweep makes no move or raises quality by no more
    than ``improvement_epsilon``.

    Args:
        metric (QualityMetric): Aggregates of the level being optimized.
        improvement_epsilon (float): Minimum per-sweep quality increase to keep sweeping.
        rng (np.random.Generator): Source of the node visiting order.
    """

    def __init__(
        self,
        metric: QualityMetric,
        improvement_epsilon: float = DEFAULT_IMPROVEMENT_EPSILON,
        rng: Optional[np.random.Generator] = None,
    ):
        self.metric = metric
        self.graph = metric.graph
        self.improvement_epsilon = improvement_epsilon
        self.rng = rng if rng is not None else np.random.default_rng()

        self._offsets = [0] + self.graph.cumulative_degree.tolist()
        self._ids = self.graph.neighbor_ids.tolist()
        self._weights = self.graph.neighbor_weights.tolist()
        self._degrees = self.graph.weighted_degrees.tolist()

        self.sweeps = 0
        self.moves = 0

    def neighbor_communities(self, node: int) -> Dict[int, float]:
        """
        Weight shared by ``node`` with each neighboring community.

        The node's own community comes first (weight 0.0 if it has no link
        there), the rest follow adjacency order. Self-loops are ignored.
        """
        n2c = self.metric.n2c
        shared = {n2c[node]: 0.0}
        for i in range(self._offsets[node], self._offsets[node + 1]):
            neighbor = self._ids[i]
            if neighbor == node:
                continue
            comm = n2c[neighbor]
            shared[comm] = shared.get(comm, 0.0) + self._weights[i]
        return shared

    def sweep(self) -> int:
        """Relocates every node once; returns the number of nodes that changed community."""
        metric = self.metric
        moves = 0

        for node in self.rng.permutation(metric.size).tolist():
            node_comm = metric.n2c[node]
            w_degree = self._degrees[node]
            shared = self.neighbor_communities(node)

            metric.remove(node, node_comm, shared[node_comm])

            # Default choice is the former community
            best_comm = node_comm
            best_shared = shared[node_comm]
            best_increase = 0.0
            for comm, weight in shared.items():
                increase = metric.gain(node, comm, weight, w_degree)
                if increase > best_increase:
                    best_comm = comm
                    best_shared = weight
                    best_increase = increase

            metric.insert(node, best_comm, best_shared)
            if best_comm != node_comm:
                moves += 1

        self.sweeps += 1
        self.moves += moves
        return moves

    def run(self) -> bool:
        """
        Sweeps until convergence.

        Returns:
            bool: True if at least one node changed community at this level.
        """
        improvement = False
        new_quality = self.metric.quality()

        while True:
            cur_quality = new_quality
            moves = self.sweep()
            new_quality = self.metric.quality()

            logger.debug(
                f"  Sweep {self.sweeps}: {moves} moves, quality "
                f"{cur_quality:.6f} -> {new_quality:.6f}"
            )

            if moves > 0:
                improvement = True
            if moves == 0 or new_quality - cur_quality <= self.improvement_epsilon:
                break

        return improvement
