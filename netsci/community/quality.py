import logging
from enum import Enum
from typing import Sequence, Union

import numpy as np

from netsci.community.graph import CompressedGraph
from netsci.constants import (
    DEFAULT_RESOLUTION,
    RESOLUTION_MAX,
    RESOLUTION_MIN,
    UNASSIGNED,
)

logger = logging.getLogger(__name__)


class QualityVariant(Enum):
    """Objective functions the Louvain optimizer can maximize."""

    MODULARITY = "modularity"
    GOLDBERG = "goldberg"
    RESOLUTION = "resolution"

    @classmethod
    def parse(cls, value: Union["QualityVariant", str]) -> "QualityVariant":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(v.value for v in cls)
            raise ValueError(
                f"Unknown quality variant {value!r}; expected one of: {choices}."
            ) from None


class QualityMetric:
    """
    Per-community aggregates of one hierarchy level and the quality they define.

    Every node starts in its own community (community id == node id).
    ``internal_weight[c]`` holds the double-counted weight of edges inside
    community ``c`` (self-loops included). The second aggregate depends on the
    variant: ``total_degree[c]`` (sum of member weighted degrees) for
    Modularity and Resolution, ``community_mass[c]`` (sum of member node
    weights) for Goldberg.

    Formulas, with ``2m`` the graph's total weight:

    - Modularity: Q = (1/2m) * sum_c [in_c - tot_c^2 / 2m]
    - Resolution: Q = (1 - t) + sum_c [t * in_c / 2m - (tot_c / 2m)^2]
    - Goldberg:   Q = (1 / (N * maxW)) * sum_c in_c / (2 * w_c)

    The Resolution gain is the Modularity gain; ``t`` only enters ``quality()``.
    """

    def __init__(
        self,
        graph: CompressedGraph,
        variant: Union[QualityVariant, str] = QualityVariant.MODULARITY,
        resolution: float = DEFAULT_RESOLUTION,
    ):
        self.graph = graph
        self.variant = QualityVariant.parse(variant)
        self.size = graph.node_count

        if not RESOLUTION_MIN <= resolution <= RESOLUTION_MAX:
            raise ValueError(
                f"Resolution must lie in [{RESOLUTION_MIN}, {RESOLUTION_MAX}], got {resolution}."
            )
        self.resolution = float(resolution)

        # Plain lists: the optimizer reads and writes these one scalar at a time
        self._degrees = graph.weighted_degrees.tolist()
        self._loops = graph.self_loops.tolist()
        self._mass = graph.node_weight.tolist()
        self._m2 = graph.total_weight

        self.n2c = list(range(self.size))
        self.internal_weight = list(self._loops)
        if self.variant is QualityVariant.GOLDBERG:
            self.community_mass = list(self._mass)
            self.max_weight = graph.max_edge_weight()
        else:
            self.total_degree = list(self._degrees)

    def _check(self, node: int, community: int, operation: str) -> None:
        if node < 0 or node >= self.size:
            raise IndexError(
                f"Node must be in the range [0, {self.size}), was {node} in {operation}."
            )
        if community < 0 or community >= self.size:
            raise IndexError(
                f"Community must be in the range [0, {self.size}), was {community} in {operation}."
            )

    def remove(self, node: int, community: int, shared_weight: float) -> None:
        """Takes ``node`` out of ``community``, with which it shares ``shared_weight``."""
        self._check(node, community, "remove")
        if self.n2c[node] != community:
            raise ValueError(
                f"Node {node} belongs to community {self.n2c[node]}, not {community}."
            )

        self.internal_weight[community] -= 2.0 * shared_weight + self._loops[node]
        if self.variant is QualityVariant.GOLDBERG:
            self.community_mass[community] -= self._mass[node]
        else:
            self.total_degree[community] -= self._degrees[node]

        self.n2c[node] = UNASSIGNED

    def insert(self, node: int, community: int, shared_weight: float) -> None:
        """Puts ``node`` into ``community``, with which it shares ``shared_weight``."""
        self._check(node, community, "insert")

        self.internal_weight[community] += 2.0 * shared_weight + self._loops[node]
        if self.variant is QualityVariant.GOLDBERG:
            self.community_mass[community] += self._mass[node]
        else:
            self.total_degree[community] += self._degrees[node]

        self.n2c[node] = community

    def gain(
        self,
        node: int,
        community: int,
        shared_weight: float,
        node_weighted_degree: float,
    ) -> float:
        """Quality change of inserting the (removed) ``node`` into ``community``."""
        self._check(node, community, "gain")

        if self.variant is QualityVariant.GOLDBERG:
            inc = self.internal_weight[community]
            wc = float(self.community_mass[community])
            wu = float(self._mass[node])
            loop = self._loops[node]

            # First member of an empty community
            if wc == 0.0:
                return (2.0 * shared_weight + loop) / (2.0 * wu)
            gain = (2.0 * shared_weight + loop + inc) / (2.0 * (wc + wu))
            return gain - inc / (2.0 * wc)

        if self._m2 == 0.0:
            return 0.0
        return shared_weight - self.total_degree[community] * node_weighted_degree / self._m2

    def quality(self) -> float:
        """Absolute quality of the current partition under the chosen variant."""
        if self.variant is QualityVariant.GOLDBERG:
            denominator = float(self.graph.total_mass) * self.max_weight
            if denominator == 0.0:
                return 0.0
            q = 0.0
            for inc, mass in zip(self.internal_weight, self.community_mass):
                if mass > 0:
                    q += inc / (2.0 * mass)
            return q / denominator

        m2 = self._m2
        if self.variant is QualityVariant.RESOLUTION:
            t = self.resolution
            q = 1.0 - t
            if m2 == 0.0:
                return q
            for inc, tot in zip(self.internal_weight, self.total_degree):
                if tot > 0.0:
                    q += t * inc / m2 - (tot / m2) * (tot / m2)
            return q

        if m2 == 0.0:
            return 0.0
        q = 0.0
        for inc, tot in zip(self.internal_weight, self.total_degree):
            if tot > 0.0:
                q += inc - tot * tot / m2
        return q / m2

    def assign(self, n2c: Sequence[int]) -> None:
        """
        Replaces the current assignment and recomputes every aggregate from scratch.

        Args:
            n2c (Sequence[int]): Community id per node, each in [0, size).
        """
        labels = np.asarray(n2c, dtype=np.int64)
        if len(labels) != self.size:
            raise ValueError(
                f"Assignment has {len(labels)} entries for {self.size} nodes."
            )
        if len(labels) and (labels.min() < 0 or labels.max() >= self.size):
            raise IndexError(f"Community ids must lie in [0, {self.size}).")

        g = self.graph
        sources = g.entry_sources
        inside = labels[sources] == labels[g.neighbor_ids]
        self.internal_weight = np.bincount(
            labels[sources[inside]],
            weights=g.neighbor_weights[inside],
            minlength=self.size,
        ).tolist()

        if self.variant is QualityVariant.GOLDBERG:
            self.community_mass = (
                np.bincount(labels, weights=g.node_weight, minlength=self.size)
                .astype(np.int64)
                .tolist()
            )
        else:
            self.total_degree = np.bincount(
                labels, weights=g.weighted_degrees, minlength=self.size
            ).tolist()

        self.n2c = labels.tolist()

    def __repr__(self) -> str:
        return (
            f"QualityMetric(variant={self.variant.value}, size={self.size}, "
            f"resolution={self.resolution:g})"
        )
