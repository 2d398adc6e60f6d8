import logging
from typing import Dict, Hashable, Iterable, List, Sequence, Set

from netsci.community.coarsen import renumber_communities

logger = logging.getLogger(__name__)


class PartitionTracker:
    """
    Keeps the members (original vertex ids) of every live community.

    Before level 0 each original vertex sits alone, in original vertex
    order. After a level converges, ``merge`` folds the sets into the
    communities of that level, whose dense ids are the node ids of the
    next level.
    """

    def __init__(self, vertices: Iterable[Hashable]):
        self.vertices = list(vertices)
        self.communities: List[Set[Hashable]] = [{v} for v in self.vertices]

    def merge(self, n2c: Sequence[int]) -> List[Set[Hashable]]:
        """
        Unions the current sets according to a converged level assignment.

        Args:
            n2c (Sequence[int]): Community id of each current community/node.

        Returns:
            List[Set]: The merged communities, indexed by dense community id.
        """
        if len(n2c) != len(self.communities):
            raise ValueError(
                f"Assignment has {len(n2c)} entries for {len(self.communities)} communities."
            )

        dense, count = renumber_communities(n2c)
        merged: List[Set[Hashable]] = [set() for _ in range(count)]
        for members, comm in zip(self.communities, dense.tolist()):
            merged[comm] |= members

        self.communities = merged
        return merged

    def membership(self) -> Dict[Hashable, int]:
        """Returns the current partition as a vertex -> community index map."""
        return communities_to_membership(self.communities)


def communities_to_membership(
    communities: Iterable[Iterable[Hashable]],
) -> Dict[Hashable, int]:
    """Inverts a list of communities into a vertex -> community index map."""
    membership = {}
    for idx, members in enumerate(communities):
        for vertex in members:
            if vertex in membership:
                raise ValueError(f"Vertex {vertex!r} appears in more than one community.")
            membership[vertex] = idx
    return membership
