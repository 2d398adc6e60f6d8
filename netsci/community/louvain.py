import logging
from typing import Any, Dict, Hashable, Iterable, List, Optional, Set, Union

import networkx as nx
import numpy as np

from netsci.community.coarsen import coarsen, renumber_communities
from netsci.community.graph import CompressedGraph
from netsci.community.optimizer import LevelOptimizer
from netsci.community.partition import PartitionTracker, communities_to_membership
from netsci.community.quality import QualityMetric, QualityVariant
from netsci.constants import DEFAULT_IMPROVEMENT_EPSILON, DEFAULT_RESOLUTION

logger = logging.getLogger(__name__)


def run_louvain(
    graph: nx.Graph,
    quality_variant: Union[QualityVariant, str] = QualityVariant.MODULARITY,
    resolution_param: float = DEFAULT_RESOLUTION,
    improvement_epsilon: float = DEFAULT_IMPROVEMENT_EPSILON,
    seed: Optional[int] = None,
    weight: str = "weight",
) -> Dict[str, Any]:
    """
    Multi-level Louvain community detection with per-level history.

    Levels alternate local moving and coarsening until a level makes no
    move or coarsening no longer shrinks the graph.

    Args:
        graph (nx.Graph): The network graph (directed graphs are symmetrized).
        quality_variant (QualityVariant | str): 'modularity', 'goldberg' or 'resolution'.
        resolution_param (float): t in [-1, 1], used by the resolution variant.
        improvement_epsilon (float): Minimum per-sweep quality increase to keep sweeping.
        seed (int, optional): Seed of the random node order; fixes the result.
        weight (str): Edge attribute holding the weight.

    Returns:
        Dict: 'communities' (List[Set]), 'membership' (vertex -> community),
        'levels' (one record per level) and 'quality' (the final partition
        scored on the input graph; per-level values stay in 'levels').
    """
    variant = QualityVariant.parse(quality_variant)
    rng = np.random.default_rng(seed)

    base_graph, vertices = CompressedGraph.from_network(graph, weight=weight)
    level_graph = base_graph
    tracker = PartitionTracker(vertices)
    levels: List[Dict[str, Any]] = []

    logger.info(
        f"Running Louvain ({variant.value}) on {len(vertices)} vertices, seed={seed}"
    )

    if level_graph.total_weight == 0.0:
        logger.warning("Graph carries no edge weight; every vertex stays a singleton.")

    while True:
        metric = QualityMetric(level_graph, variant, resolution_param)
        optimizer = LevelOptimizer(metric, improvement_epsilon, rng)
        improved = optimizer.run()
        quality = metric.quality()

        tracker.merge(metric.n2c)
        levels.append(
            {
                "level": len(levels),
                "nodes": level_graph.node_count,
                "communities": len(tracker.communities),
                "quality": quality,
                "improved": improved,
                "sweeps": optimizer.sweeps,
                "moves": optimizer.moves,
            }
        )
        logger.info(
            f"  Level {len(levels) - 1}: {level_graph.node_count} nodes -> "
            f"{len(tracker.communities)} communities, quality {quality:.6f}"
        )

        if not improved or level_graph.node_count == 0:
            break

        next_graph = coarsen(level_graph, metric.n2c)
        if next_graph.node_count == level_graph.node_count:
            break
        level_graph = next_graph

    communities = tracker.communities
    membership = tracker.membership()

    # Coarse levels rescale Goldberg by their own maxW; score on the input graph
    final_metric = QualityMetric(base_graph, variant, resolution_param)
    final_metric.assign([membership[v] for v in vertices])
    final_quality = final_metric.quality()
    logger.info(
        f"Louvain finished after {len(levels)} level(s): "
        f"{len(communities)} communities, quality {final_quality:.4f}"
    )

    return {
        "communities": communities,
        "membership": membership,
        "levels": levels,
        "quality": final_quality,
    }


def detect_communities(
    graph: nx.Graph,
    quality_variant: Union[QualityVariant, str] = QualityVariant.MODULARITY,
    resolution_param: float = DEFAULT_RESOLUTION,
    improvement_epsilon: float = DEFAULT_IMPROVEMENT_EPSILON,
    seed: Optional[int] = None,
) -> List[Set[Hashable]]:
    """
    Partitions a network into disjoint communities with the Louvain method.

    Returns:
        List[Set]: Communities of original vertex ids; every vertex appears
        in exactly one of them.
    """
    result = run_louvain(
        graph,
        quality_variant=quality_variant,
        resolution_param=resolution_param,
        improvement_epsilon=improvement_epsilon,
        seed=seed,
    )
    return result["communities"]


def partition_quality(
    graph: nx.Graph,
    communities: Iterable[Iterable[Hashable]],
    quality_variant: Union[QualityVariant, str] = QualityVariant.MODULARITY,
    resolution_param: float = DEFAULT_RESOLUTION,
    weight: str = "weight",
) -> float:
    """
    Scores an arbitrary partition of ``graph`` with one of the quality functions.

    Args:
        graph (nx.Graph): The network graph.
        communities (Iterable): Disjoint vertex sets covering every vertex.
        quality_variant (QualityVariant | str): Quality function to evaluate.
        resolution_param (float): t for the resolution variant.
        weight (str): Edge attribute holding the weight.

    Returns:
        float: Quality of the partition on the level-0 graph.
    """
    level_graph, vertices = CompressedGraph.from_network(graph, weight=weight)
    membership = communities_to_membership(communities)

    missing = [v for v in vertices if v not in membership]
    if missing or len(membership) != len(vertices):
        raise ValueError(
            f"Communities must partition the graph's {len(vertices)} vertices "
            f"({len(missing)} missing, {len(membership)} assigned)."
        )

    metric = QualityMetric(level_graph, quality_variant, resolution_param)
    dense, _ = renumber_communities([membership[v] for v in vertices])
    metric.assign(dense)
    return metric.quality()
