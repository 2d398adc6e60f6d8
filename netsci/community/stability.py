import logging
from typing import Any, Dict, Hashable, Iterable, List, Set, Union

import networkx as nx
import numpy as np
from sklearn.metrics import adjusted_rand_score, normalized_mutual_info_score

from netsci.community.louvain import run_louvain
from netsci.community.partition import communities_to_membership
from netsci.community.quality import QualityVariant
from netsci.constants import (
    DEFAULT_IMPROVEMENT_EPSILON,
    DEFAULT_RESOLUTION,
    DEFAULT_STABILITY_RUNS,
    STRONG_STRUCTURE_QUALITY,
)

logger = logging.getLogger(__name__)


def compare_partitions(
    communities_a: Iterable[Iterable[Hashable]],
    communities_b: Iterable[Iterable[Hashable]],
    nodes: List[Hashable],
) -> Dict[str, float]:
    """
    Agreement between two partitions of the same vertex set.

    Args:
        communities_a (Iterable): First partition (list of vertex sets).
        communities_b (Iterable): Second partition.
        nodes (List): Vertices to compare, in a fixed order.

    Returns:
        Dict: 'ari' (Adjusted Rand Index) and 'nmi' (Normalized Mutual Information).
    """
    membership_a = communities_to_membership(communities_a)
    membership_b = communities_to_membership(communities_b)

    labels_a = [membership_a[n] for n in nodes]
    labels_b = [membership_b[n] for n in nodes]

    return {
        "ari": float(adjusted_rand_score(labels_a, labels_b)),
        "nmi": float(normalized_mutual_info_score(labels_a, labels_b)),
    }


def analyze_stability(
    G: nx.Graph,
    quality_variant: Union[QualityVariant, str] = QualityVariant.MODULARITY,
    n_iterations: int = DEFAULT_STABILITY_RUNS,
    resolution_param: float = DEFAULT_RESOLUTION,
    improvement_epsilon: float = DEFAULT_IMPROVEMENT_EPSILON,
    base_seed: int = 0,
) -> Dict[str, Any]:
    """
    Runs Louvain with several seeds to test how stable the partition is.

    Run ``i`` uses seed ``base_seed + i``. Stability is the mean ARI of every
    later run against the first one.

    Args:
        G (nx.Graph): The network graph.
        quality_variant (QualityVariant | str): Quality function to optimize.
        n_iterations (int): Number of seeded runs (at least 1).
        resolution_param (float): t for the resolution variant.
        improvement_epsilon (float): Minimum per-sweep quality increase.
        base_seed (int): Seed of the first run.

    Returns:
        Dict: 'qualities', 'mean_quality', 'mean_ari', 'best_seed',
        'best_quality' and 'best_communities'.
    """
    if n_iterations < 1:
        raise ValueError(f"n_iterations must be at least 1, got {n_iterations}.")

    variant = QualityVariant.parse(quality_variant)
    logger.info(
        f"Running Louvain ({variant.value}) {n_iterations} times to test stability..."
    )

    partitions_list: List[List[Set[Hashable]]] = []
    qualities = []
    for i in range(n_iterations):
        result = run_louvain(
            G,
            quality_variant=variant,
            resolution_param=resolution_param,
            improvement_epsilon=improvement_epsilon,
            seed=base_seed + i,
        )
        partitions_list.append(result["communities"])
        qualities.append(result["quality"])

    nodes = list(G.nodes())
    ari_scores = [
        compare_partitions(partitions_list[0], partitions_list[i], nodes)["ari"]
        for i in range(1, n_iterations)
    ]

    mean_ari = float(np.mean(ari_scores)) if ari_scores else 1.0
    mean_quality = float(np.mean(qualities))

    logger.info("Stability Results:")
    logger.info(f"  Average Quality (Q):  {mean_quality:.4f}")
    logger.info(f"  Stability (Avg ARI):  {mean_ari:.4f}")

    if variant is QualityVariant.MODULARITY:
        if mean_quality > STRONG_STRUCTURE_QUALITY:
            logger.info(
                f"  -> Strong community structure found (Q > {STRONG_STRUCTURE_QUALITY})."
            )
        else:
            logger.warning(
                f"  -> Weak community structure (Q <= {STRONG_STRUCTURE_QUALITY}). "
                "Network may be well-mixed."
            )

    best_idx = int(np.argmax(qualities))

    return {
        "qualities": qualities,
        "mean_quality": mean_quality,
        "mean_ari": mean_ari,
        "best_seed": base_seed + best_idx,
        "best_quality": qualities[best_idx],
        "best_communities": partitions_list[best_idx],
    }
