"""
Louvain Community Detection Package.

This package contains modules for:
1. Level Representation (compressed adjacency per hierarchy level)
2. Quality Functions (Modularity, Resolution, Goldberg)
3. Multi-level Optimization (local moving, coarsening, back-mapping)
4. Stability Analysis (seeded reruns, ARI / NMI agreement)
"""

# 1. Level Representation
from .graph import CompressedGraph

# 2. Quality Functions
from .quality import QualityMetric, QualityVariant

# 3. Multi-level Optimization
from .optimizer import LevelOptimizer
from .coarsen import coarsen, renumber_communities
from .partition import PartitionTracker, communities_to_membership
from .louvain import detect_communities, partition_quality, run_louvain

# 4. Stability Analysis
from .stability import analyze_stability, compare_partitions

__all__ = [
    # Representation
    "CompressedGraph",
    # Quality
    "QualityMetric",
    "QualityVariant",
    # Optimization
    "LevelOptimizer",
    "coarsen",
    "renumber_communities",
    "PartitionTracker",
    "communities_to_membership",
    "detect_communities",
    "partition_quality",
    "run_louvain",
    # Stability
    "analyze_stability",
    "compare_partitions",
]
