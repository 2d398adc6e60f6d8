import logging
import os
from typing import Any, Dict, Hashable, Iterable

import matplotlib.pyplot as plt

from netsci.constants import TINY_COMMUNITY_SIZE

logger = logging.getLogger(__name__)


def plot_community_sizes(
    communities: Iterable[Iterable[Hashable]],
    output_dir: str = "results",
    name: str = "Network",
) -> Dict[str, Any]:
    """
    Analyzes and plots the size distribution of detected communities.

    Args:
        communities (Iterable): Detected communities (vertex sets).
        output_dir (str): Directory to save the distribution plot.
        name (str): Label used in the plot title and file name.

    Returns:
        Dict: 'sizes' (sorted descending), 'tiny' (count below the size
        threshold) and 'path' (saved PNG).
    """
    logger.info(f"--- Community Size Distribution ({name}) ---")

    sizes = sorted((len(list(c)) for c in communities), reverse=True)
    tiny_communities = sum(1 for s in sizes if s < TINY_COMMUNITY_SIZE)

    logger.info(f"Total Communities: {len(sizes)}")
    logger.info(f"Top 5 Largest: {sizes[:5]}")
    logger.info(
        f"Number of 'Tiny' Communities (Size < {TINY_COMMUNITY_SIZE}): {tiny_communities}"
    )

    os.makedirs(output_dir, exist_ok=True)

    plt.figure(figsize=(8, 5))
    plt.hist(sizes, bins=50, color="teal", edgecolor="black")
    plt.title(f"Distribution of Community Sizes ({name}, Log Scale)")
    plt.xlabel("Number of Vertices in Community")
    plt.ylabel("Frequency")
    if sizes:
        plt.yscale("log")
    plt.grid(axis="y", alpha=0.5)

    save_path = os.path.join(
        output_dir, f"{name.lower().replace('-', '_')}_community_sizes.png"
    )
    plt.savefig(save_path)
    plt.close()
    logger.info(f"Distribution plot saved to {save_path}")

    return {"sizes": sizes, "tiny": tiny_communities, "path": save_path}
