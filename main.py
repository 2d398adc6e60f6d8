import argparse
import logging
import os
import sys

import pandas as pd

from netsci.community import QualityVariant, analyze_stability, run_louvain
from netsci.constants import (
    DEFAULT_IMPROVEMENT_EPSILON,
    DEFAULT_RESOLUTION,
)
from netsci.networks import load_weighted_edges
from netsci.visualization import plot_community_sizes


def setup_logging(debug_mode: bool = False) -> None:
    """Configures the logging format and level."""
    level = logging.DEBUG if debug_mode else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main(argv=None):
    """
    Community detection pipeline.
    Loads an edge list, runs multi-level Louvain and saves the partition.
    """
    # 1. CLI Argument Parsing
    parser = argparse.ArgumentParser(
        description="Detect communities in a weighted network with the Louvain method."
    )
    parser.add_argument(
        "--data",
        type=str,
        default="data/edges.txt",
        help="Path to the edge list (source target [weight]).",
    )
    parser.add_argument(
        "--directed",
        action="store_true",
        help="Read the edge list as directed (reciprocal arcs are summed for detection).",
    )
    parser.add_argument(
        "--metric",
        type=str,
        choices=[v.value for v in QualityVariant],
        default=QualityVariant.MODULARITY.value,
        help="Quality function to maximize.",
    )
    parser.add_argument(
        "--resolution",
        type=float,
        default=DEFAULT_RESOLUTION,
        help="Resolution t in [-1, 1] (resolution metric only).",
    )
    parser.add_argument(
        "--epsilon",
        type=float,
        default=DEFAULT_IMPROVEMENT_EPSILON,
        help="Minimum quality improvement per sweep.",
    )
    parser.add_argument(
        "--seed", type=int, default=0, help="Seed of the random node order."
    )
    parser.add_argument(
        "--stability",
        type=int,
        default=0,
        help="Number of seeded reruns for the stability analysis (0 disables it).",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="results",
        help="Directory to save the partition and plots.",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable verbose debug logging."
    )

    args = parser.parse_args(argv)
    setup_logging(args.debug)
    logger = logging.getLogger("Louvain")

    os.makedirs(args.output, exist_ok=True)
    logger.info(f"Results will be saved to: {args.output}")

    # 2. Network Construction
    logger.info(f"[Phase 1] Loading network from {args.data}...")
    if not os.path.exists(args.data):
        logger.error("Edge list not found. Please check your path.")
        sys.exit(1)

    G = load_weighted_edges(args.data, directed=args.directed)
    if G.number_of_nodes() == 0:
        logger.error("Network is empty. Exiting.")
        sys.exit(1)

    # 3. Community Detection
    logger.info("[Phase 2] Detecting Communities...")
    try:
        result = run_louvain(
            G,
            quality_variant=args.metric,
            resolution_param=args.resolution,
            improvement_epsilon=args.epsilon,
            seed=args.seed,
        )
    except ValueError as e:
        logger.error(f"Invalid parameters: {e}")
        sys.exit(1)

    for record in result["levels"]:
        logger.info(
            f"  Level {record['level']}: {record['nodes']} nodes, "
            f"{record['sweeps']} sweeps, {record['moves']} moves, "
            f"quality {record['quality']:.4f}"
        )

    # 4. Export
    logger.info("[Phase 3] Saving Partition...")
    df_members = pd.DataFrame(
        sorted(result["membership"].items(), key=lambda kv: (kv[1], str(kv[0]))),
        columns=["vertex", "community"],
    )
    csv_path = os.path.join(args.output, "communities.csv")
    df_members.to_csv(csv_path, index=False)
    logger.info(f"  Partition saved to: {csv_path}")

    plot_community_sizes(result["communities"], output_dir=args.output, name=args.metric)

    # 5. Stability (optional)
    if args.stability > 0:
        logger.info("[Phase 4] Testing Partition Stability...")
        analyze_stability(
            G,
            quality_variant=args.metric,
            n_iterations=args.stability,
            resolution_param=args.resolution,
            improvement_epsilon=args.epsilon,
            base_seed=args.seed,
        )

    logger.info(f"Done! All results saved to: {args.output}")


if __name__ == "__main__":
    main()
