#!/usr/bin/env python3
"""
Worley Volumes - Runner

Build one Worley noise volume and report its summary.

Usage:
    python src/generate_noise.py --size 64 --grid-size 4
    python src/generate_noise.py --size 128 --grid-size 8 --seed 42 --summary outputs/summary.json
    python src/generate_noise.py --config configs/clouds.json --method brute_force
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add src to path
sys.path.insert(0, str(Path(__file__).parent))

from common.config import NoiseConfig, RandomMode, SearchMethod
from worley_noise.build import build_worley_volume

logger = logging.getLogger(__name__)


def build_config(args: argparse.Namespace) -> NoiseConfig:
    """Merge a JSON config (if any) with explicit command-line overrides."""
    config = NoiseConfig.from_json(args.config) if args.config else NoiseConfig()

    if args.size is not None:
        config.size = args.size
    if args.grid_size is not None:
        config.grid_size = args.grid_size
    if args.method is not None:
        config.method = SearchMethod(args.method)
    if args.seed is not None:
        config.seed = args.seed
        config.random_mode = RandomMode.SEEDED

    return config


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Worley Volumes - Generate a 3D cellular noise volume"
    )
    parser.add_argument(
        "--size", "-s",
        type=int,
        default=None,
        help="Voxels per axis"
    )
    parser.add_argument(
        "--grid-size", "-g",
        type=int,
        default=None,
        help="Feature point cells per axis"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (implies seeded mode)"
    )
    parser.add_argument(
        "--method", "-m",
        choices=[m.value for m in SearchMethod],
        default=None,
        help="Nearest feature point search"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="JSON config file"
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Write build metadata to this JSON file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        config = build_config(args)
        _, _, metadata = build_worley_volume(config)
    except (ValueError, OSError) as e:
        logger.error(f"Build failed: {e}")
        sys.exit(1)

    if args.summary:
        metadata.save(args.summary)
        logger.info(f"Summary saved to: {args.summary}")

    logger.info(f"\n{'='*60}")
    logger.info(
        f"COMPLETE: {metadata.size}^3 voxels, {metadata.n_feature_points} feature points, "
        f"{metadata.n_negative} negative values"
    )
    logger.info(f"{'='*60}")


if __name__ == "__main__":
    main()
