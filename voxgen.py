#!/usr/bin/env python3
"""
VoxelGenesis CLI - drive terrain genesis around a chunk

Actions:
1. pregen: generate and cache every chunk within the radius (optionally in parallel)
2. run: load the radius into a world, refresh occlusion, and report dirty chunks

Usage:
    python voxgen.py --config config.yaml --action [pregen|run] --radius 2
    python voxgen.py --help
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from voxel.world import VoxWorld
from worldgen.cache import ChunkCache
from worldgen.config import GenesisConfig, load_genesis_config
from worldgen.driver import GenesisDriver, cube_coords
from worldgen.genesis import DirtySet, GenesisPipeline, Refresh


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the genesis pipeline."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def parse_coord(text: str) -> Tuple[int, int, int]:
    """Parse ``"x,y,z"`` into a chunk coordinate."""
    parts = text.split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Expected x,y,z but got {text!r}")
    try:
        x, y, z = (int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Chunk coordinates must be integers: {text!r}")
    return x, y, z


def apply_overrides(config: GenesisConfig, args: argparse.Namespace) -> GenesisConfig:
    """Command-line flags take precedence over config.yaml. Returns a new, validated config."""
    overrides = {
        "cache_dir": args.cache_dir,
        "cache_format": args.format,
        "load_radius": args.radius,
        "num_workers": args.workers,
        "log_level": args.log_level,
    }
    return dataclasses.replace(
        config, **{name: value for name, value in overrides.items() if value is not None}
    )


def pregenerate(config: GenesisConfig, center: Tuple[int, int, int]) -> int:
    logger = logging.getLogger(__name__)
    cache = ChunkCache.from_config(config)
    written = cache.warm(cube_coords(center, config.load_radius), config.num_workers)
    logger.info(f"Pre-generated {len(written)} chunks into {config.cache_dir}")
    return len(written)


def run_world(config: GenesisConfig, center: Tuple[int, int, int]) -> VoxWorld:
    """Load the radius around ``center``, refresh occlusion, and log what the mesher would get."""
    logger = logging.getLogger(__name__)

    def report_dirty(world: VoxWorld, dirty: DirtySet) -> None:
        resident = sum(1 for coord in dirty if coord in world)
        logger.info(f"Mesher notified: {len(dirty)} dirty chunks ({resident} resident)")

    pipeline = GenesisPipeline(ChunkCache.from_config(config))
    driver = GenesisDriver(pipeline, on_dirty=report_dirty)

    queued = driver.load_radius(center, config.load_radius)
    logger.info(f"Loading {queued} chunks around {center}...")
    driver.run_cycle()

    for coord in driver.world.coords():
        driver.submit(Refresh(coord))
    driver.run_cycle()

    logger.info(f"World ready: {len(driver.world)} resident chunks")
    return driver.world


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the genesis CLI."""
    parser = argparse.ArgumentParser(description="VoxelGenesis terrain pipeline")
    parser.add_argument(
        "--config", type=Path, default=Path("config.yaml"), help="Path to config file"
    )
    parser.add_argument(
        "--action", choices=["pregen", "run"], default="run", help="Action to perform"
    )
    parser.add_argument(
        "--center", type=parse_coord, default=(0, 0, 0), help="Center chunk as x,y,z"
    )
    parser.add_argument("--radius", type=int, help="Chunk radius (overrides config)")
    parser.add_argument("--cache-dir", type=Path, help="Cache directory (overrides config)")
    parser.add_argument(
        "--format", choices=["binary", "text"], help="Cache format (overrides config)"
    )
    parser.add_argument(
        "--workers", type=int, help="Worker processes for pregen (overrides config)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides config)",
    )

    args = parser.parse_args(argv)

    try:
        config = apply_overrides(load_genesis_config(args.config), args)
    except (FileNotFoundError, ValueError) as e:
        setup_logging(args.log_level or "INFO")
        logging.getLogger(__name__).error(f"Invalid configuration: {e}")
        return 1

    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    try:
        if args.action == "pregen":
            pregenerate(config, args.center)
        else:
            run_world(config, args.center)
        return 0
    except Exception as e:
        logger.error(f"Genesis failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
