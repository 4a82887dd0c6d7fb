"""
Terrain genesis for VoxelGenesis.

This package loads, generates, caches and edits chunks through a command-driven
pipeline and reports which chunks need remeshing.
"""

from .cache import CacheExistsError, ChunkCache, ChunkCacheError
from .config import GenesisConfig, load_genesis_config
from .driver import GenesisDriver
from .genesis import EditVoxels, GenesisPipeline, Load, Refresh, Unload
from .terrain import TerrainGenerator

__all__ = [
    "CacheExistsError",
    "ChunkCache",
    "ChunkCacheError",
    "EditVoxels",
    "GenesisConfig",
    "GenesisDriver",
    "GenesisPipeline",
    "Load",
    "Refresh",
    "TerrainGenerator",
    "Unload",
    "load_genesis_config",
]
