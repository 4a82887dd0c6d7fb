"""
Voxel data model for VoxelGenesis.

Coordinate transforms, dense chunk layers, face occlusion masks and the sparse
chunk store.
"""

from .chunk import Chunk, ChunkStorage
from .coords import AXIS_SIZE, SIDES, Side
from .occlusion import FaceOcclusionMask
from .world import VoxWorld

__all__ = ["AXIS_SIZE", "SIDES", "Side", "Chunk", "ChunkStorage", "FaceOcclusionMask", "VoxWorld"]
