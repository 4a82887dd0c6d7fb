"""Sparse chunk store and neighborhood-dependent derived data."""

import logging
from typing import Dict, Iterator, List, Optional

import numpy as np

from voxel.chunk import OCCLUSION_DTYPE, Chunk
from voxel.coords import AXIS_SIZE, SIDES, IVec3, neighbors, offset

logger = logging.getLogger(__name__)


def compute_occlusion(
    solid: np.ndarray, neighbor_solids: Dict[int, Optional[np.ndarray]]
) -> np.ndarray:
    """
    Compute the occlusion layer for one chunk.

    A face is occluded when the voxel across it is solid. Faces on the chunk
    edge look into the neighboring chunk on that side; a missing neighbor leaves
    those faces visible.

    Args:
        solid: Boolean array of shape (AXIS_SIZE,)*3 for the chunk itself
        neighbor_solids: Solid masks of the resident neighbors, keyed by side

    Returns:
        uint8 array of per-voxel occlusion bits
    """
    size = AXIS_SIZE
    padded = np.zeros((size + 2,) * 3, dtype=bool)
    padded[1:-1, 1:-1, 1:-1] = solid

    for side in SIDES:
        neighbor = neighbor_solids.get(side)
        if neighbor is None:
            continue
        axis = next(i for i, step in enumerate(side.dir) if step)
        positive = side.dir[axis] > 0
        # Copy the neighbor's touching slab into the padding ring.
        dst: List[object] = [slice(1, -1)] * 3
        dst[axis] = size + 1 if positive else 0
        padded[tuple(dst)] = np.take(neighbor, 0 if positive else size - 1, axis=axis)

    bits = np.zeros(solid.shape, dtype=OCCLUSION_DTYPE)
    for side in SIDES:
        dx, dy, dz = side.dir
        across = padded[1 + dx : size + 1 + dx, 1 + dy : size + 1 + dy, 1 + dz : size + 1 + dz]
        bits |= across.astype(OCCLUSION_DTYPE) << int(side)
    return bits


class VoxWorld:
    """
    Sparse mapping from chunk coordinate to resident chunk.

    Not thread safe: a single driver must serialize every mutation.
    """

    def __init__(self):
        self._chunks: Dict[IVec3, Chunk] = {}

    def get(self, coord: IVec3) -> Optional[Chunk]:
        """Read-only view of the chunk at ``coord``, if resident."""
        chunk = self._chunks.get(coord)
        return chunk.view() if chunk is not None else None

    def get_mut(self, coord: IVec3) -> Optional[Chunk]:
        return self._chunks.get(coord)

    def add(self, coord: IVec3, chunk: Chunk) -> None:
        """Insert ``chunk`` at ``coord``, replacing any chunk already there."""
        if coord in self._chunks:
            logger.debug(f"Replacing resident chunk {coord}")
        self._chunks[coord] = chunk

    def remove(self, coord: IVec3) -> Optional[Chunk]:
        return self._chunks.pop(coord, None)

    def update_neighborhood(self, coord: IVec3) -> None:
        """Recompute occlusion for ``coord`` and its face-adjacent neighbors."""
        for target in (coord, *neighbors(coord)):
            chunk = self._chunks.get(target)
            if chunk is None:
                continue
            if chunk.is_empty():
                chunk.occlusion.data[...] = 0
                continue
            neighbor_solids = {}
            for side in SIDES:
                neighbor = self._chunks.get(offset(target, side.dir))
                if neighbor is not None:
                    neighbor_solids[side] = neighbor.solid_mask()
            chunk.occlusion.data[...] = compute_occlusion(chunk.solid_mask(), neighbor_solids)
            logger.debug(f"Updated occlusion for chunk {target}")

    def coords(self) -> Iterator[IVec3]:
        return iter(list(self._chunks))

    def __contains__(self, coord: object) -> bool:
        return coord in self._chunks

    def __len__(self) -> int:
        return len(self._chunks)
