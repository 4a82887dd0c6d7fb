"""
Dense chunk storage.

Each chunk is a cube of ``AXIS_SIZE`` voxels per edge. Per-voxel data lives in
``ChunkStorage`` layers: fully populated numpy arrays indexed ``[x, y, z]``.
A chunk carries a voxel kind layer and a face occlusion layer.
"""

from typing import Optional, Sequence

import numpy as np

from voxel.coords import AXIS_SIZE, CHUNK_VOLUME, IVec3
from voxel import kinds
from voxel.kinds import KIND_DTYPE
from voxel.occlusion import FaceOcclusionMask

OCCLUSION_DTYPE = np.uint8

CHUNK_SHAPE = (AXIS_SIZE, AXIS_SIZE, AXIS_SIZE)


class ChunkStorage:
    """A dense per-voxel layer of a single dtype."""

    __slots__ = ("data",)

    def __init__(self, dtype=KIND_DTYPE, data: Optional[np.ndarray] = None):
        if data is None:
            data = np.zeros(CHUNK_SHAPE, dtype=dtype)
        elif data.size != CHUNK_VOLUME:
            raise ValueError(f"Chunk layer must hold {CHUNK_VOLUME} values, got {data.size}")
        self.data = data.reshape(CHUNK_SHAPE)

    @classmethod
    def from_flat(cls, values: Sequence[int], dtype=KIND_DTYPE) -> "ChunkStorage":
        """Build a layer from ``AXIS_SIZE ** 3`` values in C order."""
        return cls(dtype, np.asarray(values, dtype=dtype))

    def _index(self, voxel: IVec3) -> IVec3:
        x, y, z = voxel
        if not (0 <= x < AXIS_SIZE and 0 <= y < AXIS_SIZE and 0 <= z < AXIS_SIZE):
            raise IndexError(f"Voxel {voxel} out of range")
        return x, y, z

    def get(self, voxel: IVec3) -> int:
        return int(self.data[self._index(voxel)])

    def set(self, voxel: IVec3, value: int) -> None:
        self.data[self._index(voxel)] = value

    def flat(self) -> np.ndarray:
        return self.data.reshape(-1)

    def copy(self) -> "ChunkStorage":
        return ChunkStorage(self.data.dtype, self.data.copy())

    def read_only(self) -> "ChunkStorage":
        storage = ChunkStorage(self.data.dtype, self.data.view())
        storage.data.flags.writeable = False
        return storage

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChunkStorage):
            return NotImplemented
        return self.data.dtype == other.data.dtype and np.array_equal(self.data, other.data)


class Chunk:
    """Voxel kinds plus derived occlusion for one chunk."""

    def __init__(
        self, kind: Optional[ChunkStorage] = None, occlusion: Optional[ChunkStorage] = None
    ):
        self.kind = kind if kind is not None else ChunkStorage(KIND_DTYPE)
        self.occlusion = occlusion if occlusion is not None else ChunkStorage(OCCLUSION_DTYPE)

    def get(self, voxel: IVec3) -> int:
        return self.kind.get(voxel)

    def set(self, voxel: IVec3, kind: int) -> None:
        self.kind.set(voxel, kind)

    def is_empty(self) -> bool:
        return bool(kinds.is_empty(self.kind.data).all())

    def solid_mask(self) -> np.ndarray:
        return ~kinds.is_empty(self.kind.data)

    def occlusion_at(self, voxel: IVec3) -> FaceOcclusionMask:
        return FaceOcclusionMask(self.occlusion.get(voxel))

    def set_occlusion(self, voxel: IVec3, mask: FaceOcclusionMask) -> None:
        self.occlusion.set(voxel, mask.bits)

    def view(self) -> "Chunk":
        """A snapshot sharing memory with this chunk whose layers reject writes."""
        return Chunk(self.kind.read_only(), self.occlusion.read_only())

    def __repr__(self) -> str:
        solid = int(np.count_nonzero(self.kind.data))
        return f"Chunk(solid={solid}/{CHUNK_VOLUME})"
