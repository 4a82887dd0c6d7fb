"""
Coordinate transforms between world space and chunk-local voxel space.

World positions are float triples. Chunk coordinates and voxel coordinates are
integer triples; a voxel coordinate always lies in ``[0, AXIS_SIZE)`` on every axis.
"""

import math
from enum import IntEnum
from typing import Iterator, Sequence, Set, Tuple

AXIS_SIZE = 32
CHUNK_VOLUME = AXIS_SIZE**3

IVec3 = Tuple[int, int, int]
Vec3 = Tuple[float, float, float]


class Side(IntEnum):
    """Cardinal voxel faces. The value is the face's bit in an occlusion mask."""

    RIGHT = 0
    LEFT = 1
    UP = 2
    DOWN = 3
    FRONT = 4
    BACK = 5

    @property
    def dir(self) -> IVec3:
        return _SIDE_DIRS[self]

    @property
    def normal(self) -> Vec3:
        dx, dy, dz = _SIDE_DIRS[self]
        return float(dx), float(dy), float(dz)


_SIDE_DIRS = {
    Side.RIGHT: (1, 0, 0),
    Side.LEFT: (-1, 0, 0),
    Side.UP: (0, 1, 0),
    Side.DOWN: (0, -1, 0),
    Side.FRONT: (0, 0, 1),
    Side.BACK: (0, 0, -1),
}

SIDES: Tuple[Side, ...] = tuple(Side)
SIDE_COUNT = len(SIDES)


def offset(coord: IVec3, direction: IVec3) -> IVec3:
    return coord[0] + direction[0], coord[1] + direction[1], coord[2] + direction[2]


def neighbors(coord: IVec3) -> Iterator[IVec3]:
    """Yield the 6 face-adjacent coordinates of ``coord`` in ``SIDES`` order."""
    for side in SIDES:
        yield offset(coord, side.dir)


def chunk_to_world(chunk: IVec3) -> Vec3:
    """World-space origin (minimum corner) of a chunk."""
    return (
        float(chunk[0] * AXIS_SIZE),
        float(chunk[1] * AXIS_SIZE),
        float(chunk[2] * AXIS_SIZE),
    )


def to_chunk(world: Sequence[float]) -> IVec3:
    """Chunk coordinate containing the world position."""
    x, y, z = (math.floor(v) // AXIS_SIZE for v in world)
    return x, y, z


def to_local(world: Sequence[float]) -> IVec3:
    """
    Convert a world position to the voxel coordinate inside its chunk.

    Components are floored first, so (1.1, -0.3, 17.5) becomes (1, -1, 17), and
    then reduced with the euclidean remainder, so -1 maps to AXIS_SIZE - 1.
    Python's ``%`` with a positive modulus already has euclidean semantics.
    """
    x, y, z = (math.floor(v) % AXIS_SIZE for v in world)
    return x, y, z


def to_world(local: IVec3, chunk: IVec3) -> Vec3:
    ox, oy, oz = chunk_to_world(chunk)
    return ox + local[0], oy + local[1], oz + local[2]


def is_at_bounds(voxel: IVec3) -> bool:
    """True if the voxel touches any face of its chunk."""
    return any(v == 0 or v == AXIS_SIZE - 1 for v in voxel)


def get_boundary_dir(voxel: IVec3) -> Set[IVec3]:
    """
    Outward unit directions of every chunk face the voxel touches.

    An edge voxel yields two directions and a corner voxel three. Interior
    voxels yield an empty set.
    """
    dirs = set()
    for axis, v in enumerate(voxel):
        step = 0
        if v == 0:
            step = -1
        elif v == AXIS_SIZE - 1:
            step = 1
        if step:
            unit = [0, 0, 0]
            unit[axis] = step
            dirs.add((unit[0], unit[1], unit[2]))
    return dirs


def validate_voxel(voxel: Sequence[int]) -> IVec3:
    """Coerce to an int triple, raising ``ValueError`` when outside the chunk."""
    if len(voxel) != 3:
        raise ValueError(f"Voxel coordinate must have 3 components, got {voxel!r}")
    x, y, z = (int(v) for v in voxel)
    if not (0 <= x < AXIS_SIZE and 0 <= y < AXIS_SIZE and 0 <= z < AXIS_SIZE):
        raise ValueError(f"Voxel coordinate {voxel!r} outside [0, {AXIS_SIZE})")
    return x, y, z
