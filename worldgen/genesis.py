"""
Genesis pipeline: command-driven chunk lifecycle.

Commands load, unload, edit and refresh chunks in a ``VoxWorld``. Each returns
the set of chunk coordinates a downstream mesher must rebuild. The pipeline
keeps no state between commands besides its cache, so dirty sets are plain
return values owned by the caller.

Edits are never written back to the cache: cached files always hold the
pristine generated terrain, and edits live only while a chunk stays resident.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Set, Tuple, Union

from voxel.chunk import Chunk
from voxel.coords import IVec3, get_boundary_dir, is_at_bounds, neighbors, offset, validate_voxel
from voxel.kinds import validate_kind
from voxel.world import VoxWorld
from worldgen.cache import ChunkCache

logger = logging.getLogger(__name__)

DirtySet = Set[IVec3]
VoxelEdit = Tuple[IVec3, int]


@dataclass(frozen=True)
class Load:
    coord: IVec3


@dataclass(frozen=True)
class Unload:
    coord: IVec3


@dataclass(frozen=True)
class EditVoxels:
    coord: IVec3
    edits: Tuple[VoxelEdit, ...]


@dataclass(frozen=True)
class Refresh:
    coord: IVec3


Command = Union[Load, Unload, EditVoxels, Refresh]


class GenesisPipeline:
    """Applies genesis commands to a world, loading or generating terrain as needed."""

    def __init__(self, cache: ChunkCache):
        self.cache = cache

    def load_chunk(self, world: VoxWorld, coord: IVec3) -> DirtySet:
        """
        Make ``coord`` resident, from cache if possible, otherwise freshly generated.

        Returns:
            ``coord`` and its 6 neighbors, whose meshes may have been waiting
            on this chunk
        """
        path = self.cache.path_for(coord)
        if path.exists():
            kind = self.cache.load(path, coord)
            logger.debug(f"Loaded chunk {coord} from {path}")
        else:
            kind = self.cache.generate(coord)
            logger.debug(f"Generated chunk {coord}")

        world.add(coord, Chunk(kind))

        dirty = set(neighbors(coord))
        dirty.add(coord)
        return dirty

    def unload_chunk(self, world: VoxWorld, coord: IVec3) -> DirtySet:
        if world.remove(coord) is None:
            logger.warning(f"Trying to unload non-existing chunk {coord}")
            return set()
        return set(neighbors(coord))

    def update_voxel(self, world: VoxWorld, coord: IVec3, edits: Sequence[VoxelEdit]) -> DirtySet:
        """
        Apply voxel edits to a resident chunk in order.

        Edits on a chunk face also dirty the neighbor across that face; a corner
        voxel dirties up to three neighbors.

        Args:
            world: Target world
            coord: Chunk coordinate
            edits: ``(voxel, kind)`` pairs in chunk-local coordinates

        Returns:
            Union of dirty coordinates over all edits, empty if the chunk
            isn't resident

        Raises:
            ValueError: If an edit's voxel lies outside the chunk or its kind
                doesn't fit the kind layer. The chunk is left untouched.
        """
        chunk = world.get_mut(coord)
        if chunk is None:
            logger.warning(f"Failed to set {len(edits)} voxels. Chunk {coord} wasn't found.")
            return set()

        checked = [(validate_voxel(voxel), validate_kind(kind)) for voxel, kind in edits]
        logger.debug(f"Updating chunk {coord} with {len(checked)} edits")

        dirty: DirtySet = {coord}
        for voxel, kind in checked:
            chunk.set(voxel, kind)
            if is_at_bounds(voxel):
                for direction in get_boundary_dir(voxel):
                    dirty.add(offset(coord, direction))
        return dirty

    def update_chunk(self, world: VoxWorld, coord: IVec3) -> bool:
        """Recompute occlusion around a resident chunk. False if it isn't resident."""
        if coord not in world:
            return False
        world.update_neighborhood(coord)
        return True

    def execute(self, world: VoxWorld, command: Command) -> DirtySet:
        """Dispatch one command and return its dirty set."""
        if isinstance(command, Load):
            return self.load_chunk(world, command.coord)
        if isinstance(command, Unload):
            return self.unload_chunk(world, command.coord)
        if isinstance(command, EditVoxels):
            return self.update_voxel(world, command.coord, command.edits)
        if isinstance(command, Refresh):
            if not self.update_chunk(world, command.coord):
                logger.warning(f"Trying to refresh non-existing chunk {command.coord}")
                return set()
            dirty = set(neighbors(command.coord))
            dirty.add(command.coord)
            return dirty
        raise TypeError(f"Unknown genesis command: {command!r}")
