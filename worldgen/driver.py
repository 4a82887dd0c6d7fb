"""
Sequential command driver.

Owns the single-writer loop over a world: commands queued with ``submit`` are
executed in order by ``run_cycle``, and the union of their dirty sets is handed
to the mesher callback once per cycle.
"""

import logging
from collections import deque
from typing import Callable, Deque, Iterator, Optional

from voxel.coords import IVec3
from voxel.world import VoxWorld
from worldgen.genesis import Command, DirtySet, GenesisPipeline, Load

logger = logging.getLogger(__name__)

DirtyCallback = Callable[[VoxWorld, DirtySet], None]


def cube_coords(center: IVec3, radius: int) -> Iterator[IVec3]:
    """All chunk coordinates within Chebyshev distance ``radius`` of ``center``."""
    cx, cy, cz = center
    for x in range(cx - radius, cx + radius + 1):
        for y in range(cy - radius, cy + radius + 1):
            for z in range(cz - radius, cz + radius + 1):
                yield x, y, z


class GenesisDriver:
    """Drives a ``GenesisPipeline`` against one world, one command at a time."""

    def __init__(
        self,
        pipeline: GenesisPipeline,
        world: Optional[VoxWorld] = None,
        on_dirty: Optional[DirtyCallback] = None,
    ):
        self.pipeline = pipeline
        self.world = world if world is not None else VoxWorld()
        self.on_dirty = on_dirty
        self._queue: Deque[Command] = deque()
        self.cycles = 0

    def submit(self, command: Command) -> None:
        self._queue.append(command)

    def load_radius(self, center: IVec3, radius: int) -> int:
        """Queue ``Load`` for every non-resident chunk in the cube around ``center``."""
        queued = 0
        for coord in cube_coords(center, radius):
            if coord not in self.world:
                self.submit(Load(coord))
                queued += 1
        return queued

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_cycle(self) -> DirtySet:
        """
        Execute every queued command and forward the combined dirty set.

        Returns:
            Union of the dirty sets of all commands executed this cycle
        """
        dirty: DirtySet = set()
        executed = 0
        while self._queue:
            command = self._queue.popleft()
            dirty |= self.pipeline.execute(self.world, command)
            executed += 1

        self.cycles += 1
        logger.debug(
            f"Cycle {self.cycles}: {executed} commands, {len(dirty)} dirty chunks, "
            f"{len(self.world)} resident"
        )
        if dirty and self.on_dirty is not None:
            self.on_dirty(self.world, dirty)
        return dirty
