"""
Procedural terrain generation.

Heights come from fractal Brownian motion over OpenSimplex noise sampled at each
column's world (x, z). The generator is a pure function of the chunk coordinate
and seed: no I/O, no hidden state beyond the seeded noise tables.
"""

import logging
from typing import Optional

import numpy as np
import opensimplex

from voxel.chunk import KIND_DTYPE, ChunkStorage
from voxel.coords import AXIS_SIZE, IVec3, chunk_to_world
from voxel.kinds import EMPTY, SOLID
from worldgen.config import DEFAULT_SEED, NoiseConfig

logger = logging.getLogger(__name__)


class TerrainGenerator:
    """Heightmap terrain: each column is solid from the chunk floor up to the noise height."""

    def __init__(self, seed: int = DEFAULT_SEED, noise: Optional[NoiseConfig] = None):
        self.seed = seed
        self.noise = noise or NoiseConfig()
        # One noise table per octave, seeded like FastNoise's fractal octaves.
        self._octaves = [
            opensimplex.OpenSimplex(seed=self.seed + i) for i in range(self.noise.octaves)
        ]
        amplitude = 1.0
        bounding = 0.0
        for _ in range(self.noise.octaves):
            bounding += amplitude
            amplitude *= self.noise.gain
        self._fractal_bounding = 1.0 / bounding

        logger.debug(f"TerrainGenerator initialized with seed={self.seed}")

    def sample(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        """
        Fractal noise over a grid of world coordinates.

        Args:
            xs: World X coordinates, shape (n,)
            zs: World Z coordinates, shape (m,)

        Returns:
            Array of shape (n, m) with values in [-1, 1], indexed [x, z]
        """
        xs = np.asarray(xs, dtype=np.float64) * self.noise.frequency
        zs = np.asarray(zs, dtype=np.float64) * self.noise.frequency
        total = np.zeros((len(xs), len(zs)), dtype=np.float64)
        amplitude = 1.0
        for table in self._octaves:
            # noise2array returns shape (len(y), len(x)); pass z as y and transpose.
            total += table.noise2array(xs, zs).T * amplitude
            xs = xs * self.noise.lacunarity
            zs = zs * self.noise.lacunarity
            amplitude *= self.noise.gain
        return np.clip(total * self._fractal_bounding, -1.0, 1.0)

    def column_heights(self, coord: IVec3) -> np.ndarray:
        """World heights for the chunk's AXIS_SIZE x AXIS_SIZE columns."""
        origin_x, _, origin_z = chunk_to_world(coord)
        offsets = np.arange(AXIS_SIZE, dtype=np.float64)
        h = self.sample(origin_x + offsets, origin_z + offsets)
        return ((h + 1.0) / 2.0) * (2 * AXIS_SIZE)

    def generate(self, coord: IVec3) -> ChunkStorage:
        """
        Produce the voxel kind layer for one chunk.

        Args:
            coord: Chunk coordinate

        Returns:
            Kind layer with columns filled with SOLID up to the local height
        """
        origin_y = chunk_to_world(coord)[1]
        local_heights = self.column_heights(coord) - origin_y
        # Truncate toward zero; non-positive heights leave the column empty.
        ends = np.clip(np.where(local_heights > 0, local_heights, 0).astype(np.int64), 0, AXIS_SIZE)

        ys = np.arange(AXIS_SIZE)
        filled = ys[np.newaxis, :, np.newaxis] < ends[:, np.newaxis, :]
        kind = np.where(filled, SOLID, EMPTY).astype(KIND_DTYPE)

        logger.debug(f"Generated chunk {coord}: {int(filled.sum())} solid voxels")
        return ChunkStorage(KIND_DTYPE, kind)
