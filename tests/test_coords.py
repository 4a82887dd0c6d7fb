"""
Tests for world/chunk-local coordinate transforms.
"""

import numpy as np
import pytest

from voxel.coords import (
    AXIS_SIZE,
    SIDES,
    Side,
    chunk_to_world,
    get_boundary_dir,
    is_at_bounds,
    neighbors,
    to_chunk,
    to_local,
    to_world,
    validate_voxel,
)


class TestToLocal:
    """Test suite for to_local / to_world."""

    def setup_method(self):
        self.rng = np.random.default_rng(1234)

    def test_known_positions(self):
        """Negative positions wrap to the far side of the chunk."""
        last = AXIS_SIZE - 1
        assert to_local((0.0, 0.0, 0.0)) == (0, 0, 0)
        assert to_local((1.3, 0.0, 0.0)) == (1, 0, 0)
        assert to_local((-0.3, 0.0, 0.0)) == (last, 0, 0)
        assert to_local((-0.3, AXIS_SIZE + 1.3, 0.0)) == (last, 1, 0)
        assert to_local((1.1, -0.3, AXIS_SIZE + 1.5)) == (1, last, 1)

    def test_exact_negative_multiple(self):
        assert to_local((-float(AXIS_SIZE), 0.0, 0.0)) == (0, 0, 0)
        assert to_local((-float(AXIS_SIZE) - 0.5, 0.0, 0.0)) == (AXIS_SIZE - 1, 0, 0)

    def test_round_trip_random(self):
        """to_local(to_world(v, c) + fraction) recovers v for any chunk."""
        for _ in range(1000):
            chunk = tuple(int(v) for v in self.rng.integers(-100, 100, size=3))
            voxel = tuple(int(v) for v in self.rng.integers(0, AXIS_SIZE, size=3))
            fraction = self.rng.random(3) * 0.9

            world = to_world(voxel, chunk)
            shifted = tuple(w + f for w, f in zip(world, fraction))

            assert to_local(world) == voxel
            assert to_local(shifted) == voxel, f"Failed to convert {world} ({fraction}) to local"

    def test_output_always_in_range(self):
        for position in self.rng.uniform(-1e5, 1e5, size=(500, 3)):
            local = to_local(tuple(position))
            assert all(0 <= v < AXIS_SIZE for v in local)

    def test_to_world_matches_chunk_origin(self):
        chunk = (-3, 7, 0)
        assert to_world((0, 0, 0), chunk) == chunk_to_world(chunk)
        assert to_world((1, 2, 3), chunk) == (-3 * AXIS_SIZE + 1.0, 7 * AXIS_SIZE + 2.0, 3.0)

    def test_to_chunk_floors(self):
        assert to_chunk((0.0, 0.0, 0.0)) == (0, 0, 0)
        assert to_chunk((-0.5, AXIS_SIZE - 0.01, float(AXIS_SIZE))) == (-1, 0, 1)

    def test_to_chunk_and_to_local_rebuild_position(self):
        position = (-40.25, 100.5, 7.75)
        chunk = to_chunk(position)
        local = to_local(position)
        rebuilt = to_world(local, chunk)
        assert all(r <= p < r + 1 for r, p in zip(rebuilt, position))


class TestBounds:
    """Test suite for boundary detection."""

    def test_interior_voxel(self):
        voxel = (1, AXIS_SIZE // 2, AXIS_SIZE - 2)
        assert not is_at_bounds(voxel)
        assert get_boundary_dir(voxel) == set()

    def test_face_voxels(self):
        assert is_at_bounds((0, 5, 5))
        assert get_boundary_dir((0, 5, 5)) == {(-1, 0, 0)}
        assert get_boundary_dir((5, AXIS_SIZE - 1, 5)) == {(0, 1, 0)}

    def test_edge_voxel(self):
        assert get_boundary_dir((AXIS_SIZE - 1, 5, 0)) == {(1, 0, 0), (0, 0, -1)}

    def test_corner_voxels_yield_three_directions(self):
        assert get_boundary_dir((0, 0, 0)) == {(-1, 0, 0), (0, -1, 0), (0, 0, -1)}
        last = AXIS_SIZE - 1
        assert get_boundary_dir((last, last, last)) == {(1, 0, 0), (0, 1, 0), (0, 0, 1)}


class TestSides:
    def test_side_order_and_dirs(self):
        assert [int(s) for s in SIDES] == [0, 1, 2, 3, 4, 5]
        assert Side.RIGHT.dir == (1, 0, 0)
        assert Side.LEFT.dir == (-1, 0, 0)
        assert Side.UP.dir == (0, 1, 0)
        assert Side.DOWN.dir == (0, -1, 0)
        assert Side.FRONT.dir == (0, 0, 1)
        assert Side.BACK.dir == (0, 0, -1)
        assert Side.DOWN.normal == (0.0, -1.0, 0.0)

    def test_neighbors(self):
        assert set(neighbors((0, 0, 0))) == {
            (1, 0, 0),
            (-1, 0, 0),
            (0, 1, 0),
            (0, -1, 0),
            (0, 0, 1),
            (0, 0, -1),
        }
        assert len(set(neighbors((5, -2, 9)))) == 6


def test_validate_voxel():
    assert validate_voxel([1, 2, 3]) == (1, 2, 3)
    with pytest.raises(ValueError):
        validate_voxel((AXIS_SIZE, 0, 0))
    with pytest.raises(ValueError):
        validate_voxel((-1, 0, 0))
    with pytest.raises(ValueError):
        validate_voxel((1, 2))
