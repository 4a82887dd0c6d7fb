# Make the top-level packages importable when running pytest from a checkout
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from voxel.world import VoxWorld  # noqa: E402
from worldgen.cache import ChunkCache, get_serializer  # noqa: E402
from worldgen.genesis import GenesisPipeline  # noqa: E402
from worldgen.terrain import TerrainGenerator  # noqa: E402


@pytest.fixture(params=["binary", "text"])
def cache(request, tmp_path):
    """A chunk cache in a fresh directory, once per serialization format."""
    return ChunkCache(tmp_path / "chunks", TerrainGenerator(seed=15), get_serializer(request.param))


@pytest.fixture
def binary_cache(tmp_path):
    return ChunkCache(tmp_path / "chunks", TerrainGenerator(seed=15), get_serializer("binary"))


@pytest.fixture
def pipeline(binary_cache):
    return GenesisPipeline(binary_cache)


@pytest.fixture
def world():
    return VoxWorld()
