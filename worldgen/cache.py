"""
On-disk chunk cache.

Generated terrain is persisted as one file per chunk coordinate, named
``<x>_<y>_<z>.<ext>`` under the cache directory. The encoding is chosen once at
startup by name:

- ``binary``: numpy .npz container with ``coordinate`` and ``kind`` arrays
- ``text``: YAML document, one row string of kinds per (x, y) column

The cache is a trusted local resource. Unreadable, corrupt or unwritable files
raise ``ChunkCacheError``; nothing here retries or repairs.
"""

import io
import logging
import multiprocessing
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Dict, Iterable, List, Optional, Tuple, Type

import numpy as np
import yaml
from tqdm import tqdm

from voxel.chunk import KIND_DTYPE, ChunkStorage
from voxel.coords import AXIS_SIZE, IVec3
from worldgen.config import GenesisConfig, NoiseConfig
from worldgen.terrain import TerrainGenerator

logger = logging.getLogger(__name__)


class ChunkCacheError(RuntimeError):
    """A cache file could not be read, decoded or written."""


class CacheExistsError(ChunkCacheError):
    """Generation was requested for a coordinate that is already cached."""


@dataclass
class CacheRecord:
    coordinate: IVec3
    kind: ChunkStorage


class ChunkSerializer:
    """Encodes a ``CacheRecord`` to and from an open binary file handle."""

    name = ""
    extension = ""

    def dump(self, record: CacheRecord, handle: IO[bytes]) -> None:
        raise NotImplementedError

    def load(self, handle: IO[bytes]) -> CacheRecord:
        raise NotImplementedError


class BinarySerializer(ChunkSerializer):
    name = "binary"
    extension = "bin"

    def dump(self, record: CacheRecord, handle: IO[bytes]) -> None:
        np.savez_compressed(
            handle,
            coordinate=np.asarray(record.coordinate, dtype=np.int64),
            kind=record.kind.flat().astype(KIND_DTYPE),
        )

    def load(self, handle: IO[bytes]) -> CacheRecord:
        with np.load(handle, allow_pickle=False) as data:
            coordinate = data["coordinate"]
            kind = data["kind"]
        if coordinate.shape != (3,):
            raise ValueError(f"coordinate has shape {coordinate.shape}, expected (3,)")
        x, y, z = (int(v) for v in coordinate)
        return CacheRecord((x, y, z), ChunkStorage.from_flat(kind))


class TextSerializer(ChunkSerializer):
    name = "text"
    extension = "yaml"

    def dump(self, record: CacheRecord, handle: IO[bytes]) -> None:
        kind = record.kind.data
        rows = [
            " ".join(str(int(v)) for v in kind[x, y, :])
            for x in range(AXIS_SIZE)
            for y in range(AXIS_SIZE)
        ]
        document = {
            "coordinate": [int(v) for v in record.coordinate],
            "axis_size": AXIS_SIZE,
            "kind": rows,
        }
        text = yaml.safe_dump(document, default_flow_style=False, width=4096)
        handle.write(text.encode("utf-8"))

    def load(self, handle: IO[bytes]) -> CacheRecord:
        document = yaml.safe_load(io.TextIOWrapper(handle, encoding="utf-8"))
        if not isinstance(document, dict):
            raise ValueError("document is not a mapping")
        if document.get("axis_size") != AXIS_SIZE:
            raise ValueError(f"axis_size {document.get('axis_size')} != {AXIS_SIZE}")
        x, y, z = (int(v) for v in document["coordinate"])
        values = [int(v) for row in document["kind"] for v in str(row).split()]
        return CacheRecord((x, y, z), ChunkStorage.from_flat(values))


SERIALIZERS: Dict[str, Type[ChunkSerializer]] = {
    BinarySerializer.name: BinarySerializer,
    TextSerializer.name: TextSerializer,
}


def get_serializer(name: str) -> ChunkSerializer:
    try:
        return SERIALIZERS[name]()
    except KeyError:
        raise ValueError(f"Unknown cache format {name!r}, expected one of {sorted(SERIALIZERS)}")


def format_coord(coord: IVec3) -> str:
    """``(-1, 3333, -461)`` -> ``"-1_3333_-461"``."""
    return "_".join(str(int(v)) for v in coord)


class ChunkCache:
    """Persists generated chunk kind layers keyed by chunk coordinate."""

    def __init__(
        self,
        cache_dir: Path,
        generator: Optional[TerrainGenerator] = None,
        serializer: Optional[ChunkSerializer] = None,
    ):
        self.cache_dir = Path(cache_dir)
        self.generator = generator or TerrainGenerator()
        self.serializer = serializer or BinarySerializer()

        logger.info(
            f"ChunkCache initialized with cache_dir={self.cache_dir}, "
            f"format={self.serializer.name}"
        )

    @classmethod
    def from_config(cls, config: GenesisConfig) -> "ChunkCache":
        return cls(
            config.cache_dir,
            TerrainGenerator(config.seed, config.noise),
            get_serializer(config.cache_format),
        )

    def path_for(self, coord: IVec3) -> Path:
        return self.cache_dir / f"{format_coord(coord)}.{self.serializer.extension}"

    def exists(self, coord: IVec3) -> bool:
        return self.path_for(coord).exists()

    def generate(self, coord: IVec3) -> ChunkStorage:
        """
        Generate terrain for an uncached coordinate and persist it.

        Raises:
            CacheExistsError: If the coordinate is already cached. Regenerating
                would silently overwrite persisted terrain.
            ChunkCacheError: If the result cannot be written
        """
        path = self.path_for(coord)
        if path.exists():
            logger.error(f"Refusing to regenerate cached chunk {coord} at {path}")
            raise CacheExistsError(f"Cache already exists for chunk {coord}: {path}")

        kind = self.generator.generate(coord)
        self.save(path, coord, kind)
        return kind

    def save(self, path: Path, coord: IVec3, kind: ChunkStorage) -> None:
        """
        Write ``(coord, kind)`` to ``path``, creating or truncating it.

        Raises:
            ChunkCacheError: If the file cannot be written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as handle:
                self.serializer.dump(CacheRecord(tuple(coord), kind), handle)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Failed to write cache file {path}: {e}")
            raise ChunkCacheError(f"Unable to write cache file {path}: {e}") from e

        logger.debug(f"Saved chunk {coord} to {path}")

    def read_record(self, path: Path) -> CacheRecord:
        """
        Read the full record (coordinate and kind layer) stored at ``path``.

        Raises:
            ChunkCacheError: If the file is missing, unreadable or malformed
        """
        path = Path(path)
        try:
            with open(path, "rb") as handle:
                return self.serializer.load(handle)
        except (
            OSError,
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
            OverflowError,
            EOFError,
            zipfile.BadZipFile,
            yaml.YAMLError,
        ) as e:
            logger.error(f"Failed to parse cache file {path}: {e}")
            raise ChunkCacheError(f"Failed to parse cache file {path}: {e}") from e

    def load(self, path: Path, expected: Optional[IVec3] = None) -> ChunkStorage:
        """
        Read the kind layer stored at ``path``.

        Args:
            path: Cache file
            expected: If given, the coordinate the file must have been saved for

        Raises:
            ChunkCacheError: If the file can't be read, or holds another coordinate
        """
        record = self.read_record(path)
        if expected is not None and record.coordinate != tuple(expected):
            logger.error(f"Cache file {path} holds chunk {record.coordinate}, not {expected}")
            raise ChunkCacheError(
                f"Cache file {path} holds chunk {record.coordinate}, expected {tuple(expected)}"
            )
        return record.kind

    def clear(self, coord: IVec3) -> bool:
        """Delete the cached file for ``coord``. Returns whether one existed."""
        path = self.path_for(coord)
        if not path.exists():
            return False
        path.unlink()
        logger.debug(f"Removed cache file {path}")
        return True

    def warm(self, coords: Iterable[IVec3], num_workers: int = 1) -> List[Path]:
        """
        Generate cache files for every coordinate not cached yet.

        Coordinates are deduplicated first, so no two workers ever race on the
        same file. This must run before any commands are issued to a world.

        Args:
            coords: Chunk coordinates to pre-generate
            num_workers: Worker processes; 1 generates in this process

        Returns:
            Paths of the newly written cache files
        """
        missing = sorted({tuple(c) for c in coords if not self.exists(tuple(c))})
        if not missing:
            logger.info("Cache warm: nothing to generate")
            return []

        logger.info(f"Warming cache with {len(missing)} chunks using {num_workers} workers")

        if num_workers <= 1:
            for coord in tqdm(missing, desc="Generating chunks", unit="chunk"):
                self.generate(coord)
        else:
            jobs = [(coord, self._worker_settings()) for coord in missing]
            with multiprocessing.Pool(processes=num_workers) as pool:
                for _ in tqdm(
                    pool.imap_unordered(_generate_worker, jobs),
                    total=len(jobs),
                    desc="Generating chunks",
                    unit="chunk",
                ):
                    pass

        return [self.path_for(coord) for coord in missing]

    def _worker_settings(self) -> Tuple[str, str, int, NoiseConfig]:
        return str(self.cache_dir), self.serializer.name, self.generator.seed, self.generator.noise


def _generate_worker(job) -> str:
    coord, (cache_dir, format_name, seed, noise) = job
    cache = ChunkCache(Path(cache_dir), TerrainGenerator(seed, noise), get_serializer(format_name))
    cache.generate(coord)
    return str(cache.path_for(coord))
