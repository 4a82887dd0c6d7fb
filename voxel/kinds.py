"""
Voxel kind identifiers and the kind description asset.

Kind descriptions are read-only input for renderers; the genesis pipeline only
relies on ``EMPTY`` and ``SOLID``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import numpy as np
import yaml

logger = logging.getLogger(__name__)

KIND_DTYPE = np.uint16
KIND_MAX = int(np.iinfo(KIND_DTYPE).max)

EMPTY = 0
SOLID = 1


def is_empty(kind):
    """Works on a single kind or elementwise on a kind array."""
    return kind == EMPTY


def validate_kind(kind: int) -> int:
    """Coerce to int, raising ``ValueError`` when it doesn't fit a kind layer."""
    value = int(kind)
    if not 0 <= value <= KIND_MAX:
        raise ValueError(f"Voxel kind {kind!r} outside [0, {KIND_MAX}]")
    return value


@dataclass(frozen=True)
class KindDescription:
    name: str
    id: int
    color: Tuple[float, float, float, float]


def load_kind_descriptions(path: Path) -> List[KindDescription]:
    """
    Load kind descriptions from a YAML list of ``{name, id, color}`` records.

    Args:
        path: Path to the YAML asset

    Returns:
        Descriptions in file order

    Raises:
        FileNotFoundError: If the asset doesn't exist
        ValueError: If a record is malformed or an id is repeated
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Kind descriptions not found: {path}")

    with open(path, "r") as f:
        try:
            records = yaml.safe_load(f) or []
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid kind descriptions in {path}: {e}")

    descriptions = []
    seen = set()
    for record in records:
        try:
            color = tuple(float(c) for c in record["color"])
            description = KindDescription(str(record["name"]), int(record["id"]), color)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed kind description {record!r}: {e}")
        if len(color) != 4:
            raise ValueError(f"Kind {description.name} color must have 4 components")
        if description.id in seen:
            raise ValueError(f"Duplicate kind id {description.id} in {path}")
        seen.add(description.id)
        descriptions.append(description)

    logger.info(f"Loaded {len(descriptions)} kind descriptions from {path}")
    return descriptions
