"""
Per-voxel face occlusion masks.

A mask packs one bit per cardinal side (bit index = ``Side`` value). A set bit
means the face is hidden by a neighboring solid voxel and can be skipped by the
mesher.
"""

from typing import Sequence

from voxel.coords import SIDE_COUNT, SIDES, Side

FULL_OCCLUDED_MASK = 0b0011_1111


class FaceOcclusionMask:
    """Six-bit face occlusion record for a single voxel."""

    __slots__ = ("_bits",)

    def __init__(self, bits: int = 0):
        self._bits = int(bits) & FULL_OCCLUDED_MASK

    @classmethod
    def from_sides(cls, occluded: Sequence[bool]) -> "FaceOcclusionMask":
        """
        Build a mask from one visibility test result per side.

        Args:
            occluded: Six booleans, indexed in ``SIDES`` order

        Raises:
            ValueError: If the sequence does not hold exactly six entries
        """
        if len(occluded) != SIDE_COUNT:
            raise ValueError(f"Expected {SIDE_COUNT} side flags, got {len(occluded)}")
        mask = cls()
        for side in SIDES:
            mask.set(side, bool(occluded[side]))
        return mask

    @property
    def bits(self) -> int:
        return self._bits

    def set(self, side: Side, occluded: bool) -> None:
        bit = 1 << int(side)
        if occluded:
            self._bits |= bit
        else:
            self._bits &= ~bit & FULL_OCCLUDED_MASK

    def is_occluded(self, side: Side) -> bool:
        bit = 1 << int(side)
        return self._bits & bit == bit

    def set_all(self, occluded: bool) -> None:
        self._bits = FULL_OCCLUDED_MASK if occluded else 0

    def is_fully_occluded(self) -> bool:
        return self._bits & FULL_OCCLUDED_MASK == FULL_OCCLUDED_MASK

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FaceOcclusionMask):
            return NotImplemented
        return self._bits == other._bits

    def __hash__(self) -> int:
        return hash(self._bits)

    def __repr__(self) -> str:
        return f"FaceOcclusionMask(0b{self._bits:06b})"
