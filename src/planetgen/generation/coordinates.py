"""Discrete 3D addressing and the partition arithmetic behind galaxy divisions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple


@dataclass(frozen=True, order=True)
class SpaceCoordinates:
    """Address of a single hex. Axes are signed and unbounded."""

    x: int
    y: int
    z: int

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpaceCoordinates":
        return cls(int(data["x"]), int(data["y"]), int(data["z"]))

    @classmethod
    def from_tuple(cls, values: Tuple[int, int, int]) -> "SpaceCoordinates":
        x, y, z = values
        return cls(int(x), int(y), int(z))


@dataclass(frozen=True)
class CoordinateBox:
    """Inclusive axis-aligned box of hexes."""

    min: SpaceCoordinates
    max: SpaceCoordinates

    def __post_init__(self) -> None:
        if any(lo > hi for lo, hi in zip(self.min.as_tuple(), self.max.as_tuple())):
            raise ValueError(f"Empty coordinate box: {self.min} .. {self.max}")

    @classmethod
    def centered(cls, size: Tuple[int, int, int]) -> "CoordinateBox":
        """Box of ``size`` hexes per axis that always contains the origin."""
        lows = tuple(-(n // 2) for n in size)
        highs = tuple(lo + n - 1 for lo, n in zip(lows, size))
        return cls(SpaceCoordinates.from_tuple(lows), SpaceCoordinates.from_tuple(highs))

    @property
    def size(self) -> Tuple[int, int, int]:
        return tuple(  # type: ignore[return-value]
            hi - lo + 1 for lo, hi in zip(self.min.as_tuple(), self.max.as_tuple())
        )

    @property
    def volume(self) -> int:
        x, y, z = self.size
        return x * y * z

    @property
    def center(self) -> Tuple[float, float, float]:
        return tuple(  # type: ignore[return-value]
            (lo + hi) / 2 for lo, hi in zip(self.min.as_tuple(), self.max.as_tuple())
        )

    def contains(self, coord: SpaceCoordinates) -> bool:
        return all(
            lo <= value <= hi
            for lo, value, hi in zip(self.min.as_tuple(), coord.as_tuple(), self.max.as_tuple())
        )

    def iter_coordinates(self) -> Iterator[SpaceCoordinates]:
        for x in range(self.min.x, self.max.x + 1):
            for y in range(self.min.y, self.max.y + 1):
                for z in range(self.min.z, self.max.z + 1):
                    yield SpaceCoordinates(x, y, z)

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min.to_dict(), "max": self.max.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoordinateBox":
        return cls(SpaceCoordinates.from_dict(data["min"]), SpaceCoordinates.from_dict(data["max"]))


def tile_index(lo: int, value: int, tile: int) -> int:
    """Index of the fixed-size tile holding ``value`` on an axis starting at ``lo``."""
    return (value - lo) // tile


def tile_bounds(lo: int, hi: int, index: int, tile: int) -> Tuple[int, int]:
    start = lo + index * tile
    return start, min(start + tile - 1, hi)


def split_count(lo: int, hi: int, factor: int) -> int:
    """Number of parts an axis is cut into; never more parts than hexes."""
    return min(factor, hi - lo + 1)


def split_index(lo: int, hi: int, value: int, factor: int) -> int:
    """Index of the part holding ``value`` when ``[lo, hi]`` is floor-split."""
    length = hi - lo + 1
    parts = split_count(lo, hi, factor)
    return ((value - lo + 1) * parts - 1) // length


def split_bounds(lo: int, hi: int, index: int, factor: int) -> Tuple[int, int]:
    length = hi - lo + 1
    parts = split_count(lo, hi, factor)
    start = lo + (index * length) // parts
    end = lo + ((index + 1) * length) // parts - 1
    return start, end


def child_box(box: CoordinateBox, coord: SpaceCoordinates, factor: int) -> Tuple[Tuple[int, int, int], CoordinateBox]:
    """Return the per-axis child index and bounds of the sub-box holding ``coord``."""
    indices: List[int] = []
    lows: List[int] = []
    highs: List[int] = []
    for lo, hi, value in zip(box.min.as_tuple(), box.max.as_tuple(), coord.as_tuple()):
        index = split_index(lo, hi, value, factor)
        start, end = split_bounds(lo, hi, index, factor)
        indices.append(index)
        lows.append(start)
        highs.append(end)
    return (
        tuple(indices),  # type: ignore[return-value]
        CoordinateBox(SpaceCoordinates.from_tuple(tuple(lows)), SpaceCoordinates.from_tuple(tuple(highs))),
    )

