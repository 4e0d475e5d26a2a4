"""Galaxy stage and the galaxy's spatial subdivision.

The galaxy's hex extent is cut into sectors (level 0), each sector is cut
into sub-sectors down to ``max_division_level`` and every coordinate of the
deepest sub-sector is a hex. Divisions are never stored: they are recomputed
from the galaxy's ``seed`` and the division bounds on every lookup, so a
lookup made right after generation and one made later agree.
"""

from __future__ import annotations

import math
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np
from loguru import logger

from .coordinates import (
    CoordinateBox,
    SpaceCoordinates,
    child_box,
    split_count,
    tile_bounds,
    tile_index,
)
from .errors import ConfigurationError
from .naming import generate_name
from .neighborhood import GalacticNeighborhood
from .rng import derive_stream, draw_seed
from .settings import MIN_GALAXY_AGE, GalaxyShape, GenerationSettings

# Diameter range in light years per galaxy kind.
DIAMETERS: Dict[str, Tuple[float, float]] = {
    "Dwarf": (1_000.0, 15_000.0),
    "Intermediate": (15_000.0, 60_000.0),
    "Major": (60_000.0, 200_000.0),
}
# Thickness as a fraction of the diameter per shape.
THICKNESS_RATIOS: Dict[GalaxyShape, Tuple[float, float]] = {
    GalaxyShape.SPIRAL: (0.01, 0.03),
    GalaxyShape.BARRED_SPIRAL: (0.01, 0.03),
    GalaxyShape.LENTICULAR: (0.02, 0.06),
    GalaxyShape.ELLIPTICAL: (0.3, 1.0),
    GalaxyShape.IRREGULAR: (0.1, 0.3),
}
DWARF_SHAPES = (GalaxyShape.IRREGULAR, GalaxyShape.ELLIPTICAL, GalaxyShape.SPIRAL)
DWARF_SHAPE_WEIGHTS = (0.5, 0.4, 0.1)
LARGE_SHAPES = (
    GalaxyShape.SPIRAL,
    GalaxyShape.BARRED_SPIRAL,
    GalaxyShape.LENTICULAR,
    GalaxyShape.ELLIPTICAL,
    GalaxyShape.IRREGULAR,
)
LARGE_SHAPE_WEIGHTS = (0.35, 0.30, 0.10, 0.20, 0.05)
METALLICITY_OFFSETS = {"Dwarf": -0.5, "Intermediate": 0.0, "Major": 0.1}

MILKY_WAY_DIAMETER = 100_000.0
MILKY_WAY_THICKNESS = 1_000.0
MILKY_WAY_AGE = 13.6

# Systems per cubic light year at the center of a galaxy disk.
CENTRAL_DENSITY = 0.032
METALLICITY_GRADIENT = 0.06  # dex per kpc
LY_PER_KPC = 3261.56

_HEX_STREAM_TAG = 0x48
_DIVISION_STREAM_TAG = 0x44


@dataclass(frozen=True)
class GalacticDivision:
    """A sector (level 0) or a sub-sector (level > 0) of a galaxy."""

    level: int
    path: Tuple[int, ...]
    box: CoordinateBox
    stellar_density: float
    metallicity: float
    mean_age: float

    def contains(self, coord: SpaceCoordinates) -> bool:
        return self.box.contains(coord)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "path": list(self.path),
            "min": self.box.min.to_dict(),
            "max": self.box.max.to_dict(),
            "stellar_density": self.stellar_density,
            "metallicity": self.metallicity,
            "mean_age": self.mean_age,
        }


@dataclass(frozen=True)
class GalacticHex:
    """The finest cell of a galaxy. It always hosts at least one system."""

    coordinates: SpaceCoordinates
    division_path: Tuple[int, ...]
    stellar_density: float
    metallicity: float
    mean_age: float
    system_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coordinates": self.coordinates.to_dict(),
            "division_path": list(self.division_path),
            "stellar_density": self.stellar_density,
            "metallicity": self.metallicity,
            "mean_age": self.mean_age,
            "system_count": self.system_count,
        }


@dataclass
class Galaxy:
    neighborhood: GalacticNeighborhood
    index: int
    name: str
    seed: int
    age: float
    shape: GalaxyShape
    kind: str
    diameter: float
    thickness: float
    metallicity: float
    hex_size: Tuple[int, int, int]
    sector_size: Tuple[int, int, int]
    max_division_level: int
    subdivision_factor: int
    extent: CoordinateBox
    explored_hexes: Dict[SpaceCoordinates, List[str]] = field(default_factory=dict)
    _access_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )
    _mutable: bool = field(default=False, init=False, repr=False, compare=False)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    @classmethod
    def generate(
        cls,
        neighborhood: GalacticNeighborhood,
        index: int,
        settings: GenerationSettings,
        rng: np.random.Generator,
    ) -> "Galaxy":
        slot = neighborhood.slot(index)
        universe = neighborhood.universe
        ours = settings.galaxy.use_ours and index == 0

        if settings.galaxy.age is not None and settings.galaxy.age > universe.age:
            raise ConfigurationError(
                f"galaxy age ({settings.galaxy.age}) cannot exceed universe age ({universe.age:.2f})"
            )

        if settings.galaxy.shape is not None:
            shape = settings.galaxy.shape
        elif ours:
            shape = GalaxyShape.BARRED_SPIRAL
        elif slot.kind == "Dwarf":
            shape = DWARF_SHAPES[int(rng.choice(len(DWARF_SHAPES), p=DWARF_SHAPE_WEIGHTS))]
        else:
            shape = LARGE_SHAPES[int(rng.choice(len(LARGE_SHAPES), p=LARGE_SHAPE_WEIGHTS))]

        if ours:
            diameter, thickness = MILKY_WAY_DIAMETER, MILKY_WAY_THICKNESS
        else:
            diameter = float(rng.uniform(*DIAMETERS[slot.kind]))
            thickness = diameter * float(rng.uniform(*THICKNESS_RATIOS[shape]))

        if settings.galaxy.age is not None:
            age = settings.galaxy.age
        elif ours:
            age = min(MILKY_WAY_AGE, universe.age)
        else:
            age = max(MIN_GALAXY_AGE, universe.age * float(rng.uniform(0.6, 0.98)))

        metallicity = universe.mean_metallicity + METALLICITY_OFFSETS[slot.kind]
        metallicity += float(rng.normal(0.0, 0.1))
        name = "Milky Way" if ours else generate_name(rng, min_syllables=1, max_syllables=2)

        hex_size = settings.sector.hex_size
        dimensions = (diameter, diameter, thickness)
        extent_size = tuple(max(1, math.ceil(length / size)) for length, size in zip(dimensions, hex_size))

        galaxy = cls(
            neighborhood=neighborhood,
            index=index,
            name=name,
            seed=draw_seed(rng),
            age=age,
            shape=shape,
            kind=slot.kind,
            diameter=diameter,
            thickness=thickness,
            metallicity=metallicity,
            hex_size=hex_size,
            sector_size=settings.sector.sector_size,
            max_division_level=settings.sector.max_division_level,
            subdivision_factor=settings.sector.subdivision_factor,
            extent=CoordinateBox.centered(extent_size),  # type: ignore[arg-type]
        )
        logger.debug(
            "Generated galaxy {} #{}: shape={}, diameter={:.0f} ly, extent={}",
            galaxy.name,
            index,
            shape.value,
            diameter,
            galaxy.extent.size,
        )
        return galaxy

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def division_at_level(self, coord: SpaceCoordinates, level: int) -> Optional[GalacticDivision]:
        """Return the division of ``level`` holding ``coord``, or None."""
        if not 0 <= level <= self.max_division_level:
            return None
        if not self.extent.contains(coord):
            return None
        path, box = self._walk(coord, level)
        return self._division(level, path, box)

    def hex(self, coord: SpaceCoordinates) -> Optional[GalacticHex]:
        """Return the hex at ``coord``, or None outside the galaxy."""
        leaf = self.division_at_level(coord, self.max_division_level)
        if leaf is None:
            return None
        rng = derive_stream(self.seed, _HEX_STREAM_TAG, *coord.as_tuple())
        density = leaf.stellar_density * float(rng.lognormal(0.0, 0.1))
        return GalacticHex(
            coordinates=coord,
            division_path=leaf.path,
            stellar_density=density,
            metallicity=leaf.metallicity + float(rng.normal(0.0, 0.02)),
            mean_age=leaf.mean_age,
            system_count=1 + int(rng.poisson(max(density - 1.0, 0.0))),
        )

    def divisions(self, coord: SpaceCoordinates) -> Iterator[GalacticDivision]:
        """Yield the divisions holding ``coord`` from level 0 down to the deepest level."""
        for level in range(self.max_division_level + 1):
            division = self.division_at_level(coord, level)
            if division is None:
                return
            yield division

    def sector_grid(self) -> Tuple[int, int, int]:
        """Number of level-0 sectors along each axis."""
        return tuple(  # type: ignore[return-value]
            math.ceil(length / tile) for length, tile in zip(self.extent.size, self.sector_size)
        )

    def _walk(self, coord: SpaceCoordinates, level: int) -> Tuple[Tuple[int, ...], CoordinateBox]:
        grid = self.sector_grid()
        tiles = []
        lows = []
        highs = []
        for lo, hi, value, tile in zip(
            self.extent.min.as_tuple(), self.extent.max.as_tuple(), coord.as_tuple(), self.sector_size
        ):
            tile_at = tile_index(lo, value, tile)
            start, end = tile_bounds(lo, hi, tile_at, tile)
            tiles.append(tile_at)
            lows.append(start)
            highs.append(end)
        path = [(tiles[0] * grid[1] + tiles[1]) * grid[2] + tiles[2]]
        box = CoordinateBox(SpaceCoordinates.from_tuple(tuple(lows)), SpaceCoordinates.from_tuple(tuple(highs)))

        for _ in range(level):
            counts = [
                split_count(lo, hi, self.subdivision_factor)
                for lo, hi in zip(box.min.as_tuple(), box.max.as_tuple())
            ]
            indices, box = child_box(box, coord, self.subdivision_factor)
            path.append((indices[0] * counts[1] + indices[1]) * counts[2] + indices[2])
        return tuple(path), box

    def _division(self, level: int, path: Tuple[int, ...], box: CoordinateBox) -> GalacticDivision:
        rng = derive_stream(self.seed, _DIVISION_STREAM_TAG, level, *box.min.as_tuple(), *box.max.as_tuple())
        x, y, z = (center * size for center, size in zip(box.center, self.hex_size))
        radius = math.hypot(x, y)
        hex_volume = self.hex_size[0] * self.hex_size[1] * self.hex_size[2]

        density = CENTRAL_DENSITY * self._density_profile(x, y, z) * hex_volume
        density *= float(rng.lognormal(0.0, 0.2))
        metallicity = self.metallicity - METALLICITY_GRADIENT * radius / LY_PER_KPC
        metallicity += float(rng.normal(0.0, 0.05))
        age_fraction = 0.55 + 0.3 * math.exp(-radius / (self.diameter / 6)) + float(rng.normal(0.0, 0.05))
        return GalacticDivision(
            level=level,
            path=path,
            box=box,
            stellar_density=density,
            metallicity=metallicity,
            mean_age=self.age * min(1.0, max(0.05, age_fraction)),
        )

    def _density_profile(self, x: float, y: float, z: float) -> float:
        """Relative stellar density at a point (light years from the galactic center)."""
        half_diameter = self.diameter / 2
        half_thickness = self.thickness / 2
        radius = math.hypot(x, y)
        distance = math.sqrt(x * x + y * y + z * z)

        if self.shape == GalaxyShape.ELLIPTICAL:
            scaled = math.sqrt((radius / half_diameter) ** 2 + (z / half_thickness) ** 2)
            return math.exp(-7.67 * (scaled ** 0.25 - 0.35))

        if self.shape == GalaxyShape.IRREGULAR:
            scaled = math.sqrt((radius / half_diameter) ** 2 + (z / half_thickness) ** 2)
            return math.exp(-2.0 * scaled)

        disk = math.exp(-radius / (half_diameter / 4)) * math.exp(-abs(z) / (half_thickness / 2))
        bulge = 2.0 * math.exp(-distance / (half_diameter * 0.05))
        if self.shape == GalaxyShape.LENTICULAR:
            return disk + bulge

        theta = math.atan2(y, x)
        pitch = math.radians(12.0)
        arm_phase = 2 * (theta - math.log(max(radius, 1.0)) / math.tan(pitch))
        arms = 1.0 + 0.5 * math.cos(arm_phase)
        profile = disk * arms + bulge
        if self.shape == GalaxyShape.BARRED_SPIRAL and abs(x) < half_diameter * 0.2 and abs(y) < half_diameter * 0.05:
            profile += disk
        return profile

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    @contextmanager
    def exclusive_access(self) -> Iterator["Galaxy"]:
        """Grant the single mutable section of this galaxy.

        Entering while another caller holds it raises RuntimeError.
        """
        if not self._access_lock.acquire(blocking=False):
            raise RuntimeError(f"Galaxy {self.name} is already held for modification")
        try:
            self._mutable = True
            yield self
        finally:
            self._mutable = False
            self._access_lock.release()

    def annotate_explored_hex(self, coord: SpaceCoordinates, system_name: str) -> None:
        """Record that a system named ``system_name`` was generated at ``coord``."""
        if not self._mutable:
            raise RuntimeError("Galaxy annotations require exclusive_access()")
        systems = self.explored_hexes.setdefault(coord, [])
        if system_name not in systems:
            systems.append(system_name)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "neighborhood": self.neighborhood.to_dict(),
            "index": self.index,
            "name": self.name,
            "seed": self.seed,
            "age": self.age,
            "shape": self.shape.value,
            "kind": self.kind,
            "diameter": self.diameter,
            "thickness": self.thickness,
            "metallicity": self.metallicity,
            "hex_size": list(self.hex_size),
            "sector_size": list(self.sector_size),
            "max_division_level": self.max_division_level,
            "subdivision_factor": self.subdivision_factor,
            "extent": self.extent.to_dict(),
            "explored_hexes": [
                {"coordinates": coord.to_dict(), "systems": list(systems)}
                for coord, systems in sorted(self.explored_hexes.items())
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Galaxy":
        return cls(
            neighborhood=GalacticNeighborhood.from_dict(data["neighborhood"]),
            index=int(data["index"]),
            name=data["name"],
            seed=int(data["seed"]),
            age=float(data["age"]),
            shape=GalaxyShape(data["shape"]),
            kind=data["kind"],
            diameter=float(data["diameter"]),
            thickness=float(data["thickness"]),
            metallicity=float(data["metallicity"]),
            hex_size=tuple(data["hex_size"]),  # type: ignore[arg-type]
            sector_size=tuple(data["sector_size"]),  # type: ignore[arg-type]
            max_division_level=int(data["max_division_level"]),
            subdivision_factor=int(data["subdivision_factor"]),
            extent=CoordinateBox.from_dict(data["extent"]),
            explored_hexes={
                SpaceCoordinates.from_dict(entry["coordinates"]): list(entry["systems"])
                for entry in data["explored_hexes"]
            },
        )
