"""Galactic neighborhood stage: the group or cluster a galaxy sits in."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np
from loguru import logger

from .errors import ConfigurationError
from .settings import GenerationSettings
from .universe import Universe

DENSITIES = ("Void", "Group", "Cluster", "Supercluster")
DENSITY_WEIGHTS = (0.10, 0.55, 0.30, 0.05)

# (min galaxies, max galaxies, radius in Mpc)
DENSITY_PROFILES: Dict[str, Tuple[int, int, float]] = {
    "Void": (1, 3, 10.0),
    "Group": (3, 30, 1.5),
    "Cluster": (30, 120, 5.0),
    "Supercluster": (120, 400, 30.0),
}

GALAXY_KINDS = ("Dwarf", "Intermediate", "Major")
SATELLITE_KIND_WEIGHTS = (0.75, 0.20, 0.05)

LOCAL_GROUP: List[Tuple[str, float]] = [
    ("Major", 0.0),
    ("Major", 0.77),
    ("Intermediate", 0.86),
]
LOCAL_GROUP_DWARFS = 60


@dataclass(frozen=True)
class GalaxySlot:
    index: int
    kind: str
    distance_mpc: float

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "kind": self.kind, "distance_mpc": self.distance_mpc}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GalaxySlot":
        return cls(index=int(data["index"]), kind=data["kind"], distance_mpc=float(data["distance_mpc"]))


@dataclass(frozen=True)
class GalacticNeighborhood:
    universe: Universe
    density: str
    galaxies: Tuple[GalaxySlot, ...]

    @classmethod
    def generate(
        cls,
        universe: Universe,
        settings: GenerationSettings,
        rng: np.random.Generator,
    ) -> "GalacticNeighborhood":
        if settings.galaxy.use_ours:
            neighborhood = cls._local_group(universe, rng)
        else:
            density = DENSITIES[int(rng.choice(len(DENSITIES), p=DENSITY_WEIGHTS))]
            low, high, radius = DENSITY_PROFILES[density]
            count = int(rng.integers(low, high + 1))
            dominant = "Major" if density != "Void" or rng.random() < 0.5 else "Intermediate"
            slots = [GalaxySlot(0, dominant, 0.0)]
            for index in range(1, count):
                kind = GALAXY_KINDS[int(rng.choice(len(GALAXY_KINDS), p=SATELLITE_KIND_WEIGHTS))]
                slots.append(GalaxySlot(index, kind, float(rng.uniform(0.01, radius))))
            neighborhood = cls(universe=universe, density=density, galaxies=tuple(slots))

        logger.debug(
            "Generated neighborhood: density={}, galaxies={}",
            neighborhood.density,
            len(neighborhood.galaxies),
        )
        return neighborhood

    @classmethod
    def _local_group(cls, universe: Universe, rng: np.random.Generator) -> "GalacticNeighborhood":
        slots = [GalaxySlot(index, kind, distance) for index, (kind, distance) in enumerate(LOCAL_GROUP)]
        for index in range(len(slots), len(slots) + LOCAL_GROUP_DWARFS):
            slots.append(GalaxySlot(index, "Dwarf", float(rng.uniform(0.02, 1.5))))
        return cls(universe=universe, density="Group", galaxies=tuple(slots))

    def slot(self, index: int) -> GalaxySlot:
        """Return the galaxy slot at ``index`` or raise ``ConfigurationError``."""
        if not 0 <= index < len(self.galaxies):
            raise ConfigurationError(
                f"Galaxy index {index} out of range: neighborhood has {len(self.galaxies)} galaxies"
            )
        return self.galaxies[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "universe": self.universe.to_dict(),
            "density": self.density,
            "galaxies": [slot.to_dict() for slot in self.galaxies],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GalacticNeighborhood":
        return cls(
            universe=Universe.from_dict(data["universe"]),
            density=data["density"],
            galaxies=tuple(GalaxySlot.from_dict(slot) for slot in data["galaxies"]),
        )
