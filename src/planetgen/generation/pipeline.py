"""The generation pipeline: Universe -> GalacticNeighborhood -> Galaxy -> StarSystem.

One pipeline object is one run. It owns its random stream and every
artifact it produces; nothing is shared between runs.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from .coordinates import SpaceCoordinates
from .errors import ResolutionNotFound
from .galaxy import Galaxy
from .neighborhood import GalacticNeighborhood
from .rng import new_stream
from .settings import GenerationSettings
from .system import StarSystem
from .universe import Universe

SUB_SECTOR_LEVEL = 1


class GenerationPipeline:
    """Runs the stages strictly in order on a single shared stream."""

    def __init__(self, settings: GenerationSettings):
        self.settings = settings.resolve_seed()
        self._rng = new_stream(self.settings.seed)
        self._universe: Optional[Universe] = None
        self._neighborhood: Optional[GalacticNeighborhood] = None
        self._galaxy: Optional[Galaxy] = None

    @property
    def seed(self) -> str:
        return self.settings.seed

    def universe(self) -> Universe:
        if self._universe is None:
            self._universe = Universe.generate(self.settings, self._rng)
        return self._universe

    def neighborhood(self) -> GalacticNeighborhood:
        if self._neighborhood is None:
            self._neighborhood = GalacticNeighborhood.generate(self.universe(), self.settings, self._rng)
        return self._neighborhood

    def galaxy(self, galaxy_index: Optional[int] = None) -> Galaxy:
        """Generate the galaxy once; a run holds a single galaxy."""
        if galaxy_index is None:
            galaxy_index = self.settings.galaxy.galaxy_index
        if self._galaxy is None:
            self._galaxy = Galaxy.generate(self.neighborhood(), galaxy_index, self.settings, self._rng)
        elif self._galaxy.index != galaxy_index:
            raise RuntimeError(
                f"Pipeline already generated galaxy {self._galaxy.index}; start a new run for {galaxy_index}"
            )
        return self._galaxy

    def system(self, coordinates: SpaceCoordinates, system_index: int = 0) -> StarSystem:
        galaxy = self.galaxy()
        level = min(SUB_SECTOR_LEVEL, galaxy.max_division_level)
        sub_sector = galaxy.division_at_level(coordinates, level)
        if sub_sector is None:
            raise ResolutionNotFound(
                f"No sub-sector at level {level} for coordinates {coordinates.as_tuple()} "
                f"in galaxy {galaxy.name}"
            )
        galactic_hex = galaxy.hex(coordinates)
        if galactic_hex is None:
            raise ResolutionNotFound(
                f"No hex at coordinates {coordinates.as_tuple()} in galaxy {galaxy.name}"
            )
        return StarSystem.generate(
            system_index,
            coordinates,
            galactic_hex,
            sub_sector,
            galaxy,
            self.settings.star,
        )


def generate_universe(settings: GenerationSettings) -> Universe:
    pipeline = GenerationPipeline(settings)
    logger.info("Generating universe (seed={})", pipeline.seed)
    return pipeline.universe()


def generate_galaxy(settings: GenerationSettings, galaxy_index: Optional[int] = None) -> Galaxy:
    pipeline = GenerationPipeline(settings)
    logger.info("Generating galaxy (seed={})", pipeline.seed)
    return pipeline.galaxy(galaxy_index)


def generate_system(
    settings: GenerationSettings,
    coordinates: SpaceCoordinates,
    system_index: int = 0,
) -> StarSystem:
    """Run every stage and generate the system at ``coordinates``.

    Raises ``ResolutionNotFound`` when the coordinates fall outside the
    generated galaxy; no partial result is ever returned.
    """
    pipeline = GenerationPipeline(settings)
    logger.info(
        "Generating system at {} #{} (seed={})",
        coordinates.as_tuple(),
        system_index,
        pipeline.seed,
    )
    return pipeline.system(coordinates, system_index)
