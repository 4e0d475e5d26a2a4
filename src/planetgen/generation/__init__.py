"""Deterministic universe, galaxy and star system generation."""

from .coordinates import CoordinateBox, SpaceCoordinates
from .errors import ConfigurationError, GenerationError, InvariantViolation, ResolutionNotFound
from .galaxy import GalacticDivision, GalacticHex, Galaxy
from .neighborhood import GalacticNeighborhood, GalaxySlot
from .orbits import VOID, AstronomicalObject, OrbitalPoint, Void
from .pipeline import GenerationPipeline, generate_galaxy, generate_system, generate_universe
from .settings import (
    GalaxySettings,
    GalaxyShape,
    GenerationSettings,
    SectorSettings,
    StarSettings,
    UniverseSettings,
)
from .stars import SpectralClass, Star, StarLuminosityClass, StarSpectralType
from .system import StarSystem
from .universe import Universe

__all__ = [
    "AstronomicalObject",
    "ConfigurationError",
    "CoordinateBox",
    "GalacticDivision",
    "GalacticHex",
    "GalacticNeighborhood",
    "Galaxy",
    "GalaxySettings",
    "GalaxyShape",
    "GalaxySlot",
    "GenerationError",
    "GenerationPipeline",
    "GenerationSettings",
    "InvariantViolation",
    "OrbitalPoint",
    "ResolutionNotFound",
    "SectorSettings",
    "SpaceCoordinates",
    "SpectralClass",
    "Star",
    "StarLuminosityClass",
    "StarSettings",
    "StarSpectralType",
    "StarSystem",
    "Universe",
    "UniverseSettings",
    "VOID",
    "Void",
    "generate_galaxy",
    "generate_system",
    "generate_universe",
]
