"""Generation settings threaded through every pipeline stage.

Settings are plain immutable values. Every field carries a documented
default so a client may send ``{}`` (or only a seed) and get a valid run.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ConfigurationError
from .rng import fresh_seed, is_placeholder_seed

DEFAULT_EXAMPLE_SEED = "default"
OUR_UNIVERSE_AGE = 13.8
MIN_UNIVERSE_AGE = 0.5
MAX_UNIVERSE_AGE = 100.0
MIN_GALAXY_AGE = 0.1


class GalaxyShape(str, Enum):
    SPIRAL = "Spiral"
    BARRED_SPIRAL = "BarredSpiral"
    LENTICULAR = "Lenticular"
    ELLIPTICAL = "Elliptical"
    IRREGULAR = "Irregular"


class _SettingsModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class UniverseSettings(_SettingsModel):
    """Large scale parameters.

    ``age`` is in billions of years; ``use_ours`` forces the age of our universe.
    """

    age: Optional[float] = Field(default=None, gt=MIN_UNIVERSE_AGE, le=MAX_UNIVERSE_AGE)
    use_ours: bool = False


class GalaxySettings(_SettingsModel):
    galaxy_index: int = Field(default=0, ge=0)
    age: Optional[float] = Field(default=None, ge=MIN_GALAXY_AGE, le=MAX_UNIVERSE_AGE)
    shape: Optional[GalaxyShape] = None
    use_ours: bool = False


class SectorSettings(_SettingsModel):
    """Spatial subdivision parameters.

    ``hex_size`` is in light years per axis, ``sector_size`` in hexes per axis.
    """

    hex_size: Tuple[int, int, int] = (10, 10, 10)
    sector_size: Tuple[int, int, int] = (100, 100, 100)
    max_division_level: int = Field(default=3, ge=0, le=8)
    subdivision_factor: int = Field(default=2, ge=2, le=4)

    @model_validator(mode="after")
    def _check_sizes(self) -> "SectorSettings":
        if any(not 1 <= size <= 1000 for size in self.hex_size):
            raise ValueError(f"hex_size values must be within 1..1000, got {self.hex_size}")
        if any(size < 1 for size in self.sector_size):
            raise ValueError(f"sector_size values must be positive, got {self.sector_size}")
        return self


class StarSettings(_SettingsModel):
    max_stars_per_system: int = Field(default=8, ge=1, le=16)
    multiple_star_frequency: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class GenerationSettings(_SettingsModel):
    """Seed plus the parameters of every stage.

    An empty seed (or ``"random"``) is replaced by a fresh random seed when a
    run starts; any other seed reproduces the same output across runs.
    """

    seed: str = ""
    universe: UniverseSettings = Field(default_factory=UniverseSettings)
    galaxy: GalaxySettings = Field(default_factory=GalaxySettings)
    sector: SectorSettings = Field(default_factory=SectorSettings)
    star: StarSettings = Field(default_factory=StarSettings)

    @model_validator(mode="after")
    def _check_ages(self) -> "GenerationSettings":
        universe_age = self.universe.age
        if self.universe.use_ours:
            universe_age = OUR_UNIVERSE_AGE
        if (
            universe_age is not None
            and self.galaxy.age is not None
            and self.galaxy.age > universe_age
        ):
            raise ValueError(
                f"galaxy age ({self.galaxy.age}) cannot exceed universe age ({universe_age})"
            )
        return self

    @classmethod
    def parse(cls, data: Optional[Dict[str, Any]] = None) -> "GenerationSettings":
        """Validate raw data, raising ``ConfigurationError`` on any problem."""
        try:
            return cls.model_validate(data or {})
        except ValidationError as exc:
            raise ConfigurationError(_describe(exc)) from exc

    @classmethod
    def default_example(cls) -> "GenerationSettings":
        return cls(seed=DEFAULT_EXAMPLE_SEED)

    @property
    def has_fixed_seed(self) -> bool:
        return not is_placeholder_seed(self.seed)

    def resolve_seed(self) -> "GenerationSettings":
        """Return these settings with a concrete seed."""
        if self.has_fixed_seed:
            return self
        return self.model_copy(update={"seed": fresh_seed()})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "settings"
        problems.append(f"{location}: {error['msg']}")
    return "Invalid generation settings: " + "; ".join(problems)
