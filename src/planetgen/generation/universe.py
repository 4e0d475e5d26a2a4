"""Universe stage: cosmological parameters every later stage draws from."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

import numpy as np
from loguru import logger

from .settings import MAX_UNIVERSE_AGE, OUR_UNIVERSE_AGE, GenerationSettings

OUR_EXPANSION_RATE = 67.7  # km/s/Mpc
PRIMORDIAL_ERA_END = 1.0  # Gyr
COSMIC_NOON = 3.5  # Gyr, peak of star formation


def _star_formation_curve(age: float) -> float:
    return (age / COSMIC_NOON) * math.exp(1 - age / COSMIC_NOON)


@dataclass(frozen=True)
class Universe:
    seed: str
    age: float
    era: str
    expansion_rate: float
    mean_metallicity: float
    star_formation_rate: float

    @classmethod
    def generate(cls, settings: GenerationSettings, rng: np.random.Generator) -> "Universe":
        """Generate the universe for ``settings`` consuming ``rng``.

        ``settings.seed`` must already be concrete; the pipeline resolves it.
        """
        if settings.universe.use_ours:
            age = OUR_UNIVERSE_AGE
        elif settings.universe.age is not None:
            age = settings.universe.age
        else:
            age = float(np.clip(rng.lognormal(math.log(OUR_UNIVERSE_AGE), 0.6), 1.0, MAX_UNIVERSE_AGE))

        if settings.universe.use_ours:
            expansion_rate = OUR_EXPANSION_RATE
            mean_metallicity = 0.0
        else:
            expansion_rate = OUR_EXPANSION_RATE * (OUR_UNIVERSE_AGE / age) ** 0.85
            expansion_rate *= float(rng.normal(1.0, 0.03))
            mean_metallicity = -2.5 + 2.5 * (1 - math.exp(-age / 5.0))
            mean_metallicity += float(rng.normal(0.0, 0.05))

        universe = cls(
            seed=settings.seed,
            age=age,
            era="Primordial" if age < PRIMORDIAL_ERA_END else "Stelliferous",
            expansion_rate=expansion_rate,
            mean_metallicity=mean_metallicity,
            star_formation_rate=_star_formation_curve(age) / _star_formation_curve(OUR_UNIVERSE_AGE),
        )
        logger.debug(
            "Generated universe: age={:.2f} Gyr, era={}, H={:.1f}",
            universe.age,
            universe.era,
            universe.expansion_rate,
        )
        return universe

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Universe":
        return cls(
            seed=data["seed"],
            age=float(data["age"]),
            era=data["era"],
            expansion_rate=float(data["expansion_rate"]),
            mean_metallicity=float(data["mean_metallicity"]),
            star_formation_rate=float(data["star_formation_rate"]),
        )
