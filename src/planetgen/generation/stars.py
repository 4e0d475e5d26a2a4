"""Star payloads, their classification and the stellar sampler.

Relations are textbook approximations: a Kroupa initial mass function,
broken power-law mass/luminosity and mass/radius relations on the main
sequence, and simple remnant recipes once a star outlives its main sequence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

SUN_TEMPERATURE = 5772
AU_PER_SOLAR_RADIUS = 0.00465047

# (lower mass, upper mass, power law slope) of the Kroupa IMF, brown dwarfs included.
IMF_SEGMENTS: Tuple[Tuple[float, float, float], ...] = (
    (0.013, 0.08, 0.3),
    (0.08, 0.5, 1.3),
    (0.5, 150.0, 2.3),
)
HYDROGEN_BURNING_LIMIT = 0.08
WHITE_DWARF_PROGENITOR_LIMIT = 8.0
NEUTRON_STAR_RADIUS = 1.72e-5


class SpectralClass(str, Enum):
    O = "O"
    B = "B"
    A = "A"
    F = "F"
    G = "G"
    K = "K"
    M = "M"
    L = "L"
    T = "T"
    Y = "Y"
    DA = "DA"
    DB = "DB"
    DC = "DC"
    XNS = "XNS"


# Temperature range (K) of each class carrying a 0..9 sub-class, hottest first.
SUBCLASS_TEMPERATURES: Dict[SpectralClass, Tuple[int, int]] = {
    SpectralClass.O: (30_000, 50_000),
    SpectralClass.B: (10_000, 30_000),
    SpectralClass.A: (7_500, 10_000),
    SpectralClass.F: (6_000, 7_500),
    SpectralClass.G: (5_200, 6_000),
    SpectralClass.K: (3_700, 5_200),
    SpectralClass.M: (2_400, 3_700),
    SpectralClass.L: (1_300, 2_400),
    SpectralClass.T: (600, 1_300),
    SpectralClass.Y: (250, 600),
}


@dataclass(frozen=True)
class StarSpectralType:
    """Spectral class plus decile sub-class (``G2``) or a remnant class (``DA``)."""

    spectral_class: SpectralClass
    subclass: Optional[int] = None

    def __post_init__(self) -> None:
        needs_subclass = self.spectral_class in SUBCLASS_TEMPERATURES
        if needs_subclass and (self.subclass is None or not 0 <= self.subclass <= 9):
            raise ValueError(f"Spectral class {self.spectral_class.value} needs a 0..9 sub-class")
        if not needs_subclass and self.subclass is not None:
            raise ValueError(f"Spectral class {self.spectral_class.value} takes no sub-class")

    def __str__(self) -> str:
        if self.subclass is None:
            return self.spectral_class.value
        return f"{self.spectral_class.value}{self.subclass}"

    @classmethod
    def from_temperature(cls, temperature: float) -> "StarSpectralType":
        # Anything colder than the Y range is still Y9.
        spectral_class = next(
            (name for name, (low, _) in SUBCLASS_TEMPERATURES.items() if temperature >= low),
            SpectralClass.Y,
        )
        low, high = SUBCLASS_TEMPERATURES[spectral_class]
        position = (high - min(temperature, high)) / (high - low)
        return cls(spectral_class, min(9, max(0, int(position * 10))))

    def to_json(self) -> Union[str, Dict[str, int]]:
        if self.subclass is None:
            return self.spectral_class.value
        return {self.spectral_class.value: self.subclass}

    @classmethod
    def from_json(cls, data: Union[str, Dict[str, int]]) -> "StarSpectralType":
        if isinstance(data, str):
            return cls(SpectralClass(data))
        if isinstance(data, dict) and len(data) == 1:
            ((name, subclass),) = data.items()
            return cls(SpectralClass(name), int(subclass))
        raise ValueError(f"Invalid spectral type: {data!r}")


class StarLuminosityClass(str, Enum):
    O = "O"
    IA = "IA"
    IB = "IB"
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VI = "VI"
    VII = "VII"


@dataclass(frozen=True)
class Star:
    name: str
    mass: float
    luminosity: float
    radius: float
    age: float
    temperature: int
    spectral_type: StarSpectralType
    luminosity_class: StarLuminosityClass

    @property
    def classification(self) -> str:
        return f"{self.spectral_type} {self.luminosity_class.value}"

    @property
    def radius_au(self) -> float:
        return self.radius * AU_PER_SOLAR_RADIUS

    def renamed(self, name: str) -> "Star":
        return replace(self, name=name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "mass": self.mass,
            "luminosity": self.luminosity,
            "radius": self.radius,
            "age": self.age,
            "temperature": self.temperature,
            "spectral_type": self.spectral_type.to_json(),
            "luminosity_class": self.luminosity_class.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Star":
        return cls(
            name=data["name"],
            mass=float(data["mass"]),
            luminosity=float(data["luminosity"]),
            radius=float(data["radius"]),
            age=float(data["age"]),
            temperature=int(data["temperature"]),
            spectral_type=StarSpectralType.from_json(data["spectral_type"]),
            luminosity_class=StarLuminosityClass(data["luminosity_class"]),
        )


def _imf_weights() -> Tuple[float, ...]:
    # Continuity constants, normalised to the top segment.
    constants = [1.0] * len(IMF_SEGMENTS)
    for index in range(len(IMF_SEGMENTS) - 2, -1, -1):
        boundary = IMF_SEGMENTS[index][1]
        constants[index] = constants[index + 1] * boundary ** (
            IMF_SEGMENTS[index][2] - IMF_SEGMENTS[index + 1][2]
        )
    weights = []
    for constant, (low, high, slope) in zip(constants, IMF_SEGMENTS):
        exponent = 1 - slope
        weights.append(constant * (high ** exponent - low ** exponent) / exponent)
    total = sum(weights)
    return tuple(weight / total for weight in weights)


IMF_WEIGHTS = _imf_weights()


def sample_mass(rng: np.random.Generator) -> float:
    """Draw an initial mass (solar masses) from the IMF."""
    low, high, slope = IMF_SEGMENTS[int(rng.choice(len(IMF_SEGMENTS), p=IMF_WEIGHTS))]
    exponent = 1 - slope
    u = float(rng.random())
    return (low ** exponent + u * (high ** exponent - low ** exponent)) ** (1 / exponent)


def main_sequence_lifetime(mass: float) -> float:
    """Main sequence lifetime in Gyr."""
    return 10.0 * mass ** -2.5


def _main_sequence_luminosity(mass: float) -> float:
    if mass < 0.43:
        return 0.23 * mass ** 2.3
    if mass < 2.0:
        return mass ** 4
    if mass < 55.0:
        return 1.4 * mass ** 3.5
    return 32_000.0 * mass


def _main_sequence_radius(mass: float) -> float:
    return mass ** 0.8 if mass < 1.0 else mass ** 0.57


def _temperature(luminosity: float, radius: float) -> int:
    return max(1, round(SUN_TEMPERATURE * (luminosity / radius ** 2) ** 0.25))


def _luminosity(radius: float, temperature: float) -> float:
    return radius ** 2 * (temperature / SUN_TEMPERATURE) ** 4


def _build(
    mass: float,
    luminosity: float,
    radius: float,
    age: float,
    luminosity_class: StarLuminosityClass,
    spectral_type: Optional[StarSpectralType] = None,
) -> Star:
    temperature = _temperature(luminosity, radius)
    return Star(
        name="",
        mass=mass,
        luminosity=luminosity,
        radius=radius,
        age=age,
        temperature=temperature,
        spectral_type=spectral_type or StarSpectralType.from_temperature(temperature),
        luminosity_class=luminosity_class,
    )


def generate_star(rng: np.random.Generator, mass: float, age: float, metallicity: float) -> Star:
    """Evolve a star of initial ``mass`` to ``age`` (Gyr).

    The returned star has no name; the system generator names it.
    """
    if mass < HYDROGEN_BURNING_LIMIT:
        return _brown_dwarf(mass, age)

    lifetime = main_sequence_lifetime(mass)
    progress = age / lifetime
    if progress >= 1.0:
        return _remnant(rng, mass, age, age - lifetime)

    # Metal poor stars are slightly hotter and brighter at a given mass.
    luminosity = _main_sequence_luminosity(mass) * 10 ** (-0.1 * metallicity)
    radius = _main_sequence_radius(mass)
    if progress < 0.9:
        luminosity *= 1 + 0.5 * progress
        radius *= 1 + 0.3 * progress
        luminosity_class = StarLuminosityClass.V
        if metallicity < -1.0 and mass < 0.8:
            luminosity_class = StarLuminosityClass.VI
        return _build(mass, luminosity, radius, age, luminosity_class)

    # Post main sequence: expansion grows with how far past 90% of its life it is.
    stage = (progress - 0.9) / 0.1
    if mass >= 40.0:
        luminosity_class = StarLuminosityClass.O
        growth = 300.0
    elif mass >= WHITE_DWARF_PROGENITOR_LIMIT:
        luminosity_class = StarLuminosityClass.IA if mass >= 15.0 else StarLuminosityClass.IB
        growth = 150.0
    elif stage < 0.3:
        luminosity_class = StarLuminosityClass.IV
        growth = 2.0
    elif mass >= 4.0:
        luminosity_class = StarLuminosityClass.II
        growth = 40.0
    else:
        luminosity_class = StarLuminosityClass.III
        growth = 15.0
    radius *= 1 + growth * stage
    luminosity *= 1 + (growth / 4) * stage
    return _build(mass, luminosity, radius, age, luminosity_class)


def _brown_dwarf(mass: float, age: float) -> Star:
    radius = 0.1 * (1 + 0.2 / max(age, 0.01) ** 0.5)
    temperature = 2500 * (mass / HYDROGEN_BURNING_LIMIT) ** 0.8 * max(age, 0.01) ** -0.3
    temperature = min(2900.0, max(250.0, temperature))
    return _build(mass, _luminosity(radius, temperature), radius, age, StarLuminosityClass.V)


def _remnant(rng: np.random.Generator, mass: float, age: float, cooling_age: float) -> Star:
    if mass < WHITE_DWARF_PROGENITOR_LIMIT:
        remnant_mass = 0.109 * mass + 0.394
        radius = 0.0126 * remnant_mass ** (-1 / 3)
        temperature = max(3_000.0, 40_000.0 * (1 + cooling_age / 0.1) ** -0.4)
        if temperature < 5_000.0:
            spectral_class = SpectralClass.DC
        elif rng.random() < 0.8:
            spectral_class = SpectralClass.DA
        else:
            spectral_class = SpectralClass.DB
    else:
        remnant_mass = float(np.clip(rng.normal(1.4, 0.1), 1.1, 2.2))
        radius = NEUTRON_STAR_RADIUS
        temperature = max(10_000.0, 1.0e6 * (1 + cooling_age / 0.001) ** -0.3)
        spectral_class = SpectralClass.XNS
    return _build(
        remnant_mass,
        _luminosity(radius, temperature),
        radius,
        age,
        StarLuminosityClass.VII,
        StarSpectralType(spectral_class),
    )


def multiple_star_frequency(primary_mass: float) -> float:
    """Fraction of systems with a companion, by primary mass."""
    if primary_mass < 0.1:
        return 0.22
    if primary_mass < 0.5:
        return 0.26
    if primary_mass < 1.3:
        return 0.44
    if primary_mass < 5.0:
        return 0.6
    return 0.75
