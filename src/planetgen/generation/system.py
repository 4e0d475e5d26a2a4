"""Star system stage: stars of one hex and their orbital hierarchy."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from loguru import logger

from .coordinates import SpaceCoordinates
from .errors import InvariantViolation, ResolutionNotFound
from .galaxy import GalacticDivision, GalacticHex, Galaxy
from .naming import component_letter, generate_name
from .orbits import VOID, OrbitalPoint, index_points, validate_forest
from .rng import derive_stream
from .settings import StarSettings
from .stars import Star, generate_star, multiple_star_frequency, sample_mass

_SYSTEM_STREAM_TAG = 0x53

# Separation of a subsystem's orbit relative to the subsystems inside it.
HIERARCHY_RATIO = (3.5, 12.0)
# Separation range (AU) of the innermost pairs.
INNER_SEPARATION = (0.01, 5_000.0)
MIN_CLEARANCE = 3.0
MIN_COMPANION_MASS = 0.013
COMPANION_DECAY = 0.6


@dataclass
class _Component:
    """A node of the hierarchy under construction."""

    members: List[int]
    children: Tuple["_Component", ...] = ()
    separation: float = 0.0
    point_id: int = -1
    mass: float = 0.0
    distances: Tuple[float, ...] = field(default=())

    @property
    def is_star(self) -> bool:
        return not self.children

    @property
    def is_close_pair(self) -> bool:
        return len(self.children) == 2 and all(child.is_star for child in self.children)


@dataclass(frozen=True)
class StarSystem:
    name: str
    center_id: int
    main_star_id: int
    all_objects: Tuple[OrbitalPoint, ...]

    @classmethod
    def generate(
        cls,
        system_index: int,
        coord: SpaceCoordinates,
        galactic_hex: GalacticHex,
        sub_sector: GalacticDivision,
        galaxy: Galaxy,
        star_settings: Optional[StarSettings] = None,
    ) -> "StarSystem":
        """Generate the ``system_index``-th system of ``galactic_hex``.

        The galaxy is only touched to record the explored hex, inside its
        exclusive access section.
        """
        if galactic_hex.coordinates != coord or not sub_sector.contains(coord):
            raise ResolutionNotFound(f"Hex and sub-sector do not match coordinates {coord.as_tuple()}")
        if not 0 <= system_index < galactic_hex.system_count:
            raise ResolutionNotFound(
                f"System index {system_index} out of range: hex {coord.as_tuple()} "
                f"has {galactic_hex.system_count} systems"
            )

        star_settings = star_settings or StarSettings()
        rng = derive_stream(galaxy.seed, _SYSTEM_STREAM_TAG, system_index, *coord.as_tuple())
        name = generate_name(rng)
        age = float(np.clip(rng.normal(galactic_hex.mean_age, 0.25 * galactic_hex.mean_age), 0.01, galaxy.age))

        stars = _generate_stars(rng, star_settings, age, galactic_hex.metallicity)
        root = _build_hierarchy(rng, stars, list(range(len(stars))))
        _assign_ids(root, len(stars))
        stars = _name_stars(name, stars, root)

        points: List[OrbitalPoint] = []
        _emit(root, None, None, stars, points)
        system = cls(name=name, center_id=root.point_id, main_star_id=0, all_objects=tuple(points))
        system.validate()

        with galaxy.exclusive_access():
            galaxy.annotate_explored_hex(coord, name)

        logger.debug(
            "Generated system {} at {}: {} stars, center={}",
            name,
            coord.as_tuple(),
            len(stars),
            system.center_id,
        )
        return system

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def point(self, point_id: int) -> OrbitalPoint:
        for point in self.all_objects:
            if point.id == point_id:
                return point
        raise KeyError(point_id)

    def stars(self) -> List[Star]:
        return [point.object for point in self.all_objects if isinstance(point.object, Star)]

    @property
    def main_star(self) -> Star:
        star = self.point(self.main_star_id).object
        if not isinstance(star, Star):
            raise InvariantViolation(f"Main star id {self.main_star_id} is not a star")
        return star

    def validate(self) -> None:
        """Raise ``InvariantViolation`` unless the system is consistent."""
        points = index_points(self.all_objects)
        roots = validate_forest(points)
        if self.center_id not in roots:
            raise InvariantViolation(f"Center {self.center_id} is not a root point")
        main = points.get(self.main_star_id)
        if main is None or not isinstance(main.object, Star):
            raise InvariantViolation(f"Main star id {self.main_star_id} is not a star")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "center_id": self.center_id,
            "main_star_id": self.main_star_id,
            "all_objects": [point.to_dict() for point in self.all_objects],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StarSystem":
        return cls(
            name=data["name"],
            center_id=int(data["center_id"]),
            main_star_id=int(data["main_star_id"]),
            all_objects=tuple(OrbitalPoint.from_dict(point) for point in data["all_objects"]),
        )


def _generate_stars(
    rng: np.random.Generator,
    settings: StarSettings,
    age: float,
    metallicity: float,
) -> List[Star]:
    """Sample every star of the system, most luminous first."""
    primary_mass = sample_mass(rng)
    frequency = settings.multiple_star_frequency
    if frequency is None:
        frequency = multiple_star_frequency(primary_mass)

    masses = [primary_mass]
    while (
        len(masses) < settings.max_stars_per_system
        and rng.random() < frequency * COMPANION_DECAY ** (len(masses) - 1)
    ):
        masses.append(max(MIN_COMPANION_MASS, primary_mass * float(rng.uniform(0.1, 1.0))))

    stars = [generate_star(rng, mass, age, metallicity) for mass in masses]
    return sorted(stars, key=lambda star: star.luminosity, reverse=True)


def _build_hierarchy(rng: np.random.Generator, stars: List[Star], members: List[int]) -> _Component:
    """Split ``members`` recursively into nested binaries, innermost first."""
    if len(members) == 1:
        return _Component(members=members, mass=stars[members[0]].mass)

    heaviest = max(members, key=lambda index: stars[index].mass)
    others = [index for index in members if index != heaviest]
    if len(members) == 2 or rng.random() < 0.6:
        outer_count = 1
    else:
        outer_count = int(rng.integers(2, len(members)))
    shuffled = [others[int(i)] for i in rng.permutation(len(others))]
    outer = sorted(shuffled[:outer_count])
    inner = sorted([heaviest] + shuffled[outer_count:])

    first = _build_hierarchy(rng, stars, inner)
    second = _build_hierarchy(rng, stars, outer)
    if second.mass > first.mass:
        first, second = second, first

    clearance = MIN_CLEARANCE * (_extent(first, stars) + _extent(second, stars))
    if first.is_star and second.is_star:
        low, high = INNER_SEPARATION
        separation = math.exp(rng.uniform(math.log(low), math.log(high)))
    else:
        separation = max(first.separation, second.separation) * float(rng.uniform(*HIERARCHY_RATIO))
    separation = max(separation, clearance)

    total = first.mass + second.mass
    first_distance = separation * second.mass / total
    second_distance = separation - first_distance
    if math.isclose(first_distance, second_distance):
        first_distance = separation * 0.49
        second_distance = separation - first_distance

    return _Component(
        members=sorted(members),
        children=(first, second),
        separation=separation,
        mass=total,
        distances=(first_distance, second_distance),
    )


def _extent(component: _Component, stars: List[Star]) -> float:
    """Radius (AU) a component occupies: a star's radius or its orbit span."""
    if component.is_star:
        return stars[component.members[0]].radius_au
    return component.separation


def _assign_ids(root: _Component, star_count: int) -> None:
    """Stars keep their index as id; barycenters are numbered in post-order."""
    next_id = star_count

    def visit(component: _Component) -> None:
        nonlocal next_id
        if component.is_star:
            component.point_id = component.members[0]
            return
        for child in component.children:
            visit(child)
        component.point_id = next_id
        next_id += 1

    visit(root)


def _name_stars(system_name: str, stars: List[Star], root: _Component) -> List[Star]:
    """Name stars ``<system> A (G2 V)``.

    A close pair below the root shares one letter (``Ba``, ``Bb``).
    """
    groups: List[List[int]] = []

    def collect(component: _Component) -> None:
        if component.is_star:
            groups.append(list(component.members))
        elif component.is_close_pair and component is not root:
            groups.append(sorted(component.members))
        else:
            for child in component.children:
                collect(child)

    collect(root)
    # Members are luminosity ranks, so sorting by the smallest rank puts the
    # main star in component A.
    groups.sort(key=min)

    named = list(stars)
    for letter_index, group in enumerate(groups):
        letter = component_letter(letter_index)
        for member_index, star_index in enumerate(group):
            suffix = "" if len(group) == 1 else chr(ord("a") + member_index)
            star = stars[star_index]
            named[star_index] = star.renamed(f"{system_name} {letter}{suffix} ({star.classification})")
    return named


def _emit(
    component: _Component,
    primary_id: Optional[int],
    distance: Optional[float],
    stars: List[Star],
    points: List[OrbitalPoint],
) -> None:
    """Append the points of ``component`` in post-order."""
    for child, child_distance in zip(component.children, component.distances):
        _emit(child, component.point_id, child_distance, stars, points)
    points.append(
        OrbitalPoint(
            id=component.point_id,
            primary_body_id=primary_id,
            distance_from_primary=distance,
            satellite_ids=tuple(child.point_id for child in component.children),
            object=stars[component.members[0]] if component.is_star else VOID,
        )
    )
