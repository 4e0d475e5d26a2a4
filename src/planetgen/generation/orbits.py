"""Orbital hierarchy model: a forest of orbital points stored arena style.

Points reference each other by integer id only (``primary_body_id`` and
``satellite_ids``); the owning system keeps every point in one sequence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import InvariantViolation
from .stars import Star


@dataclass(frozen=True)
class Void:
    """An orbital point with no physical body, e.g. a barycenter."""

    def __repr__(self) -> str:
        return "Void"


VOID = Void()

AstronomicalObject = Union[Void, Star]


def object_to_json(obj: AstronomicalObject) -> Union[str, Dict[str, Any]]:
    if isinstance(obj, Void):
        return "Void"
    if isinstance(obj, Star):
        return {"Star": obj.to_dict()}
    raise InvariantViolation(f"Unknown astronomical object: {obj!r}")


def object_from_json(data: Union[str, Dict[str, Any]]) -> AstronomicalObject:
    if data == "Void":
        return VOID
    if isinstance(data, dict) and len(data) == 1:
        ((kind, payload),) = data.items()
        if kind == "Star":
            return Star.from_dict(payload)
    raise ValueError(f"Unknown astronomical object: {data!r}")


def object_kind(obj: AstronomicalObject) -> str:
    if isinstance(obj, Void):
        return "Void"
    if isinstance(obj, Star):
        return "Star"
    raise InvariantViolation(f"Unknown astronomical object: {obj!r}")


@dataclass(frozen=True)
class OrbitalPoint:
    id: int
    primary_body_id: Optional[int]
    distance_from_primary: Optional[float]
    satellite_ids: Tuple[int, ...]
    object: AstronomicalObject

    @property
    def is_root(self) -> bool:
        return self.primary_body_id is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "primary_body_id": self.primary_body_id,
            "distance_from_primary": self.distance_from_primary,
            "satellite_ids": list(self.satellite_ids),
            "object": object_to_json(self.object),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrbitalPoint":
        primary = data.get("primary_body_id")
        distance = data.get("distance_from_primary")
        return cls(
            id=int(data["id"]),
            primary_body_id=None if primary is None else int(primary),
            distance_from_primary=None if distance is None else float(distance),
            satellite_ids=tuple(int(sid) for sid in data.get("satellite_ids", [])),
            object=object_from_json(data["object"]),
        )


def index_points(points: Iterable[OrbitalPoint]) -> Dict[int, OrbitalPoint]:
    """Map ids to points, rejecting duplicate ids."""
    by_id: Dict[int, OrbitalPoint] = {}
    for point in points:
        if point.id in by_id:
            raise InvariantViolation(f"Duplicate orbital point id {point.id}")
        by_id[point.id] = point
    return by_id


def validate_forest(points: Mapping[int, OrbitalPoint]) -> List[int]:
    """Check the referential integrity of an orbital forest.

    Returns the root ids in ascending order. Raises ``InvariantViolation`` on
    the first broken rule.
    """
    roots: List[int] = []
    for point in points.values():
        object_kind(point.object)

        if point.primary_body_id is None:
            if point.distance_from_primary is not None:
                raise InvariantViolation(f"Root point {point.id} has a distance from primary")
            roots.append(point.id)
        else:
            primary = points.get(point.primary_body_id)
            if primary is None:
                raise InvariantViolation(
                    f"Point {point.id} orbits missing point {point.primary_body_id}"
                )
            if primary.satellite_ids.count(point.id) != 1:
                raise InvariantViolation(
                    f"Point {primary.id} must list satellite {point.id} exactly once"
                )
            distance = point.distance_from_primary
            if distance is None or not math.isfinite(distance) or distance <= 0:
                raise InvariantViolation(
                    f"Point {point.id} needs a positive distance from primary, got {distance}"
                )

        for satellite_id in point.satellite_ids:
            satellite = points.get(satellite_id)
            if satellite is None or satellite.primary_body_id != point.id:
                raise InvariantViolation(
                    f"Satellite {satellite_id} of point {point.id} does not orbit it"
                )
        distances = [points[sid].distance_from_primary for sid in point.satellite_ids]
        if len(set(distances)) != len(distances):
            raise InvariantViolation(f"Satellites of point {point.id} share an orbital distance")

    if not roots:
        raise InvariantViolation("Orbital forest has no root")

    # Every point must reach a root; a primary cycle never does.
    for point in points.values():
        seen = set()
        current = point
        while current.primary_body_id is not None:
            if current.id in seen:
                raise InvariantViolation(f"Orbital cycle through point {current.id}")
            seen.add(current.id)
            current = points[current.primary_body_id]
    return sorted(roots)
