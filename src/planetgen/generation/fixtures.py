"""Fixed values served to clients for bootstrapping and testing.

``OCTUPLA`` is a hand-written nine star system used by front-end work. It
satisfies every system invariant but is not output of the generator.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .orbits import VOID, OrbitalPoint
from .settings import GenerationSettings
from .stars import SpectralClass, Star, StarLuminosityClass, StarSpectralType
from .system import StarSystem


def default_settings() -> GenerationSettings:
    return GenerationSettings.default_example()


def _star(
    name: str,
    mass: float,
    luminosity: float,
    radius: float,
    temperature: int,
    spectral: Tuple[SpectralClass, Optional[int]],
    luminosity_class: StarLuminosityClass = StarLuminosityClass.V,
) -> Star:
    return Star(
        name=name,
        mass=mass,
        luminosity=luminosity,
        radius=radius,
        age=4.6,
        temperature=temperature,
        spectral_type=StarSpectralType(*spectral),
        luminosity_class=luminosity_class,
    )


def _point(point_id, primary, distance, satellites, obj) -> OrbitalPoint:
    return OrbitalPoint(
        id=point_id,
        primary_body_id=primary,
        distance_from_primary=distance,
        satellite_ids=tuple(satellites),
        object=obj,
    )


S = SpectralClass

OCTUPLA = StarSystem(
    name="Octupla",
    center_id=16,
    main_star_id=0,
    all_objects=(
        _point(1, 3, 0.03745821439248134, [], _star(
            "Octupla Ba (M7 V)", 0.114816464, 0.0017136049, 0.177, 2791, (S.M, 7))),
        _point(2, 3, 0.04973226716467603, [], _star(
            "Octupla Bb (M9 V)", 0.08647946, 0.0008467538, 0.141, 2622, (S.M, 9))),
        _point(0, 4, 0.05513547187959574, [], _star(
            "Octupla A (G0 V)", 1.234416, 4.4682164, 2.0020883, 5931, (S.G, 0))),
        _point(3, 4, 0.3381097176403421, [1, 2], VOID),
        _point(4, 6, 5.197310496129988, [0, 3], VOID),
        _point(5, 6, 20.900606604977213, [], _star(
            "Octupla C (K9 V)", 0.35701552, 0.03640418, 0.439, 3805, (S.K, 9))),
        _point(6, 8, 19.766755970567417, [4, 5], VOID),
        _point(7, 8, 266.1746531138536, [], _star(
            "Octupla D (M6 V)", 0.13313216, 0.0025596572, 0.19899999, 2910, (S.M, 6))),
        _point(8, 10, 309.734801744982, [6, 7], VOID),
        _point(9, 10, 2765.0653613474487, [], _star(
            "Octupla E (M4 V)", 0.21572936, 0.010239862, 0.293, 3392, (S.M, 4))),
        _point(12, 13, 0.0003740043956514335, [], _star(
            "Octupla Fa (DB VII)", 0.6113024, 0.00029274347, 0.009897539, 7589, (S.DB, None),
            StarLuminosityClass.VII)),
        _point(11, 13, 0.002122341315415619, [], _star(
            "Octupla Fb (M7 V)", 0.10772526, 0.0014501228, 0.168, 2748, (S.M, 7))),
        _point(10, 14, 8398.912409629105, [8, 9], VOID),
        _point(13, 14, 25015.75579368719, [12, 11], VOID),
        _point(14, 16, 62671.17324970373, [10, 13], VOID),
        _point(15, 16, 299130.7939912374, [], _star(
            "Octupla G (K4 V)", 0.5993305, 0.12051362, 0.5913681, 4421, (S.K, 4))),
        _point(16, None, None, [14, 15], VOID),
    ),
)
