import numpy as np
import pytest

from planetgen.generation.coordinates import SpaceCoordinates
from planetgen.generation.errors import ConfigurationError
from planetgen.generation.galaxy import Galaxy
from planetgen.generation.neighborhood import GalacticNeighborhood
from planetgen.generation.pipeline import GenerationPipeline
from planetgen.generation.settings import GalaxyShape, GenerationSettings
from planetgen.generation.universe import Universe


def test_every_hex_of_the_extent_resolves(small_galaxy):
    for coord in small_galaxy.extent.iter_coordinates():
        galactic_hex = small_galaxy.hex(coord)
        assert galactic_hex is not None
        assert galactic_hex.coordinates == coord
        assert galactic_hex.system_count >= 1
        assert len(galactic_hex.division_path) == small_galaxy.max_division_level + 1


@pytest.mark.parametrize("coord", [(4, 0, 0), (0, -3, 0), (0, 0, 2), (1000, 1000, 1000)])
def test_lookups_outside_extent_return_none(small_galaxy, coord):
    coord = SpaceCoordinates(*coord)
    assert small_galaxy.hex(coord) is None
    assert small_galaxy.division_at_level(coord, 0) is None
    assert list(small_galaxy.divisions(coord)) == []


def test_levels_outside_range_return_none(small_galaxy):
    origin = SpaceCoordinates(0, 0, 0)
    assert small_galaxy.division_at_level(origin, -1) is None
    assert small_galaxy.division_at_level(origin, small_galaxy.max_division_level + 1) is None


def test_divisions_nest_and_partition_each_level(small_galaxy):
    for level in range(small_galaxy.max_division_level + 1):
        boxes = {}
        for coord in small_galaxy.extent.iter_coordinates():
            division = small_galaxy.division_at_level(coord, level)
            assert division.level == level
            assert division.contains(coord)
            boxes.setdefault(division.path, set()).add(division.box)
        # One box per path, and the boxes cover the extent exactly once.
        assert all(len(found) == 1 for found in boxes.values())
        assert sum(next(iter(found)).volume for found in boxes.values()) == small_galaxy.extent.volume

    for coord in small_galaxy.extent.iter_coordinates():
        chain = list(small_galaxy.divisions(coord))
        assert [division.level for division in chain] == [0, 1, 2]
        for parent, child in zip(chain, chain[1:]):
            assert child.path[:-1] == parent.path
            assert parent.box.contains(child.box.min)
            assert parent.box.contains(child.box.max)


def test_sectors_are_aligned_on_extent_minimum(small_galaxy):
    extent_min = small_galaxy.extent.min.as_tuple()
    for coord in small_galaxy.extent.iter_coordinates():
        sector = small_galaxy.division_at_level(coord, 0)
        for lo, start, size, tile in zip(extent_min, sector.box.min.as_tuple(), sector.box.size, (3, 2, 2)):
            assert (start - lo) % tile == 0
            assert size <= tile
    assert small_galaxy.sector_grid() == (3, 3, 2)


def test_lookups_are_repeatable_across_runs(small_galaxy):
    coord = SpaceCoordinates(2, -1, 0)
    again = GenerationPipeline(GenerationSettings.default_example()).galaxy()
    assert again.seed == small_galaxy.seed
    assert small_galaxy.hex(coord) == small_galaxy.hex(coord)
    assert small_galaxy.division_at_level(coord, 1) == small_galaxy.division_at_level(coord, 1)


def test_default_galaxy_holds_origin(pipeline):
    galaxy = pipeline.galaxy()
    origin = SpaceCoordinates(0, 0, 0)
    assert galaxy.extent.contains(origin)
    assert galaxy.hex(origin) is not None
    assert galaxy.age <= pipeline.universe().age


def test_our_galaxy_is_the_milky_way():
    settings = GenerationSettings(seed="home", universe={"use_ours": True}, galaxy={"use_ours": True})
    galaxy = GenerationPipeline(settings).galaxy()
    assert galaxy.name == "Milky Way"
    assert galaxy.shape == GalaxyShape.BARRED_SPIRAL
    assert galaxy.diameter == 100_000.0
    assert galaxy.extent.size == (10_000, 10_000, 100)


def test_requested_shape_wins():
    settings = GenerationSettings(seed="shape", galaxy={"shape": "Lenticular"})
    assert GenerationPipeline(settings).galaxy().shape == GalaxyShape.LENTICULAR


def test_galaxy_index_outside_neighborhood_is_rejected():
    settings = GenerationSettings(seed="default", galaxy={"galaxy_index": 10_000})
    with pytest.raises(ConfigurationError):
        GenerationPipeline(settings).galaxy()


def test_galaxy_older_than_generated_universe_is_rejected():
    rng = np.random.default_rng(7)
    universe = Universe.generate(GenerationSettings(seed="young", universe={"age": 5.0}), rng)
    neighborhood = GalacticNeighborhood.generate(universe, GenerationSettings(seed="young"), rng)
    with pytest.raises(ConfigurationError):
        Galaxy.generate(neighborhood, 0, GenerationSettings(seed="young", galaxy={"age": 10.0}), rng)


def test_annotation_requires_exclusive_access(small_galaxy):
    coord = SpaceCoordinates(0, 0, 0)
    with pytest.raises(RuntimeError):
        small_galaxy.annotate_explored_hex(coord, "Solis")

    with small_galaxy.exclusive_access() as galaxy:
        galaxy.annotate_explored_hex(coord, "Solis")
        galaxy.annotate_explored_hex(coord, "Solis")
        with pytest.raises(RuntimeError):
            with small_galaxy.exclusive_access():
                pass

    assert small_galaxy.explored_hexes == {coord: ["Solis"]}
    with pytest.raises(RuntimeError):
        small_galaxy.annotate_explored_hex(coord, "Other")


def test_galaxy_serialization_keeps_explored_hexes(small_galaxy):
    with small_galaxy.exclusive_access():
        small_galaxy.annotate_explored_hex(SpaceCoordinates(1, 1, 0), "Taris")

    data = small_galaxy.to_dict()
    assert data["explored_hexes"] == [{"coordinates": {"x": 1, "y": 1, "z": 0}, "systems": ["Taris"]}]

    restored = Galaxy.from_dict(data)
    assert restored == small_galaxy
    assert restored.hex(SpaceCoordinates(1, 1, 0)) == small_galaxy.hex(SpaceCoordinates(1, 1, 0))
