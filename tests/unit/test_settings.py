import pytest
from pydantic import ValidationError

from planetgen.generation.errors import ConfigurationError
from planetgen.generation.pipeline import generate_universe
from planetgen.generation.settings import GalaxyShape, GenerationSettings


def test_default_example_uses_default_seed_and_documented_defaults():
    example = GenerationSettings.default_example()

    assert example.seed == "default"
    assert example.model_dump() == {**GenerationSettings().model_dump(), "seed": "default"}
    assert example.universe.age is None
    assert example.galaxy.galaxy_index == 0
    assert example.sector.hex_size == (10, 10, 10)
    assert example.sector.max_division_level == 3
    assert example.star.max_stars_per_system == 8


def test_default_example_is_unaffected_by_generation():
    before = GenerationSettings.default_example()
    generate_universe(GenerationSettings(seed="something else", universe={"age": 42.0}))
    assert GenerationSettings.default_example() == before


def test_parse_accepts_empty_payload():
    settings = GenerationSettings.parse({})
    assert settings.seed == ""
    assert not settings.has_fixed_seed


def test_parse_accepts_nested_values():
    settings = GenerationSettings.parse(
        {
            "seed": "abc",
            "galaxy": {"shape": "Elliptical", "age": 3.0},
            "sector": {"hex_size": [5, 5, 20]},
        }
    )
    assert settings.galaxy.shape == GalaxyShape.ELLIPTICAL
    assert settings.sector.hex_size == (5, 5, 20)


@pytest.mark.parametrize(
    "payload, fragment",
    [
        ({"universe": {"age": 200.0}}, "universe.age"),
        ({"universe": {"age": 0.1}}, "universe.age"),
        ({"sector": {"max_division_level": 9}}, "sector.max_division_level"),
        ({"sector": {"subdivision_factor": 1}}, "sector.subdivision_factor"),
        ({"sector": {"hex_size": [0, 10, 10]}}, "hex_size"),
        ({"star": {"max_stars_per_system": 0}}, "star.max_stars_per_system"),
        ({"galaxy": {"galaxy_index": -1}}, "galaxy.galaxy_index"),
        ({"unknown_field": 1}, "unknown_field"),
    ],
)
def test_parse_rejects_out_of_range_values(payload, fragment):
    with pytest.raises(ConfigurationError) as exc:
        GenerationSettings.parse(payload)
    assert fragment in str(exc.value)


def test_galaxy_older_than_fixed_universe_is_rejected():
    with pytest.raises(ConfigurationError) as exc:
        GenerationSettings.parse({"universe": {"age": 5.0}, "galaxy": {"age": 6.0}})
    assert "cannot exceed universe age" in str(exc.value)


def test_settings_are_immutable():
    settings = GenerationSettings(seed="fixed")
    with pytest.raises(ValidationError):
        settings.seed = "other"


def test_resolve_seed_keeps_fixed_seed():
    settings = GenerationSettings(seed="fixed")
    assert settings.resolve_seed() is settings


@pytest.mark.parametrize("seed", ["", "random", "  Random "])
def test_resolve_seed_replaces_placeholder(seed):
    resolved = GenerationSettings(seed=seed).resolve_seed()
    assert resolved.has_fixed_seed
    assert resolved.seed != seed


def test_to_dict_is_json_ready():
    data = GenerationSettings.default_example().to_dict()
    assert data["seed"] == "default"
    assert data["sector"]["hex_size"] == [10, 10, 10]
    assert GenerationSettings.parse(data) == GenerationSettings.default_example()
