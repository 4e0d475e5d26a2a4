import numpy as np
import pytest

from planetgen.generation.stars import (
    NEUTRON_STAR_RADIUS,
    SpectralClass,
    Star,
    StarLuminosityClass,
    StarSpectralType,
    generate_star,
    main_sequence_lifetime,
    multiple_star_frequency,
    sample_mass,
)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def test_sampled_masses_stay_in_imf_range(rng):
    masses = [sample_mass(rng) for _ in range(2000)]
    assert min(masses) >= 0.013
    assert max(masses) <= 150.0
    # Low mass stars dominate.
    assert sum(mass < 0.5 for mass in masses) > len(masses) / 2


def test_sun_like_star_is_a_g_dwarf(rng):
    star = generate_star(rng, 1.0, 4.6, 0.0)
    assert star.spectral_type.spectral_class == SpectralClass.G
    assert star.luminosity_class == StarLuminosityClass.V
    assert 5200 <= star.temperature < 6000
    assert star.name == ""


def test_ageing_star_leaves_main_sequence(rng):
    star = generate_star(rng, 1.0, 9.5, 0.0)
    assert star.luminosity_class == StarLuminosityClass.III
    assert star.radius > 1.0


def test_brown_dwarf(rng):
    star = generate_star(rng, 0.05, 5.0, 0.0)
    assert star.luminosity_class == StarLuminosityClass.V
    assert star.temperature <= 2900
    assert star.spectral_type.spectral_class in (SpectralClass.M, SpectralClass.L, SpectralClass.T, SpectralClass.Y)


def test_dead_intermediate_mass_star_is_a_white_dwarf(rng):
    star = generate_star(rng, 3.0, 10.0, 0.0)
    assert star.luminosity_class == StarLuminosityClass.VII
    assert star.spectral_type.spectral_class in (SpectralClass.DA, SpectralClass.DB, SpectralClass.DC)
    assert star.spectral_type.subclass is None
    assert star.mass < 1.4


def test_dead_massive_star_is_a_neutron_star(rng):
    star = generate_star(rng, 20.0, 1.0, 0.0)
    assert star.spectral_type == StarSpectralType(SpectralClass.XNS)
    assert star.radius == NEUTRON_STAR_RADIUS
    assert star.temperature > 0


def test_spectral_type_formatting():
    g2 = StarSpectralType(SpectralClass.G, 2)
    assert str(g2) == "G2"
    assert g2.to_json() == {"G": 2}
    assert StarSpectralType.from_json({"G": 2}) == g2
    assert StarSpectralType(SpectralClass.DA).to_json() == "DA"
    assert StarSpectralType.from_json("DA") == StarSpectralType(SpectralClass.DA)


@pytest.mark.parametrize(
    "spectral_class, subclass",
    [(SpectralClass.G, None), (SpectralClass.K, 10), (SpectralClass.DA, 1), (SpectralClass.XNS, 0)],
)
def test_invalid_spectral_types_are_rejected(spectral_class, subclass):
    with pytest.raises(ValueError):
        StarSpectralType(spectral_class, subclass)


@pytest.mark.parametrize(
    "temperature, expected",
    [(5772, "G2"), (100_000, "O0"), (9_999, "A0"), (250, "Y9"), (100, "Y9"), (0, "Y9"), (3_000, "M5")],
)
def test_spectral_type_from_temperature(temperature, expected):
    assert str(StarSpectralType.from_temperature(temperature)) == expected


def test_star_json_shape():
    star = Star(
        name="Sol A (G2 V)",
        mass=1.0,
        luminosity=1.0,
        radius=1.0,
        age=4.6,
        temperature=5772,
        spectral_type=StarSpectralType(SpectralClass.G, 2),
        luminosity_class=StarLuminosityClass.V,
    )
    data = star.to_dict()
    assert data["spectral_type"] == {"G": 2}
    assert data["luminosity_class"] == "V"
    assert star.classification == "G2 V"
    assert Star.from_dict(data) == star


def test_lifetime_and_multiplicity():
    assert main_sequence_lifetime(1.0) == pytest.approx(10.0)
    assert main_sequence_lifetime(10.0) < main_sequence_lifetime(1.0)
    frequencies = [multiple_star_frequency(mass) for mass in (0.05, 0.3, 1.0, 3.0, 20.0)]
    assert frequencies == sorted(frequencies)
