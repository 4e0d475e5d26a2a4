"""Shared fixtures for the Planet Generator tests."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Allow running the suite from a checkout without installing the package.
_src_path = Path(__file__).resolve().parent.parent / "src"
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

from planetgen.generation.coordinates import CoordinateBox  # noqa: E402
from planetgen.generation.pipeline import GenerationPipeline  # noqa: E402
from planetgen.generation.settings import GenerationSettings  # noqa: E402


@pytest.fixture
def default_settings() -> GenerationSettings:
    return GenerationSettings.default_example()


@pytest.fixture
def pipeline(default_settings) -> GenerationPipeline:
    return GenerationPipeline(default_settings)


@pytest.fixture
def small_galaxy(pipeline):
    """A generated galaxy shrunk to a 7x5x3 hex extent so it can be walked exhaustively."""
    galaxy = pipeline.galaxy()
    return replace(
        galaxy,
        extent=CoordinateBox.centered((7, 5, 3)),
        sector_size=(3, 2, 2),
        max_division_level=2,
        subdivision_factor=2,
        explored_hexes={},
    )
