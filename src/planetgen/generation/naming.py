"""Pronounceable names for generated galaxies and star systems."""

from __future__ import annotations

import string

import numpy as np

ONSETS = (
    "", "b", "c", "d", "f", "g", "k", "l", "m", "n", "p", "r", "s", "t", "v", "z",
    "br", "ch", "cr", "dr", "gl", "kr", "ph", "pr", "qu", "sh", "st", "th", "tr", "x",
)
VOWELS = ("a", "e", "i", "o", "u", "ae", "ai", "au", "ei", "io", "ou", "y")
CODAS = ("", "", "", "l", "n", "r", "s", "x", "nd", "rn", "st", "th")
ENDINGS = ("a", "us", "is", "on", "ia", "or", "ax", "um", "e", "ar")

COMPONENT_LETTERS = string.ascii_uppercase


def generate_name(rng: np.random.Generator, *, min_syllables: int = 1, max_syllables: int = 3) -> str:
    syllables = int(rng.integers(min_syllables, max_syllables + 1))
    parts = []
    for _ in range(syllables):
        parts.append(ONSETS[int(rng.integers(len(ONSETS)))])
        parts.append(VOWELS[int(rng.integers(len(VOWELS)))])
        parts.append(CODAS[int(rng.integers(len(CODAS)))])
    parts.append(ONSETS[int(rng.integers(1, len(ONSETS)))])
    parts.append(ENDINGS[int(rng.integers(len(ENDINGS)))])
    return "".join(parts).capitalize()


def component_letter(index: int) -> str:
    """Letter of the ``index``-th system component: A..Z, then AA, AB..."""
    letters = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, len(COMPONENT_LETTERS))
        letters = COMPONENT_LETTERS[remainder] + letters
    return letters
