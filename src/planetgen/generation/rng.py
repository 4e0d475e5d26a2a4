"""Seed handling and the deterministic random streams used by the pipeline."""

from __future__ import annotations

import hashlib
import secrets

import numpy as np

RANDOM_SEED_PLACEHOLDERS = frozenset({"", "random"})
_UINT64 = 2**64


def is_placeholder_seed(seed: str | None) -> bool:
    return seed is None or seed.strip().lower() in RANDOM_SEED_PLACEHOLDERS


def fresh_seed() -> str:
    """Return a new process-random seed string."""
    return secrets.token_hex(8)


def seed_to_int(seed: str) -> int:
    """Hash a seed string to a 64-bit integer that is stable across processes."""
    digest = hashlib.blake2b(seed.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


def new_stream(seed: str) -> np.random.Generator:
    """Create the single pipeline stream for a concrete seed."""
    return np.random.default_rng(seed_to_int(seed))


def derive_stream(base_seed: int, *parts: int) -> np.random.Generator:
    """Create an independent stream keyed by ``base_seed`` and integer parts.

    Used for lookups that must not depend on how often, or in which order,
    they are performed.
    """
    entropy = [base_seed % _UINT64] + [int(part) % _UINT64 for part in parts]
    return np.random.default_rng(entropy)


def draw_seed(rng: np.random.Generator) -> int:
    """Draw a seed that stays exact once parsed as a JavaScript number."""
    return int(rng.integers(0, 2**53))
