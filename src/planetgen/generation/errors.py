"""Error taxonomy for the generation pipeline."""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for every failure raised by the generator."""

    code = "generation_error"


class ConfigurationError(GenerationError, ValueError):
    """Settings, or an explicit galaxy index, outside their documented ranges."""

    code = "configuration_error"


class ResolutionNotFound(GenerationError, LookupError):
    """A coordinate, division level or system index the galaxy does not cover."""

    code = "not_found"


class InvariantViolation(GenerationError, RuntimeError):
    """The generator produced an artifact that breaks its own invariants.

    This is a defect, never a recoverable condition.
    """

    code = "invariant_violation"
