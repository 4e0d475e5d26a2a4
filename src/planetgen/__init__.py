"""Planet Generator: procedural universes served over HTTP."""

__version__ = "0.1.0"
