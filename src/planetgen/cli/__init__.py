"""Planet Generator CLI.

Usage:
    planetgen --help
"""

from planetgen.cli.app import app

__all__ = ["app"]
