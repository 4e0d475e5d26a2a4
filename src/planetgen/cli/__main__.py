"""Entry point for running the CLI as a module.

Usage:
    python -m planetgen.cli
"""

from planetgen.cli.app import app

if __name__ == "__main__":
    app()
