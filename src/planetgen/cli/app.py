"""Main Typer application for the Planet Generator CLI."""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from loguru import logger
from rich.console import Console

from planetgen import __version__
from planetgen.generation.coordinates import SpaceCoordinates
from planetgen.generation.errors import ConfigurationError, GenerationError, ResolutionNotFound
from planetgen.generation.fixtures import default_settings
from planetgen.generation.pipeline import generate_galaxy, generate_system, generate_universe
from planetgen.generation.settings import GenerationSettings
from planetgen.server.server_logging import configure_logging
from planetgen.utils.config import get_server_config

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="planetgen",
    help="Planet Generator - deterministic universes, galaxies and star systems.",
    rich_markup_mode="rich",
)

EXIT_CODES = {ConfigurationError: 1, ResolutionNotFound: 2}

SeedOption = typer.Option(None, "--seed", "-s", help="Seed; omit for a random one.")
SettingsOption = typer.Option(
    None,
    "--settings",
    "-f",
    help="JSON file with generation settings.",
    exists=True,
    dir_okay=False,
)


def load_settings(seed: Optional[str], settings_file: Optional[Path]) -> GenerationSettings:
    """Build settings from an optional JSON file, ``--seed`` taking precedence."""
    data: Dict[str, Any] = {}
    if settings_file is not None:
        try:
            data = json.loads(settings_file.read_text())
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{settings_file} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"{settings_file} must hold a JSON object")
    if seed is not None:
        data = {**data, "seed": seed}
    return GenerationSettings.parse(data)


def _print_json(payload: Dict[str, Any]) -> None:
    console.print_json(json.dumps(payload))


def _fail(exc: GenerationError) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {exc}")
    for error_type, code in EXIT_CODES.items():
        if isinstance(exc, error_type):
            raise typer.Exit(code)
    raise exc


@app.command()
def settings() -> None:
    """Print the default example settings (seed "default")."""
    _print_json(default_settings().to_dict())


@app.command()
def universe(
    seed: Optional[str] = SeedOption,
    settings_file: Optional[Path] = SettingsOption,
) -> None:
    """Generate a universe."""
    try:
        result = generate_universe(load_settings(seed, settings_file))
    except GenerationError as exc:
        _fail(exc)
        return
    _print_json(result.to_dict())


@app.command()
def galaxy(
    seed: Optional[str] = SeedOption,
    settings_file: Optional[Path] = SettingsOption,
    index: Optional[int] = typer.Option(None, "--index", "-i", help="Galaxy slot in the neighborhood."),
) -> None:
    """Generate a galaxy."""
    try:
        result = generate_galaxy(load_settings(seed, settings_file), index)
    except GenerationError as exc:
        _fail(exc)
        return
    _print_json(result.to_dict())


@app.command()
def system(
    x: int = typer.Argument(..., help="Hex x coordinate."),
    y: int = typer.Argument(..., help="Hex y coordinate."),
    z: int = typer.Argument(..., help="Hex z coordinate."),
    seed: Optional[str] = SeedOption,
    settings_file: Optional[Path] = SettingsOption,
    system_index: int = typer.Option(0, "--system-index", "-n", min=0, help="System within the hex."),
) -> None:
    """Generate the star system at hex X Y Z."""
    try:
        result = generate_system(
            load_settings(seed, settings_file),
            SpaceCoordinates(x, y, z),
            system_index,
        )
    except GenerationError as exc:
        _fail(exc)
        return
    _print_json(result.to_dict())


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Override PLANETGEN_HOST."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Override PLANETGEN_PORT."),
) -> None:
    """Run the HTTP server."""
    import uvicorn

    from planetgen.server.server import create_app

    config = get_server_config()
    configure_logging(config.log_level, config.log_file)
    console.print(
        f"[bold]Planet Generator[/bold] v{__version__} on "
        f"http://{host or config.host}:{port or config.port}"
    )
    uvicorn.run(create_app(config), host=host or config.host, port=port or config.port)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]Planet Generator[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", help="Log generation steps to stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        is_eager=True,
        callback=version_callback,
    ),
) -> None:
    """Planet Generator - deterministic universes, galaxies and star systems."""
    logger.configure(handlers=[{"sink": sys.stderr, "level": "DEBUG" if verbose else "WARNING"}])
