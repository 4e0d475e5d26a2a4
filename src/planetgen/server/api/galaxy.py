from planetgen.generation.pipeline import generate_galaxy
from planetgen.generation.settings import GenerationSettings

from .utils import require_mapping, run_generation


async def handle(request: dict) -> dict:
    """Generate the galaxy at ``settings.galaxy.galaxy_index`` (0 unless set)."""
    settings = GenerationSettings.parse(require_mapping(request))
    galaxy = await run_generation(generate_galaxy, settings)
    return galaxy.to_dict()
