from planetgen.generation.pipeline import generate_universe
from planetgen.generation.settings import GenerationSettings

from .utils import require_mapping, run_generation


async def handle(request: dict) -> dict:
    settings = GenerationSettings.parse(require_mapping(request))
    universe = await run_generation(generate_universe, settings)
    return universe.to_dict()
