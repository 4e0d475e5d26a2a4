from planetgen.generation.fixtures import OCTUPLA, default_settings


async def handle_settings() -> dict:
    return default_settings().to_dict()


async def handle_system() -> dict:
    return OCTUPLA.to_dict()
