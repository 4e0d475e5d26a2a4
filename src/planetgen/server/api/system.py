from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from planetgen.generation.coordinates import SpaceCoordinates
from planetgen.generation.errors import ConfigurationError
from planetgen.generation.pipeline import generate_system
from planetgen.generation.settings import GenerationSettings

from .utils import require_mapping, run_generation


class CoordinatesPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    x: StrictInt
    y: StrictInt
    z: StrictInt

    def to_coordinates(self) -> SpaceCoordinates:
        return SpaceCoordinates(self.x, self.y, self.z)


class SystemRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    settings: dict = Field(default_factory=dict)
    coordinates: CoordinatesPayload
    system_index: int = Field(default=0, ge=0)


async def handle(request: dict) -> dict:
    """Generate the system at ``request["coordinates"]``.

    Settings problems surface as ``ConfigurationError``; coordinates outside
    the galaxy as ``ResolutionNotFound``.
    """
    try:
        payload = SystemRequest.model_validate(require_mapping(request))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ConfigurationError(f"Invalid system request: {problems}") from exc

    settings = GenerationSettings.parse(payload.settings)
    system = await run_generation(
        generate_system,
        settings,
        payload.coordinates.to_coordinates(),
        payload.system_index,
    )
    return system.to_dict()
