import asyncio
from typing import Any, Callable, Dict, TypeVar

from fastapi.responses import JSONResponse
from loguru import logger

from planetgen.generation.errors import (
    ConfigurationError,
    GenerationError,
    ResolutionNotFound,
)

T = TypeVar("T")

ERROR_STATUS = {
    ConfigurationError: 400,
    ResolutionNotFound: 404,
}


def error_status(exc: GenerationError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 500


def error_response(exc: GenerationError) -> JSONResponse:
    """Standard error body: ``{"detail": ..., "code": ...}``."""
    status = error_status(exc)
    if status >= 500:
        logger.error("Generator defect: {}", exc)
    else:
        logger.warning("Generation request rejected ({}): {}", exc.code, exc)
    return JSONResponse(status_code=status, content={"detail": str(exc), "code": exc.code})


async def run_generation(func: Callable[..., T], *args: Any) -> T:
    """Run CPU bound generation off the event loop."""
    return await asyncio.to_thread(func, *args)


def require_mapping(request: Any, name: str = "request body") -> Dict[str, Any]:
    if request is None:
        return {}
    if not isinstance(request, dict):
        raise ConfigurationError(f"{name} must be a JSON object")
    return request
