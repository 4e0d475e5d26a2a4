#!/usr/bin/env python3
"""Planet Generator HTTP server."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from planetgen import __version__
from planetgen.generation.errors import ConfigurationError, GenerationError
from planetgen.server.api import (
    fixtures as api_fixtures,
    galaxy as api_galaxy,
    system as api_system,
    universe as api_universe,
)
from planetgen.server.api.utils import error_response
from planetgen.server.server_logging import request_logger
from planetgen.utils.config import ServerConfig, get_server_config


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    config = config or get_server_config()
    static_dir = Path(config.static_dir)

    app = FastAPI(title="Planet Generator", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logger)

    @app.exception_handler(GenerationError)
    async def _generation_error(_: Request, exc: GenerationError):
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _malformed_body(_: Request, exc: RequestValidationError):
        return error_response(ConfigurationError(f"Malformed request body: {exc.errors()}"))

    @app.post("/universe")
    async def universe_api(payload: Optional[Dict[str, Any]] = Body(default=None)) -> Dict[str, Any]:
        return await api_universe.handle(payload)

    @app.post("/galaxy")
    async def galaxy_api(payload: Optional[Dict[str, Any]] = Body(default=None)) -> Dict[str, Any]:
        return await api_galaxy.handle(payload)

    @app.post("/system")
    async def system_api(payload: Optional[Dict[str, Any]] = Body(default=None)) -> Dict[str, Any]:
        return await api_system.handle(payload)

    @app.get("/test-settings")
    async def test_settings() -> Dict[str, Any]:
        return await api_fixtures.handle_settings()

    # Hand-written fixture for front-end work, not generator output.
    @app.get("/test-system")
    async def test_system() -> Dict[str, Any]:
        return await api_fixtures.handle_system()

    @app.get("/")
    async def index() -> FileResponse:
        index_path = static_dir / "index.html"
        if not index_path.is_file():
            raise HTTPException(status_code=404, detail="index.html not found")
        return FileResponse(index_path)

    # Mounted last so the generation routes above always win.
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir), name="static")
    return app


app = create_app()
