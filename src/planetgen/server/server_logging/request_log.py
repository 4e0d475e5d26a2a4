"""Log sinks and per-request access logging."""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Awaitable, Callable, Optional

from fastapi import Request, Response
from loguru import logger

LOG_FORMAT = "[{time:YYYY-MM-DD HH:mm:ss}] [{level}] {message}"


def configure_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> None:
    """Send logs to stdout and, when ``log_file`` is set, append them to it."""
    handlers = [{"sink": sys.stdout, "level": level, "format": LOG_FORMAT}]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append({"sink": str(log_file), "level": level, "format": LOG_FORMAT, "enqueue": True})
    logger.configure(handlers=handlers)


async def request_logger(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Log method, path, status and duration. Requests and responses pass through untouched."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    client = request.client.host if request.client else "-"
    logger.info(
        "{} \"{} {}\" {} {:.1f}ms",
        client,
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response
