import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from planetgen.generation.errors import ConfigurationError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8042
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FILE = "planet-generator.log"
DEFAULT_STATIC_DIR = "static"


@dataclass(frozen=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[Path] = Path(DEFAULT_LOG_FILE)
    static_dir: Path = Path(DEFAULT_STATIC_DIR)
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def get_server_config(env_file: Optional[Path] = None) -> ServerConfig:
    """Read the server configuration from the environment.

    A ``.env`` file (or ``env_file``) is loaded first; variables already set
    in the environment win. ``PLANETGEN_LOG_FILE`` set to an empty string
    disables the log file.
    """
    load_dotenv(env_file)

    raw_port = os.getenv("PLANETGEN_PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError:
        raise ConfigurationError(f"PLANETGEN_PORT must be an integer, got {raw_port!r}") from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"PLANETGEN_PORT out of range: {port}")

    log_file = os.getenv("PLANETGEN_LOG_FILE", DEFAULT_LOG_FILE)
    origins = os.getenv("PLANETGEN_CORS_ORIGINS", "*")

    return ServerConfig(
        host=os.getenv("PLANETGEN_HOST", DEFAULT_HOST),
        port=port,
        log_level=os.getenv("PLANETGEN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        log_file=Path(log_file) if log_file else None,
        static_dir=Path(os.getenv("PLANETGEN_STATIC_DIR", DEFAULT_STATIC_DIR)),
        cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
    )
