#!/usr/bin/env python3
"""Entry point for running the Planet Generator server.

Run with: python -m planetgen.server
"""

import uvicorn

from planetgen.server.server import create_app
from planetgen.server.server_logging import configure_logging
from planetgen.utils.config import get_server_config

if __name__ == "__main__":
    config = get_server_config()
    configure_logging(config.log_level, config.log_file)
    uvicorn.run(create_app(config), host=config.host, port=config.port)
