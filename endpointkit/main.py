"""
endpointkit — Application Assembly & Runner
===========================================

What:  Logging setup, startup validation, and the uvicorn entry point.
How:   `create_app(server)` puts the CORS gate in front of a Server.
       `serve(server)` configures logging, validates required configuration
       (failing before the listener starts), then hands the app to uvicorn.

Startup sequence (serve):
    1. setup_logging()            level from ENDPOINTKIT_LOG_LEVEL
    2. require_config(...)        ENDPOINTKIT_REQUIRED_ENV keys must be set
    3. uvicorn.run(create_app())  on ENDPOINTKIT_HOST:ENDPOINTKIT_PORT

    server = Server()
    server.add_endpoint("GET", "/notes/{id}", get_note)
    serve(server)
"""

import logging
import sys
from typing import Iterable, Optional

import uvicorn
from starlette.types import ASGIApp

from endpointkit.config import Settings, require_config, settings
from endpointkit.exceptions import ConfigurationError
from endpointkit.middleware.cors import CORSGateMiddleware
from endpointkit.server import Server

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging to stdout.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # Every request is already logged by the `logger` endpoint decorator.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def create_app(server: Server) -> ASGIApp:
    """Wrap `server` with the CORS gate."""
    return CORSGateMiddleware(server)


def validate_startup(required: Iterable[str]) -> None:
    """
    Fail fast when required environment keys are missing.

    Raises:
        ConfigurationError: listing every missing key
    """
    try:
        require_config(required)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e.message)
        logger.error("Fix the configuration and restart the server.")
        raise


def serve(server: Server, config: Optional[Settings] = None) -> None:
    """Validate configuration and run `server` with uvicorn until interrupted."""
    config = config or settings
    setup_logging(config.log_level)
    validate_startup(config.required_env_list)

    logger.info("Server ready at http://%s:%d", config.host, config.port)
    uvicorn.run(
        create_app(server),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        log_config=None,
    )
