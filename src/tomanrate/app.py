# src/tomanrate/app.py
"""
Application Entry Point - Service Initialization and Startup

This module serves as the composition root for the TomanRate service.
It configures logging, wires the exchange rate service into the FastAPI
application and serves it with uvicorn.

Files that USE this module:
- the `tomanrate` console script (pyproject.toml)

Files that this module USES:
- tomanrate.shared.logging_conf (setup_logging for logging configuration)
- tomanrate.config (settings for configuration management)
- tomanrate.adapters.http.api (create_app)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import logging  # Standard library for logging messages and errors
import os  # Operating system interface for the working directory

import uvicorn  # ASGI server

from tomanrate.shared.logging_conf import setup_logging  # Configure logging with file rotation
from tomanrate.adapters.http.api import create_app  # FastAPI application factory


def main() -> None:
    """
    Initialize and start the HTTP service.

    This function:
    1. Sets up logging from settings
    2. Warns when no Navasan key is configured (requests will get HTTP 500)
    3. Builds the FastAPI app and serves it
    """
    from tomanrate.config import settings

    setup_logging(
        level=logging.INFO,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        log_stdout=settings.log_stdout,
    )
    logger = logging.getLogger(__name__)
    logger.info("Working directory: %s", os.getcwd())

    if not settings.api_key_configured:
        logger.warning("NAVASAN_API_KEY missing; /api/exchange-rate will answer 500")

    app = create_app(config=settings)

    logger.info(
        "Starting server on %s:%d, monthly limit=%d, rate log=%s",
        settings.host,
        settings.port,
        settings.monthly_limit,
        settings.rate_log_file,
    )
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    except KeyboardInterrupt:
        logger.info("Server stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception("Unexpected error during server operation: %s (type: %s)", e, type(e).__name__)
        raise


if __name__ == "__main__":
    main()
