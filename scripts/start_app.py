#!/usr/bin/env python3
"""Run the registration API under uvicorn."""

import sys

import logfire
import uvicorn

from yam.config import Settings
from yam.util.logging import setup_logging
from yam.util.observability import configure_logfire


def main() -> int:
    settings = Settings()

    # Before the app module is imported, so startup failures are traced
    configure_logfire(settings)
    setup_logging(settings)

    logfire.info(
        "Starting registration API",
        environment=settings.environment,
        port=settings.port,
    )
    try:
        uvicorn.run(
            "yam.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
            # Our handlers from setup_logging stay in place
            log_config=None,
        )
    except Exception:
        logfire.exception("Registration API failed to start")
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
