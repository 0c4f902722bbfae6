#!/usr/bin/env python
"""
Start the photo storage API under uvicorn.

Host, port and log level come from the environment (HOST, PORT, LOG_LEVEL).
"""
import logging

import uvicorn

from photo_api.app.core.config import get_settings


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("server")
    logger.info("Photo storage API starting on port %s", settings.port)
    uvicorn.run(
        "photo_api.app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
