#!/usr/bin/env python3
"""
Utility Toolkit - HTTP server launcher
"""
import logging
import sys

import uvicorn

from toolkit.config import settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    logger.info(f"Starting {settings.site_name}...")
    logger.info(f"Python {sys.version}, encoding={sys.getdefaultencoding()}")
    logger.info(f"HTTP server will run on http://{settings.host}:{settings.port}")
    uvicorn.run("toolkit.main:app", host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
