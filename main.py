"""
Intent Signal Hub — Entry Point
=================================

Run: python main.py
"""

import logging

from scripts.lib.config import get_settings
from scripts.lib.logger import LOG_FORMAT

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format=LOG_FORMAT,
)
logger = logging.getLogger("intent-signal-hub")

if __name__ == "__main__":
    import uvicorn

    logger.info("=" * 60)
    logger.info("  INTENT SIGNAL HUB — Intent Data Ingestion & Scoring")
    logger.info("=" * 60)
    logger.info(f"  Environment : {settings.environment}")
    logger.info(f"  Server      : http://0.0.0.0:{settings.port}")
    logger.info(f"  API Docs    : http://localhost:{settings.port}/docs")
    logger.info(f"  Intent table: {settings.intent_table} (batch size {settings.batch_size})")
    logger.info(f"  API calls   : {'paused' if settings.pause_api_calls else 'enabled'}")
    logger.info(f"  Debug       : {settings.debug}")
    logger.info("=" * 60)

    uvicorn.run(
        "dashboard.api.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )
