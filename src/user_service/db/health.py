from __future__ import annotations

import logging

from .engine import MongoEngine

logger = logging.getLogger(__name__)


async def mongo_healthcheck(engine: MongoEngine) -> bool:
    try:
        await engine.ping()
        return True
    except Exception as exc:
        logger.warning("Mongo healthcheck failed: %s", exc)
        return False
