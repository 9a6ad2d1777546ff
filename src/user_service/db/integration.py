from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .engine import MongoEngine
from .registry import ModelRegistry
from .settings import get_mongo_settings

logger = logging.getLogger(__name__)


def attach_mongo(
    app: FastAPI,
    *,
    registry: ModelRegistry,
    engine: Optional[MongoEngine] = None,
) -> MongoEngine:
    """
    Attach a MongoEngine to the FastAPI app lifecycle using lifespan, composing with any existing lifespan.
    """
    engine = engine or MongoEngine(get_mongo_settings())
    settings = engine.settings

    existing = getattr(app.router, "lifespan_context", None)  # type: ignore[attr-defined]

    @asynccontextmanager
    async def composed_lifespan(_app: FastAPI):
        # startup
        engine.open()
        _app.state.mongo_engine = engine  # type: ignore[attr-defined]
        _app.state.model_registry = registry  # type: ignore[attr-defined]
        try:
            logger.info(
                "Mongo attached: url=%s db=%s max_pool_size=%s resources=%s",
                engine.sanitized_url,
                settings.db,
                settings.max_pool_size,
                registry.names(),
            )
            if settings.ensure_indexes:
                await engine.ensure_indexes(registry)
            if existing:
                async with existing(_app):  # type: ignore[misc]
                    yield
            else:
                yield
        finally:
            # shutdown
            await engine.close()
            logger.info("Mongo connection closed")

    app.router.lifespan_context = composed_lifespan  # type: ignore[attr-defined]
    return engine
