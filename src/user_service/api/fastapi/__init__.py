from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ...app import get_env, setup_logging
from ...app.settings import AppSettings, get_app_settings
from ...db.engine import MongoEngine
from ...db.integration import attach_mongo
from ...db.registry import ModelRegistry
from ...db.routers.health import router as db_health_router
from ...models import build_registry
from .middleware.errors.catchall import CatchAllExceptionMiddleware
from .middleware.errors.handlers import register_error_handlers
from .routers import register_all_routers
from .settings import ApiConfig

logger = logging.getLogger(__name__)


def _cors_origins(api_config: ApiConfig) -> list[str]:
    if api_config.cors_origins:
        return list(api_config.cors_origins)
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]


def create_app(
        app_config: AppSettings | None = None,
        api_config: ApiConfig | None = None,
        *,
        registry: Optional[ModelRegistry] = None,
        engine: Optional[MongoEngine] = None,
        configure_logging: bool = True,
) -> FastAPI:
    """Build the service: logging, CORS, error envelope, routers and the Mongo lifespan.

    ``engine`` lets callers inject a pre-built store handle (tests do); by default
    one is created from MONGO_* settings when the app starts.
    """
    if configure_logging:
        setup_logging()

    api_config = api_config or ApiConfig()
    app_settings = get_app_settings(
        name=app_config.name if app_config else None,
        version=app_config.version if app_config else None,
    )
    if registry is None:
        registry = build_registry()

    app = FastAPI(title=app_settings.name, version=app_settings.version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(api_config),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handling
    app.add_middleware(CatchAllExceptionMiddleware)
    register_error_handlers(app)

    register_all_routers(app)
    if api_config.routers_path:
        register_all_routers(app, base_package=api_config.routers_path)
    app.include_router(db_health_router)

    @app.get("/ping", include_in_schema=False)
    async def ping():
        return {"status": "ok"}

    attach_mongo(app, registry=registry, engine=engine)

    logger.info(f"{app_settings.version} version of {app_settings.name} initialized [env: {get_env()}]")
    return app


__all__ = ["ApiConfig", "create_app"]
