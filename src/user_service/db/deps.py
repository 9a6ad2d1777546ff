from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from .engine import MongoEngine
from .registry import ModelRegistry
from .repository import BaseRepository


def get_engine(request: Request) -> MongoEngine:
    return request.app.state.mongo_engine  # type: ignore[attr-defined]


def get_registry(request: Request) -> ModelRegistry:
    return request.app.state.model_registry  # type: ignore[attr-defined]


def get_repository(
    engine: Annotated[MongoEngine, Depends(get_engine)],
    registry: Annotated[ModelRegistry, Depends(get_registry)],
) -> BaseRepository:
    return BaseRepository(engine, registry)


EngineDep = Annotated[MongoEngine, Depends(get_engine)]
RepositoryDep = Annotated[BaseRepository, Depends(get_repository)]
