"""
Root conftest.py for user-service tests.

Fixtures are organized by category:
- Store fixtures (fake motor client, engine, registry, repository)
- API fixtures (FastAPI app, async client)
"""

from __future__ import annotations

from typing import Any, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, ConfigDict

from tests.unit.utils.fake_mongo import FakeMongoClient
from user_service.api.fastapi import create_app
from user_service.db import BaseRepository, ModelRegistry, MongoEngine, MongoSettings, ResourceDescriptor
from user_service.models import USER


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Tag tests by folder so `-m repository` / `-m api` select them."""
    for item in items:
        norm = str(item.fspath).replace("\\", "/")
        if "/tests/unit/db/" in norm:
            item.add_marker(pytest.mark.repository)
        if "/tests/api/" in norm:
            item.add_marker(pytest.mark.api)


# =============================================================================
# TEST RESOURCES
# =============================================================================


class PostDocument(BaseModel):
    """A second resource with references, used to exercise populate."""

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    title: str
    author: Optional[Any] = None
    reviewers: list[Any] = []


POST = ResourceDescriptor(
    name="post",
    collection="posts",
    schema=PostDocument,
    references={"author": "user", "reviewers": "user"},
)


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def fake_client() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture
def registry() -> ModelRegistry:
    return ModelRegistry([USER, POST])


@pytest_asyncio.fixture
async def engine(fake_client, registry) -> MongoEngine:
    eng = MongoEngine(MongoSettings(db="test_db"), client=fake_client)
    await eng.ensure_indexes(registry)
    return eng


@pytest.fixture
def repository(engine, registry) -> BaseRepository:
    return BaseRepository(engine, registry)


@pytest.fixture
def users_collection(fake_client):
    return fake_client["test_db"]["users"]


# =============================================================================
# API FIXTURES
# =============================================================================


@pytest.fixture
def app(engine, registry):
    application = create_app(engine=engine, registry=registry, configure_logging=False)
    # ASGITransport does not run the lifespan; mirror what attach_mongo sets on startup.
    application.state.mongo_engine = engine
    application.state.model_registry = registry
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
