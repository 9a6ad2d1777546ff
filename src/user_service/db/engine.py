from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING

from .settings import MongoSettings

if TYPE_CHECKING:
    from .registry import ModelRegistry

logger = logging.getLogger(__name__)


def sanitize_url(url: str) -> str:
    """Hide the password part of a connection string for logging."""
    if "://" not in url or "@" not in url:
        return url
    scheme, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        user = credentials.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"
    return url


class MongoEngine:
    """Holds the process-wide motor client and the selected database.

    The client is created lazily by ``open()`` (or on first access) and
    released by ``close()``; one engine lives for the whole app lifespan.
    """

    def __init__(
        self,
        settings: MongoSettings,
        *,
        client: Optional[AsyncIOMotorClient] = None,
    ) -> None:
        self.settings = settings
        self._client: Optional[AsyncIOMotorClient] = client
        self._url: Optional[str] = None if client is not None else settings.resolved_url

    @property
    def sanitized_url(self) -> str:
        return sanitize_url(self._url) if self._url else "<injected>"

    def open(self) -> AsyncIOMotorClient:
        if self._client is None:
            self._client = AsyncIOMotorClient(self._url, **self.settings.client_options())
        return self._client

    @property
    def client(self) -> AsyncIOMotorClient:
        return self.open()

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self.client[self.settings.db]

    def collection(self, name: str) -> AsyncIOMotorCollection:
        return self.database[name]

    async def ping(self) -> Any:
        return await self.client.admin.command("ping")

    async def ensure_indexes(self, registry: "ModelRegistry") -> None:
        for descriptor in registry.descriptors():
            coll = self.collection(descriptor.collection)
            for field in descriptor.unique:
                await coll.create_index([(field, ASCENDING)], unique=True, name=f"{field}_unique")
                logger.debug("Ensured unique index %s on %s", field, descriptor.collection)

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
