from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MongoSettings(BaseSettings):
    """
    Document store settings.

    Env support:
      - MONGO_URL, MONGO_DB, MONGO_MAX_POOL_SIZE, ... (MONGO_ prefix)
      - MONGODB_URI is accepted as a fallback for the connection string.
    """

    url: Optional[str] = Field(default=None)
    db: str = Field(default="app")
    max_pool_size: int = Field(default=100)
    min_pool_size: int = Field(default=0)
    server_selection_timeout_ms: int = Field(default=5000)
    connect_timeout_ms: int = Field(default=20000)
    socket_timeout_ms: Optional[int] = Field(default=None)
    retry_writes: bool = Field(default=True)
    retry_reads: bool = Field(default=True)
    ensure_indexes: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",  # MONGO_URL, MONGO_DB, ...
        env_file=".env",
        extra="ignore",
    )

    @property
    def resolved_url(self) -> str:
        url = self.url or os.getenv("MONGODB_URI")
        if not url:
            raise ValueError("MONGO_URL or MONGODB_URI must be set for database connectivity")
        return url

    def client_options(self) -> dict[str, Any]:
        opts: dict[str, Any] = {
            "maxPoolSize": self.max_pool_size,
            "minPoolSize": self.min_pool_size,
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "connectTimeoutMS": self.connect_timeout_ms,
            "retryWrites": self.retry_writes,
            "retryReads": self.retry_reads,
        }
        if self.socket_timeout_ms is not None:
            opts["socketTimeoutMS"] = self.socket_timeout_ms
        return opts


@lru_cache
def get_mongo_settings(**kwargs) -> MongoSettings:
    # Only include kwargs that are not None, so defaults in MongoSettings are used
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return MongoSettings(**filtered)
