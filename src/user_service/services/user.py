from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..db.repository import BaseRepository, QueryResult, parse_object_id
from ..exceptions import InvalidArgument, NotFound, normalize_error
from ..models import USER_RESOURCE

logger = logging.getLogger(__name__)


class UserService:
    """User-facing operations on top of the generic repository."""

    resource = USER_RESOURCE

    def __init__(self, repository: BaseRepository):
        self.repository = repository

    async def create_user(self, data: Mapping[str, Any]) -> dict[str, Any]:
        try:
            user = await self.repository.create(self.resource, data)
        except Exception as exc:
            raise normalize_error(exc, "Error creating user") from exc
        logger.info("User created: %s", user["_id"])
        return user

    async def get_user(self, user_id: str) -> dict[str, Any]:
        try:
            user = await self.repository.get_by_id(self.resource, user_id)
        except Exception as exc:
            raise normalize_error(exc, "Error fetching user") from exc
        if user is None:
            raise NotFound("User not found")
        return user

    async def list_users(self, *, page: Optional[int] = None, limit: Optional[int] = None) -> QueryResult:
        try:
            return await self.repository.get_many(self.resource, {}, page=page, limit=limit)
        except Exception as exc:
            raise normalize_error(exc, "Error fetching users") from exc

    async def update_user(self, user_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        if not data:
            raise InvalidArgument("No valid fields to update")
        try:
            user = await self.repository.update_by_id(self.resource, user_id, data)
        except Exception as exc:
            raise normalize_error(exc, "Error updating user") from exc
        if user is None:
            raise NotFound("User not found")
        return user

    async def delete_user(self, user_id: str) -> dict[str, Any]:
        # a malformed id is a 400, not a silent "nothing matched"
        oid = parse_object_id(user_id)
        try:
            return await self.repository.delete_many(self.resource, {"_id": oid})
        except NotFound:
            raise NotFound("User not found") from None
        except Exception as exc:
            raise normalize_error(exc, "Error deleting user") from exc
