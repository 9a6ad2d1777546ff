from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from ....db.deps import RepositoryDep
from ....models import UserCreate, UserUpdate
from ....services import UserService
from ..responses import success_response

ROUTER_PREFIX = "/api"
ROUTER_TAG = "users"

USER_CREATED = "User created successfully"
USER_FETCHED = "User fetched successfully"
USERS_FETCHED = "Users fetched successfully"
USER_UPDATED = "User updated successfully"
USER_DELETED = "User deleted successfully"

router = APIRouter()


def get_user_service(repository: RepositoryDep) -> UserService:
    return UserService(repository)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.post("/user-create", status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, service: UserServiceDep):
    user = await service.create_user(payload.model_dump(exclude_none=True))
    return success_response(USER_CREATED, user, status.HTTP_201_CREATED)


@router.get("/user-getById/{user_id}")
async def get_user(user_id: str, service: UserServiceDep):
    user = await service.get_user(user_id)
    return success_response(USER_FETCHED, user)


@router.get("/user-getAll")
async def list_users(
    service: UserServiceDep,
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=100),
):
    result = await service.list_users(page=page, limit=limit)
    return success_response(USERS_FETCHED, result.to_dict())


@router.put("/user-update/{user_id}")
async def update_user(user_id: str, payload: UserUpdate, service: UserServiceDep):
    user = await service.update_user(user_id, payload.model_dump(exclude_unset=True))
    return success_response(USER_UPDATED, user)


@router.delete("/user-delete/{user_id}")
async def delete_user(user_id: str, service: UserServiceDep):
    result = await service.delete_user(user_id)
    return success_response(USER_DELETED, {"deleted_count": result["deleted_count"]})
