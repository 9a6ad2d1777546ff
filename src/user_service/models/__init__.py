from __future__ import annotations

from ..db.registry import ModelRegistry, ResourceDescriptor
from .user import USER_RESOURCE, UserCreate, UserDocument, UserUpdate

USER = ResourceDescriptor(
    name=USER_RESOURCE,
    collection="users",
    schema=UserDocument,
    unique=("email",),
)


def build_registry() -> ModelRegistry:
    """Registry with every resource this service knows about."""
    return ModelRegistry([USER])


__all__ = [
    "USER",
    "USER_RESOURCE",
    "UserCreate",
    "UserDocument",
    "UserUpdate",
    "build_registry",
]
