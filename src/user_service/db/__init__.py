# Public DB API exports
from .settings import MongoSettings, get_mongo_settings
from .engine import MongoEngine, sanitize_url
from .registry import ModelRegistry, ResourceDescriptor
from .repository import BaseRepository, QueryResult, parse_object_id
from .health import mongo_healthcheck
from .integration import attach_mongo
from .deps import get_engine, get_registry, get_repository, EngineDep, RepositoryDep

__all__ = [
    "MongoSettings",
    "get_mongo_settings",
    "MongoEngine",
    "sanitize_url",
    "ModelRegistry",
    "ResourceDescriptor",
    "BaseRepository",
    "QueryResult",
    "parse_object_id",
    "mongo_healthcheck",
    "attach_mongo",
    "get_engine",
    "get_registry",
    "get_repository",
    "EngineDep",
    "RepositoryDep",
]
