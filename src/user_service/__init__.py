from . import app
from .exceptions import (
    DuplicateKey,
    ErrorKind,
    InternalError,
    InvalidArgument,
    NotFound,
    RepositoryError,
    ResourceResolutionError,
    ValidationFailed,
)

__version__ = "0.1.0"

__all__ = [
    "app",
    "ErrorKind",
    "RepositoryError",
    "ValidationFailed",
    "DuplicateKey",
    "InvalidArgument",
    "NotFound",
    "ResourceResolutionError",
    "InternalError",
]
