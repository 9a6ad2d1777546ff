from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    DUPLICATE_KEY = "duplicate_key"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class RepositoryError(Exception):
    """Normalized failure raised by the repository and service layers.

    Every instance carries the same shape: ``kind``, ``status_code``,
    ``message`` and optional ``details``. Raw driver errors never leave
    the repository; they are wrapped into one of the subclasses below.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.default_status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "kind": str(self.kind),
            "status_code": self.status_code,
            "message": self.message,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class ValidationFailed(RepositoryError):
    kind = ErrorKind.VALIDATION
    default_status_code = 400


class DuplicateKey(RepositoryError):
    kind = ErrorKind.DUPLICATE_KEY
    default_status_code = 400

    def __init__(self, field: str, *, details: Any = None) -> None:
        super().__init__(f"{field} already exists.", details=details)
        self.field = field


class InvalidArgument(RepositoryError):
    kind = ErrorKind.INVALID_ARGUMENT
    default_status_code = 400


class NotFound(RepositoryError):
    kind = ErrorKind.NOT_FOUND
    default_status_code = 404


class ResourceResolutionError(RepositoryError):
    """Resource name is not registered. A configuration problem, not a missing document."""

    kind = ErrorKind.CONFIGURATION
    default_status_code = 500


class InternalError(RepositoryError):
    kind = ErrorKind.INTERNAL
    default_status_code = 500


_KIND_BY_STATUS: dict[int, type[RepositoryError]] = {
    400: InvalidArgument,
    404: NotFound,
}


def normalize_error(exc: BaseException, default_message: str, *, details: Any = None) -> RepositoryError:
    """Coerce any exception into a RepositoryError.

    Already-normalized errors pass through untouched. Anything carrying an
    integer ``status_code`` keeps it; everything else becomes a 500 with the
    underlying message (or ``default_message`` when the exception is silent).
    """
    if isinstance(exc, RepositoryError):
        return exc

    message = str(exc) or default_message
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int) and not isinstance(status_code, bool):
        cls = _KIND_BY_STATUS.get(status_code, InternalError)
        return cls(message, status_code=status_code, details=details)
    return InternalError(message, details=details)


__all__ = [
    "ErrorKind",
    "RepositoryError",
    "ValidationFailed",
    "DuplicateKey",
    "InvalidArgument",
    "NotFound",
    "ResourceResolutionError",
    "InternalError",
    "normalize_error",
]
