from __future__ import annotations

import pytest

from user_service.exceptions import (
    DuplicateKey,
    ErrorKind,
    InternalError,
    InvalidArgument,
    NotFound,
    RepositoryError,
    normalize_error,
)


def test_error_shape():
    err = InvalidArgument("Invalid ID format", details={"id": "x"})
    assert err.to_dict() == {
        "kind": "invalid_argument",
        "status_code": 400,
        "message": "Invalid ID format",
        "details": {"id": "x"},
    }


def test_details_omitted_when_absent():
    assert "details" not in NotFound("Record not found").to_dict()


def test_duplicate_key_message():
    err = DuplicateKey("email")
    assert str(err) == "email already exists."
    assert err.status_code == 400
    assert err.kind is ErrorKind.DUPLICATE_KEY


def test_normalize_passes_repository_errors_through():
    original = NotFound("gone")
    assert normalize_error(original, "fallback") is original


@pytest.mark.parametrize(
    "status_code,expected_cls",
    [(400, InvalidArgument), (404, NotFound), (503, InternalError)],
)
def test_normalize_keeps_upstream_status(status_code, expected_cls):
    class Upstream(Exception):
        pass

    exc = Upstream("upstream said no")
    exc.status_code = status_code  # type: ignore[attr-defined]

    err = normalize_error(exc, "fallback")
    assert isinstance(err, expected_cls)
    assert err.status_code == status_code
    assert err.message == "upstream said no"


def test_normalize_defaults_to_internal():
    err = normalize_error(RuntimeError(), "Error creating user")
    assert isinstance(err, RepositoryError)
    assert err.status_code == 500
    assert err.message == "Error creating user"
