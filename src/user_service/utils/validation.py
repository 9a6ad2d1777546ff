from __future__ import annotations

from typing import Any, Iterable, Mapping

# pydantic error type -> human readable template; {field} plus the error ctx keys
_TEMPLATES: dict[str, str] = {
    "missing": '"{field}" is required',
    "string_type": '"{field}" must be a string',
    "string_too_short": '"{field}" length must be at least {min_length} characters long',
    "string_too_long": '"{field}" length must be less than or equal to {max_length} characters long',
    "int_type": '"{field}" must be a number',
    "int_parsing": '"{field}" must be a number',
    "int_from_float": '"{field}" must be an integer',
    "greater_than_equal": '"{field}" must be greater than or equal to {ge}',
    "less_than_equal": '"{field}" must be less than or equal to {le}',
    "greater_than": '"{field}" must be greater than {gt}',
    "less_than": '"{field}" must be less than {lt}',
    "extra_forbidden": '"{field}" is not allowed',
    "model_attributes_type": '"{field}" must be of type object',
    "dict_type": '"{field}" must be of type object',
}

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}

INVALID_JSON_MESSAGE = "Request body must be valid JSON"


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "value"


def format_error(error: Mapping[str, Any]) -> str:
    """Render one pydantic error dict as a single sentence, e.g.
    ``"name" length must be at least 3 characters long``."""
    field = _field_name(error.get("loc", ()))
    etype = error.get("type", "")
    ctx = dict(error.get("ctx") or {})
    msg = str(error.get("msg", "is invalid"))

    if etype == "json_invalid":
        return INVALID_JSON_MESSAGE
    if etype == "int_type" and isinstance(error.get("input"), float):
        return f'"{field}" must be an integer'

    if etype == "value_error" and "email" in msg.lower():
        return f'"{field}" must be a valid email'

    template = _TEMPLATES.get(etype)
    if template is not None:
        try:
            return template.format(field=field, **ctx)
        except (KeyError, IndexError):
            pass
    return f'"{field}" {msg[:1].lower()}{msg[1:]}'


def first_error_message(errors: Iterable[Mapping[str, Any]], default: str = "Invalid request payload") -> str:
    """Only the first violation is reported, even when several fields fail."""
    for error in errors:
        return format_error(error)
    return default
