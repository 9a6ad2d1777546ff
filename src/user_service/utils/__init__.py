"""Small helpers shared by the repository and the HTTP layer."""

from .validation import first_error_message, format_error

__all__ = ["first_error_message", "format_error"]
