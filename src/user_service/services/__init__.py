from .user import UserService

__all__ = ["UserService"]
