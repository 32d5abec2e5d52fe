"""Repository pattern for entity persistence."""

from .user_repository import USER_TABLE, UserRepository

__all__ = ["USER_TABLE", "UserRepository"]
