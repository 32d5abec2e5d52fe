"""
userkit Services

- postgres: connection pool, SQL builder, Create / Find / FindByPk contract
- repositories: entity wiring (UserRepository)
- user_service: account management facade for the transport layer
"""

from .postgres import PostgresService
from .repositories import UserRepository
from .user_service import UserService

__all__ = ["PostgresService", "UserRepository", "UserService"]
