"""
userkit - authenticated-user backend core.

Generic persistence operations (Create / Find / FindByPk) attached to entity
types through explicit table mappings, bcrypt credential hashing, declarative
payload validation and injection-safe lookups.

Usage:
    from userkit import PostgresService, UserInformation, UserService

    async with PostgresService() as db:
        user = await UserService(db).register(UserInformation(...))
"""

from .exceptions import (
    Conflict,
    HashingFault,
    InvalidCredentials,
    InvalidIdentity,
    InvalidInput,
    InvalidQuery,
    NotFound,
    StorageError,
    StorageUnavailable,
    UserkitError,
    ValidationFailed,
)
from .models.entities import (
    AccountStatus,
    ResetUserPassword,
    UserAuthCredentials,
    UserGender,
    UserInformation,
    UserModel,
)
from .services import PostgresService, UserRepository, UserService

__version__ = "0.1.0"

__all__ = [
    "AccountStatus",
    "Conflict",
    "HashingFault",
    "InvalidCredentials",
    "InvalidIdentity",
    "InvalidInput",
    "InvalidQuery",
    "NotFound",
    "PostgresService",
    "ResetUserPassword",
    "StorageError",
    "StorageUnavailable",
    "UserAuthCredentials",
    "UserGender",
    "UserInformation",
    "UserModel",
    "UserRepository",
    "UserService",
    "UserkitError",
    "ValidationFailed",
]
