"""
userkit Entity Models

- UserModel: stored user row
- UserInformation: attributes payload for creating users
- UserAuthCredentials: login / sign-up payload
- ResetUserPassword: password reset payload
- AccountStatus, UserGender: closed enumerations backed by PostgreSQL enum types

Stored entities inherit from CoreModel and serialise with camelCase names.
"""

from .user import (
    AccountStatus,
    ResetUserPassword,
    UserAuthCredentials,
    UserGender,
    UserInformation,
    UserModel,
)

__all__ = [
    "AccountStatus",
    "ResetUserPassword",
    "UserAuthCredentials",
    "UserGender",
    "UserInformation",
    "UserModel",
]
