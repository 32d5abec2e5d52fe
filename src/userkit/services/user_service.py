"""
User Service - User account management.

Entry points the transport layer calls: registration, lookups, credential
checks. Returns entities or raises userkit exceptions; mapping those onto
HTTP responses is the caller's job.
"""

import asyncio
from collections.abc import Mapping
from functools import lru_cache
from typing import Any
from uuid import UUID

from loguru import logger

from ..auth.passwords import hash_password, hash_password_async, verify_password
from ..exceptions import Conflict, InvalidCredentials, NotFound
from ..models.entities.user import (
    ResetUserPassword,
    UserAuthCredentials,
    UserInformation,
    UserModel,
)
from .postgres.operations import DatabaseHandle
from .repositories.user_repository import UserRepository


@lru_cache(maxsize=1)
def _decoy_hash() -> str:
    # verified against when the email is unknown, so both login failures cost the same
    return hash_password("userkit-decoy-password")


def _verify_decoy(candidate: str) -> bool:
    return verify_password(candidate, _decoy_hash())


class UserService:
    """
    Service for managing user accounts.
    """

    def __init__(self, db: DatabaseHandle):
        self.db = db

    async def register(self, info: UserInformation) -> UserModel:
        """
        Validate and store a new user.

        Raises:
            ValidationFailed: Payload breaks a field rule
            Conflict: Email already registered
        """
        info.validate_fields()

        user = await UserRepository.create(info, self.db)
        if user is None:
            raise Conflict("User", "email")

        logger.info(f"Created new user: {user.id}")
        return user

    async def get_user(self, user_id: str | UUID) -> UserModel:
        """
        Get a user by id.

        Raises:
            InvalidIdentity: user_id is not a UUID
            NotFound: No such user
        """
        return await UserRepository.find_by_pk(user_id, self.db)

    async def find_user(self, fields: Mapping[str, Any]) -> UserModel:
        """
        Get the user matching every given field.

        Only id, email, username and phone_number may be used.

        Raises:
            InvalidQuery: Unknown field or non-scalar value
            NotFound: No matching user
        """
        return await UserRepository.find(fields, self.db)

    async def get_user_by_email(self, email: str) -> UserModel:
        """Get a user by email address (trimmed)."""
        return await self.find_user({"email": email.strip()})

    async def authenticate(self, credentials: UserAuthCredentials) -> UserModel:
        """
        Check an email/password pair.

        Raises:
            ValidationFailed: Malformed credentials
            InvalidCredentials: Unknown email or wrong password
        """
        credentials.validate_fields()

        try:
            user = await self.get_user_by_email(credentials.email)
        except NotFound:
            await asyncio.to_thread(_verify_decoy, credentials.password)
            logger.debug("Login rejected: unknown email")
            raise InvalidCredentials()

        if not await asyncio.to_thread(user.verify_password, credentials.password):
            logger.debug(f"Login rejected: password mismatch for {user.id}")
            raise InvalidCredentials()

        return user

    async def check_password_reset(self, payload: ResetUserPassword) -> str:
        """
        Validate a password reset payload and return the new password hash.

        Raises:
            ValidationFailed: Too short, or confirmation does not match
        """
        payload.validate_fields()
        return await hash_password_async(payload.new_password)
