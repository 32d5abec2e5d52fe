"""
User - User account entity in userkit.

Two representations:
- UserModel: the stored row, returned by create / find / find_by_pk
- UserInformation: the attributes payload accepted from a caller, validated
  before it is consumed once by create and then discarded

Plus the auxiliary request payloads for login/sign-up (UserAuthCredentials)
and password reset (ResetUserPassword).

Secrets:
- UserInformation.password is cleartext and never serialised
- UserModel.password holds the bcrypt hash; it and otp_id are never serialised
"""

from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...auth.passwords import hash_password, verify_password
from ...settings import settings
from ...validation import (
    Email,
    FieldRules,
    Length,
    MustMatch,
    Phone,
    Required,
    Url,
    Validatable,
)
from ..core import CoreModel

_PASSWORD_RULES = (Required(), Length(min=settings.security.min_password_length, strip=True))
_NAME_RULES = (Required(), Length(min=1))


class AccountStatus(str, Enum):
    """
    Current account status, used for access control decisions.

    Stored as the PostgreSQL enum type account_status.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    DEACTIVATED = "deactivated"


class UserGender(str, Enum):
    """User gender. Stored as the PostgreSQL enum type gender."""

    MALE = "male"
    FEMALE = "female"
    OTHERS = "others"
    UNSPECIFIED = "unspecified"

    @classmethod
    def default(cls) -> "UserGender":
        return cls.UNSPECIFIED


class UserModel(CoreModel):
    """
    Stored user row (table user_information).

    Profile fields are optional because the table allows NULLs for them.
    """

    firstname: Optional[str] = Field(default=None, description="First name")
    lastname: Optional[str] = Field(default=None, description="Last name")
    middlename: Optional[str] = Field(default=None, description="Middle name")
    fullname: Optional[str] = Field(default=None, description="Full display name")
    username: Optional[str] = Field(default=None, description="Username")
    email: Optional[str] = Field(default=None, description="Email address (unique)")
    account_status: Optional[AccountStatus] = Field(
        default=None, description="Account status"
    )
    date_of_birth: Optional[date] = Field(default=None, description="Date of birth")
    gender: Optional[UserGender] = Field(default=None, description="Gender")
    avatar: Optional[str] = Field(default=None, description="Avatar URL")
    phone_number: Optional[str] = Field(default=None, description="Phone number (E.164)")
    password: Optional[str] = Field(
        default=None, exclude=True, repr=False, description="bcrypt password hash"
    )
    otp_id: Optional[UUID] = Field(
        default=None, exclude=True, repr=False, description="One-time passcode reference"
    )
    last_available_at: Optional[datetime] = Field(
        default=None, description="Last time the user was seen"
    )

    @staticmethod
    def hash_password(password: Optional[str]) -> str:
        """Hash a cleartext password with the configured bcrypt cost."""
        return hash_password(password)

    def verify_password(self, candidate: str) -> bool:
        """Check a cleartext candidate against this user's stored hash."""
        return verify_password(candidate, self.password)


class UserInformation(Validatable, BaseModel):
    """
    Attributes payload for creating a user.

    Accepts camelCase (external) or snake_case (internal) field names.
    Identity and timestamps are never taken from the caller.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    validation_rules: ClassVar[FieldRules] = {
        "firstname": _NAME_RULES,
        "lastname": _NAME_RULES,
        "middlename": _NAME_RULES,
        "fullname": _NAME_RULES,
        "username": _NAME_RULES,
        "email": (Required(), Email()),
        "avatar": (Url(),),
        "phone_number": (Phone(),),
        "password": _PASSWORD_RULES,
    }

    firstname: Optional[str] = None
    lastname: Optional[str] = None
    middlename: Optional[str] = None
    fullname: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    account_status: Optional[AccountStatus] = None
    date_of_birth: Optional[date] = None
    gender: Optional[UserGender] = None
    avatar: Optional[str] = None
    phone_number: Optional[str] = None
    password: Optional[str] = Field(default=None, exclude=True, repr=False)


class UserAuthCredentials(Validatable, BaseModel):
    """
    Login / sign-up request payload.

    fullname is optional so the same shape serves both requests.
    """

    validation_rules: ClassVar[FieldRules] = {
        "email": (Required(), Email()),
        "password": _PASSWORD_RULES,
    }

    email: Optional[str] = None
    password: Optional[str] = Field(default=None, exclude=True, repr=False)
    fullname: Optional[str] = None


class ResetUserPassword(Validatable, BaseModel):
    """Password reset payload: new password plus its confirmation (camelCase input)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    validation_rules: ClassVar[FieldRules] = {
        "new_password": _PASSWORD_RULES,
        "confirm_password": (Required(), MustMatch(other="new_password")),
    }

    new_password: Optional[str] = Field(default=None, exclude=True, repr=False)
    confirm_password: Optional[str] = Field(default=None, exclude=True, repr=False)
