"""UserRepository - user entity wiring for the persistence operation contract."""

from datetime import date
from typing import Any
from uuid import UUID

from ...auth.passwords import hash_password_async
from ...models.entities.user import UserGender, UserInformation, UserModel
from ..postgres.operations import Repository
from ..postgres.sql_builder import TableMapping

# Date stored when the caller gives none
DEFAULT_DATE_OF_BIRTH = date(1970, 1, 1)

USER_TABLE = TableMapping(
    name="user_information",
    primary_key="id",
    insert_columns=(
        "id",
        "gender",
        "firstname",
        "lastname",
        "middlename",
        "fullname",
        "username",
        "email",
        "date_of_birth",
        "avatar",
        "phone_number",
        "password",
    ),
    conflict_target="email",
    queryable={"id": UUID, "email": str, "username": str, "phone_number": str},
    empty_as_null=frozenset(
        {
            "firstname",
            "lastname",
            "middlename",
            "fullname",
            "username",
            "avatar",
            "phone_number",
            "password",
        }
    ),
)


class UserRepository(Repository[UserModel, UserInformation]):
    """
    Create / Find / FindByPk for users.

    create is conflict-as-absence on email: a duplicate email returns None.
    """

    entity = UserModel
    table = USER_TABLE

    @classmethod
    async def to_row(cls, attributes: UserInformation) -> dict[str, Any]:
        """
        Coerce the payload into insert values.

        Absent text fields become "" (stored as NULL), email is trimmed,
        gender defaults to unspecified, date of birth to DEFAULT_DATE_OF_BIRTH.
        The cleartext password is replaced by its hash.
        """
        gender = attributes.gender or UserGender.default()
        return {
            "gender": gender.value,
            "firstname": attributes.firstname or "",
            "lastname": attributes.lastname or "",
            "middlename": attributes.middlename or "",
            "fullname": attributes.fullname or "",
            "username": attributes.username or "",
            "email": (attributes.email or "").strip(),
            "date_of_birth": attributes.date_of_birth or DEFAULT_DATE_OF_BIRTH,
            "avatar": attributes.avatar or "",
            "phone_number": attributes.phone_number or "",
            "password": await hash_password_async(attributes.password),
        }
