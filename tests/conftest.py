"""
Pytest configuration and fixtures for userkit tests.
"""

import re
from datetime import datetime, timezone
from typing import Any

import pytest

from userkit.models.entities import UserInformation
from userkit.services import user_service
from userkit.services.repositories.user_repository import USER_TABLE
from userkit.settings import settings

# "column" = $n pairs in a WHERE clause
COLUMN_PARAM = re.compile(r'"(\w+)" = \$(\d+)')


class FakeDatabase:
    """
    In-memory stand-in for PostgresService.

    Understands the two statement shapes userkit issues against
    user_information: INSERT ... ON CONFLICT (email) DO NOTHING RETURNING *
    and SELECT * ... WHERE "col" = $n [AND ...]. Every call is recorded.
    """

    def __init__(self):
        self.rows: list[dict[str, Any]] = []
        self.calls: list[tuple[str, tuple]] = []

    async def fetchrow(self, query: str, *params: Any) -> dict[str, Any] | None:
        self.calls.append((query, params))
        if query.startswith("INSERT"):
            return self._insert(params)
        if query.startswith("SELECT"):
            return self._select(query, params)
        raise AssertionError(f"Unexpected statement: {query}")

    def _insert(self, params: tuple) -> dict[str, Any] | None:
        row = dict(zip(USER_TABLE.insert_columns, params))
        for column in USER_TABLE.empty_as_null:
            if row[column] == "":
                row[column] = None

        if any(existing["email"] == row["email"] for existing in self.rows):
            return None

        now = datetime.now(timezone.utc)
        row.update(
            account_status="active",
            created_at=now,
            updated_at=now,
            last_available_at=None,
            otp_id=None,
        )
        self.rows.append(row)
        return dict(row)

    def _select(self, query: str, params: tuple) -> dict[str, Any] | None:
        criteria = {
            column: params[int(index) - 1] for column, index in COLUMN_PARAM.findall(query)
        }
        for row in self.rows:
            if all(row.get(column) == value for column, value in criteria.items()):
                return dict(row)
        return None


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    """Use the minimum bcrypt cost so hashing-heavy tests stay fast."""
    monkeypatch.setattr(settings.security, "bcrypt_rounds", 4)
    user_service._decoy_hash.cache_clear()
    yield
    user_service._decoy_hash.cache_clear()


@pytest.fixture
def fake_db() -> FakeDatabase:
    """Empty in-memory user store."""
    return FakeDatabase()


@pytest.fixture
def user_payload() -> dict[str, Any]:
    """A complete, valid sign-up payload using external (camelCase) names."""
    return {
        "email": "a@b.co",
        "firstname": "A",
        "lastname": "B",
        "middlename": "C",
        "fullname": "A B C",
        "username": "ab",
        "password": "password1",
        "phoneNumber": "+14155550000",
    }


@pytest.fixture
def user_info(user_payload) -> UserInformation:
    return UserInformation.model_validate(user_payload)
