"""
Unit tests for bcrypt password hashing.
"""

import pytest

from userkit.auth import hash_password, hash_password_async, verify_password
from userkit.exceptions import HashingFault


class TestHashPassword:
    def test_hash_is_not_cleartext(self):
        hashed = hash_password("password1")
        assert hashed != "password1"
        assert hashed.startswith("$2")

    def test_round_trip(self):
        assert verify_password("password1", hash_password("password1"))

    def test_hashes_are_salted(self):
        first = hash_password("password1")
        second = hash_password("password1")
        assert first != second
        assert verify_password("password1", first)
        assert verify_password("password1", second)

    def test_surrounding_whitespace_is_trimmed(self):
        hashed = hash_password("  password1  ")
        assert verify_password("password1", hashed)

    def test_explicit_rounds(self):
        hashed = hash_password("password1", rounds=5)
        assert hashed.split("$")[2] == "05"

    def test_long_passwords_hash_and_verify(self):
        secret = "x" * 100
        assert verify_password(secret, hash_password(secret))

    def test_absent_password_fails_loudly(self):
        with pytest.raises(HashingFault):
            hash_password(None)

    @pytest.mark.asyncio
    async def test_async_hash_verifies(self):
        hashed = await hash_password_async("password1")
        assert verify_password("password1", hashed)


class TestVerifyPassword:
    def test_wrong_password(self):
        assert not verify_password("password2", hash_password("password1"))

    @pytest.mark.parametrize("stored", ["", None, "not-a-bcrypt-hash", "$2b$04$tooshort"])
    def test_corrupt_or_missing_hash_is_a_failed_verification(self, stored):
        assert verify_password("password1", stored) is False
