"""
Unit tests for user entity models and payload validation.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from userkit.auth import hash_password
from userkit.exceptions import ValidationFailed
from userkit.models.entities import (
    AccountStatus,
    ResetUserPassword,
    UserAuthCredentials,
    UserGender,
    UserInformation,
    UserModel,
)

REQUIRED_FIELDS = ["firstname", "lastname", "middlename", "fullname", "username", "email", "password"]


class TestEnumerations:
    def test_account_status_values(self):
        assert {s.value for s in AccountStatus} == {"active", "inactive", "suspended", "deactivated"}

    def test_unknown_account_status_is_rejected(self):
        with pytest.raises(ValidationError):
            UserModel.model_validate({"id": uuid4(), "account_status": "banned"})

    def test_unknown_gender_is_rejected(self):
        with pytest.raises(ValidationError):
            UserInformation.model_validate({"gender": "robot"})

    def test_gender_default(self):
        assert UserGender.default() is UserGender.UNSPECIFIED


class TestUserInformation:
    """Validation contract for the sign-up payload."""

    def test_empty_payload_is_invalid(self):
        violations = UserInformation().violations()
        assert set(REQUIRED_FIELDS) <= set(violations)

    @pytest.mark.parametrize("missing", REQUIRED_FIELDS)
    def test_each_missing_required_field_is_named(self, user_payload, missing):
        user_payload.pop(missing)
        info = UserInformation.model_validate(user_payload)

        with pytest.raises(ValidationFailed) as exc_info:
            info.validate_fields()
        assert [v.code for v in exc_info.value.violations[missing]] == ["required"]

    def test_complete_payload_is_valid(self, user_info):
        assert user_info.violations() == {}
        user_info.validate_fields()

    def test_names_must_not_be_empty(self, user_payload):
        for field in ["firstname", "lastname", "middlename", "fullname", "username"]:
            user_payload[field] = ""

        violations = UserInformation.model_validate(user_payload).violations()
        assert set(violations) == {"firstname", "lastname", "middlename", "fullname", "username"}
        assert all(v[0].code == "length" for v in violations.values())

    def test_short_password(self, user_payload):
        user_payload["password"] = "1234567"
        violation = UserInformation.model_validate(user_payload).violations()["password"][0]
        assert violation.code == "length"
        assert violation.params == {"min": 8}

    def test_bad_optional_formats(self, user_payload):
        user_payload.update(phoneNumber="555-0000", avatar="not a url", email="nope")
        violations = UserInformation.model_validate(user_payload).violations()
        assert {f: v[0].code for f, v in violations.items()} == {
            "phone_number": "phone",
            "avatar": "url",
            "email": "email",
        }

    @pytest.mark.parametrize("password", [" " * 8, "  short  ", "\t\n       "])
    def test_whitespace_padding_does_not_count_towards_password_length(self, user_payload, password):
        user_payload["password"] = password
        violations = UserInformation.model_validate(user_payload).violations()
        assert [v.code for v in violations["password"]] == ["length"]

    def test_accepts_internal_and_external_names(self):
        external = UserInformation.model_validate({"phoneNumber": "+14155550000", "dateOfBirth": "1990-05-01"})
        internal = UserInformation.model_validate({"phone_number": "+14155550000", "date_of_birth": "1990-05-01"})
        assert external == internal

    def test_password_is_never_serialised(self, user_info):
        assert "password" not in user_info.model_dump()
        assert "password1" not in repr(user_info)


class TestUserModel:
    def test_serialisation_hides_secrets_and_uses_camel_case(self):
        user = UserModel(
            id=uuid4(),
            email="a@b.co",
            phone_number="+14155550000",
            password=hash_password("password1"),
            otp_id=uuid4(),
        )
        data = user.to_public_dict()

        assert "password" not in data
        assert "otpId" not in data and "otp_id" not in data
        assert data["phoneNumber"] == "+14155550000"
        assert data["id"] == str(user.id)
        assert {"accountStatus", "dateOfBirth", "lastAvailableAt", "createdAt"} <= set(data)

    def test_verify_password(self):
        user = UserModel(id=uuid4(), password=UserModel.hash_password("password1"))
        assert user.verify_password("password1")
        assert not user.verify_password("password2")

    def test_user_without_hash_never_verifies(self):
        assert not UserModel(id=uuid4()).verify_password("password1")


class TestAuxiliaryPayloads:
    def test_credentials(self):
        UserAuthCredentials(email="a@b.co", password="password1").validate_fields()

        violations = UserAuthCredentials(email="nope", password="short").violations()
        assert set(violations) == {"email", "password"}

    def test_credentials_fullname_is_optional(self):
        creds = UserAuthCredentials(email="a@b.co", password="password1", fullname="A B C")
        assert creds.violations() == {}

    def test_reset_password_match(self):
        payload = ResetUserPassword.model_validate(
            {"newPassword": "password9", "confirmPassword": "password9"}
        )
        assert payload.violations() == {}

    def test_reset_password_mismatch(self):
        payload = ResetUserPassword(new_password="password9", confirm_password="password8")
        violations = payload.violations()
        assert [v.code for v in violations["confirm_password"]] == ["must_match"]

    def test_missing_credential_fields_are_violations(self):
        with pytest.raises(ValidationFailed) as exc_info:
            UserAuthCredentials().validate_fields()
        violations = exc_info.value.violations
        assert [v.code for v in violations["email"]] == ["required"]
        assert [v.code for v in violations["password"]] == ["required"]

    def test_missing_reset_fields_are_violations(self):
        payload = ResetUserPassword.model_validate({"newPassword": "password9"})
        violations = payload.violations()
        assert set(violations) == {"confirm_password"}
        assert [v.code for v in violations["confirm_password"]] == ["required"]

    def test_whitespace_reset_password_is_rejected(self):
        payload = ResetUserPassword(new_password=" " * 10, confirm_password=" " * 10)
        assert [v.code for v in payload.violations()["new_password"]] == ["length"]
