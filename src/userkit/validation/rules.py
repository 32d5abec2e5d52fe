"""
Declarative field rules for attribute payloads.

Each payload type declares an explicit table mapping field names to the rules
that apply to them:

    class UserInformation(Validatable, BaseModel):
        validation_rules: ClassVar[FieldRules] = {
            "email": (Required(), Email()),
            "password": (Required(), Length(min=8)),
        }

Rule semantics:
- Required fails when the value is absent (None)
- Every other rule only inspects present values
- Fields without rules are unconstrained
- All violations are collected, not just the first one

Validation is a pure function of the payload: no I/O, no mutation.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from email_validator import EmailNotValidError, validate_email
from loguru import logger
from pydantic import AnyUrl, BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationFailed

# E.164: leading "+", country code starting 1-9, at most 15 digits overall
E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

_URL_ADAPTER = TypeAdapter(AnyUrl)


class Violation(BaseModel):
    """A single failed rule for a single field."""

    field: str = Field(..., description="Name of the offending field")
    code: str = Field(..., description="Rule identifier (required, length, email, url, phone, must_match)")
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Rule parameters that failed, e.g. {'min': 8}",
    )
    message: str = Field(..., description="Human-readable explanation")


ViolationSet = dict[str, list[Violation]]


def _field_value(payload: Any, field: str) -> Any:
    if isinstance(payload, Mapping):
        return payload.get(field)
    return getattr(payload, field, None)


class Rule(ABC):
    """Base class for a field rule."""

    code: ClassVar[str]
    applies_to_absent: ClassVar[bool] = False

    @abstractmethod
    def check(self, field: str, value: Any, payload: Any) -> Violation | None:
        """Return a Violation if value breaks the rule, else None."""

    def violation(self, field: str, message: str, **params: Any) -> Violation:
        return Violation(field=field, code=self.code, params=params, message=message)


@dataclass(frozen=True)
class Required(Rule):
    code: ClassVar[str] = "required"
    applies_to_absent: ClassVar[bool] = True

    def check(self, field: str, value: Any, payload: Any) -> Violation | None:
        if value is None:
            return self.violation(field, f"{field} is required")
        return None


@dataclass(frozen=True)
class Length(Rule):
    """
    Character length bounds (inclusive).

    With strip=True the bounds apply to the value without surrounding
    whitespace, matching how secrets are trimmed before hashing.
    """

    code: ClassVar[str] = "length"

    min: int | None = None
    max: int | None = None
    strip: bool = False

    def check(self, field: str, value: Any, payload: Any) -> Violation | None:
        if not isinstance(value, str):
            return self.violation(field, f"{field} must be a string", **self._params())
        if self.strip:
            value = value.strip()
        if self.min is not None and len(value) < self.min:
            return self.violation(
                field, f"{field} must be at least {self.min} characters", **self._params()
            )
        if self.max is not None and len(value) > self.max:
            return self.violation(
                field, f"{field} must be at most {self.max} characters", **self._params()
            )
        return None

    def _params(self) -> dict[str, int]:
        params = {}
        if self.min is not None:
            params["min"] = self.min
        if self.max is not None:
            params["max"] = self.max
        return params


@dataclass(frozen=True)
class Email(Rule):
    code: ClassVar[str] = "email"

    def check(self, field: str, value: Any, payload: Any) -> Violation | None:
        if not isinstance(value, str):
            return self.violation(field, f"{field} must be an email address")
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            return self.violation(field, f"{field} is not a valid email address: {e}")
        return None


@dataclass(frozen=True)
class Url(Rule):
    code: ClassVar[str] = "url"

    def check(self, field: str, value: Any, payload: Any) -> Violation | None:
        if not isinstance(value, str):
            return self.violation(field, f"{field} must be a URL")
        try:
            _URL_ADAPTER.validate_python(value)
        except PydanticValidationError:
            return self.violation(field, f"{field} is not a valid URL")
        return None


@dataclass(frozen=True)
class Phone(Rule):
    """Phone number in E.164 form, e.g. +14155550000."""

    code: ClassVar[str] = "phone"

    def check(self, field: str, value: Any, payload: Any) -> Violation | None:
        if not isinstance(value, str) or not E164_PATTERN.match(value):
            return self.violation(field, f"{field} must be an E.164 phone number")
        return None


@dataclass(frozen=True)
class MustMatch(Rule):
    """Value must equal the value of another field of the same payload."""

    code: ClassVar[str] = "must_match"

    other: str = ""

    def check(self, field: str, value: Any, payload: Any) -> Violation | None:
        if value != _field_value(payload, self.other):
            return self.violation(field, f"{field} must match {self.other}", other=self.other)
        return None


FieldRules = Mapping[str, tuple[Rule, ...]]


def collect_violations(payload: Any, rules: FieldRules) -> ViolationSet:
    """
    Evaluate every rule against the payload.

    Args:
        payload: Pydantic model, dataclass or mapping of field values
        rules: Table of field name -> rules

    Returns:
        Mapping of field name -> violations (empty when the payload is valid)
    """
    violations: ViolationSet = {}
    for field, field_rules in rules.items():
        value = _field_value(payload, field)
        for rule in field_rules:
            if value is None and not rule.applies_to_absent:
                continue
            violation = rule.check(field, value, payload)
            if violation is not None:
                violations.setdefault(field, []).append(violation)
    return violations


def validate(payload: Any, rules: FieldRules) -> None:
    """
    Validate a payload against a rule table.

    Raises:
        ValidationFailed: With the complete violation set if any rule fails
    """
    violations = collect_violations(payload, rules)
    if violations:
        logger.debug(f"Payload rejected: {sorted(violations)}")
        raise ValidationFailed(violations)


class Validatable:
    """
    Mixin for payload models that carry their own rule table.

    Subclasses declare `validation_rules: ClassVar[FieldRules]`.
    """

    validation_rules: ClassVar[FieldRules] = {}

    def violations(self) -> ViolationSet:
        """Return every rule violation for this payload."""
        return collect_violations(self, self.validation_rules)

    def validate_fields(self) -> None:
        """Raise ValidationFailed if any rule fails."""
        validate(self, self.validation_rules)
