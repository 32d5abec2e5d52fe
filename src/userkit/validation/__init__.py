"""Declarative validation of attribute payloads."""

from .rules import (
    Email,
    FieldRules,
    Length,
    MustMatch,
    Phone,
    Required,
    Rule,
    Url,
    Validatable,
    Violation,
    ViolationSet,
    collect_violations,
    validate,
)

__all__ = [
    "Email",
    "FieldRules",
    "Length",
    "MustMatch",
    "Phone",
    "Required",
    "Rule",
    "Url",
    "Validatable",
    "Violation",
    "ViolationSet",
    "collect_violations",
    "validate",
]
