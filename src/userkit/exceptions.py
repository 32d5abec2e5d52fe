"""
userkit exception taxonomy.

Every failure the core can report is one of these types. The core never
chooses transport semantics: callers (an HTTP layer, the CLI) translate them.

    UserkitError
    ├── ValidationFailed      caller-fixable payload problems, per-field detail
    ├── NotFound              lookup matched no row
    ├── Conflict              uniqueness prevented an insert
    ├── InvalidCredentials    login failed
    ├── InvalidInput          malformed caller input
    │   ├── InvalidIdentity   primary key is not a valid identity token
    │   └── InvalidQuery      predicate uses unknown fields or bad values
    ├── StorageError          storage engine reported a failure
    │   └── StorageUnavailable  connection / pool / network failure (retryable)
    └── HashingFault          hashing contract violated (programming error)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .validation.rules import ViolationSet


class UserkitError(Exception):
    """Base class for all userkit errors."""


class ValidationFailed(UserkitError):
    """Raised when a payload violates one or more field rules."""

    def __init__(self, violations: ViolationSet):
        self.violations = violations
        fields = ", ".join(sorted(violations))
        super().__init__(f"Validation failed for: {fields}")


class NotFound(UserkitError):
    """Raised when a lookup matches no row."""

    def __init__(self, entity: str, criteria: dict[str, Any]):
        self.entity = entity
        self.criteria = criteria
        super().__init__(f"{entity} not found for {sorted(criteria)}")


class Conflict(UserkitError):
    """Raised when an insert was skipped because a unique key already exists."""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} with this {key} already exists")


class InvalidCredentials(UserkitError):
    """Raised when an email/password pair does not identify a user."""

    def __init__(self):
        super().__init__("Invalid email or password")


class InvalidInput(UserkitError):
    """Base class for malformed caller input rejected before storage."""


class InvalidIdentity(InvalidInput):
    """Raised when a primary-key lookup receives a malformed identity."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid identity: {value!r}")


class InvalidQuery(InvalidInput):
    """Raised when a lookup predicate cannot be built safely."""

    def __init__(self, reason: str, field: str | None = None):
        self.reason = reason
        self.field = field
        super().__init__(reason)


class StorageError(UserkitError):
    """Raised when the storage engine reports a failure."""

    def __init__(self, operation: str, message: str, original_error: Exception | None = None):
        self.operation = operation
        self.original_error = original_error
        super().__init__(f"{operation} failed: {message}")


class StorageUnavailable(StorageError):
    """Raised on connection, pool or network failure. Safe to retry with backoff."""


class HashingFault(UserkitError):
    """Raised when the hashing contract is violated, e.g. hashing an absent secret."""
