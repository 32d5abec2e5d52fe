"""
userkit Authentication Module.

Credential handling for user accounts:
- bcrypt password hashing with per-hash random salts
- Constant-time verification that never raises on corrupt hashes
"""

from .passwords import hash_password, hash_password_async, verify_password

__all__ = [
    "hash_password",
    "hash_password_async",
    "verify_password",
]
