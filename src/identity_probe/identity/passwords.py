"""
identity_probe.identity.passwords

Password hashing and password policy.

Responsibilities:
- Hash and verify passwords with bcrypt, off the event loop.
- Validate candidate passwords against the configured policy.
"""

from __future__ import annotations

import asyncio
import string

import bcrypt

from identity_probe.identity import results
from identity_probe.identity.results import UserError
from identity_probe.settings import Settings

# bcrypt only looks at the first 72 bytes; longer inputs are rejected instead of truncated.
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    def __init__(self, *, rounds: int = 12) -> None:
        self._rounds = rounds

    def _hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()

    async def hash_password(self, password: str) -> str:
        # bcrypt is CPU-bound; keep it in a worker thread.
        return await asyncio.to_thread(self._hash, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return await asyncio.to_thread(
                bcrypt.checkpw, password.encode(), password_hash.encode()
            )
        except ValueError:
            # Malformed stored hash.
            return False


def _is_digit(c: str) -> bool:
    return c in string.digits


def _is_lower(c: str) -> bool:
    return c in string.ascii_lowercase


def _is_upper(c: str) -> bool:
    return c in string.ascii_uppercase


def validate_password(password: str, settings: Settings) -> list[UserError]:
    """
    Return every policy violation for `password` (empty list when it is acceptable).

    Character classes are ASCII-only: a non-ASCII letter counts as non-alphanumeric.
    """

    errors: list[UserError] = []
    if len(password) < settings.password_required_length:
        errors.append(results.password_too_short(settings.password_required_length))
    if len(password.encode()) > BCRYPT_MAX_BYTES:
        errors.append(results.password_too_long(BCRYPT_MAX_BYTES))
    if settings.password_require_non_alphanumeric and all(
        _is_digit(c) or _is_lower(c) or _is_upper(c) for c in password
    ):
        errors.append(results.password_requires_non_alphanumeric())
    if settings.password_require_digit and not any(_is_digit(c) for c in password):
        errors.append(results.password_requires_digit())
    if settings.password_require_lowercase and not any(_is_lower(c) for c in password):
        errors.append(results.password_requires_lower())
    if settings.password_require_uppercase and not any(_is_upper(c) for c in password):
        errors.append(results.password_requires_upper())
    if len(set(password)) < settings.password_required_unique_chars:
        errors.append(
            results.password_requires_unique_chars(settings.password_required_unique_chars)
        )
    return errors
