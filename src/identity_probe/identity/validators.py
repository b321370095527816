"""
identity_probe.identity.validators

User validation rules.

Responsibilities:
- Check user names (present, allowed characters, unique).
- Check emails (syntax, unique) when unique emails are required.
"""

from __future__ import annotations

from identity_probe.db.models import User
from identity_probe.db.repositories.users import UserRepo
from identity_probe.identity import results
from identity_probe.identity.results import UserError
from identity_probe.settings import Settings


def is_valid_email(email: str | None) -> bool:
    # Same shape check as a form-level email attribute: exactly one '@', not at either end.
    if not email:
        return False
    at = email.find("@")
    return 0 < at < len(email) - 1 and email.find("@", at + 1) == -1


def _user_name_errors(user_name: str | None, settings: Settings) -> list[UserError]:
    if not user_name or not user_name.strip():
        return [results.invalid_user_name(user_name)]
    allowed = settings.allowed_user_name_characters
    if allowed and any(c not in allowed for c in user_name):
        return [results.invalid_user_name(user_name)]
    return []


async def validate_user(
    *,
    repo: UserRepo,
    user: User,
    normalized_user_name: str,
    normalized_email: str | None,
    settings: Settings,
    exclude_self: bool = False,
) -> list[UserError]:
    """
    Validate `user` against the store.

    With `exclude_self` (updates), rows owned by `user.id` itself do not count as duplicates.
    """

    errors = _user_name_errors(user.user_name, settings)
    if not errors:
        owner = await repo.get_by_normalized_user_name(normalized_user_name)
        if owner is not None and not (exclude_self and owner.id == user.id):
            errors.append(results.duplicate_user_name(user.user_name))

    if settings.require_unique_email:
        if not is_valid_email(user.email):
            errors.append(results.invalid_email(user.email))
        elif normalized_email is not None:
            owner = await repo.get_by_normalized_email(normalized_email)
            if owner is not None and not (exclude_self and owner.id == user.id):
                errors.append(results.duplicate_email(user.email or ""))
    return errors
