"""
identity_probe.identity.results

Operation outcomes for the user manager.

Responsibilities:
- `UserResult`: succeeded flag plus the errors that caused a failure.
- `UserError` factories with stable codes (tests and callers match on `code`).
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class UserError:
    code: str
    description: str


@dataclass(frozen=True, slots=True)
class UserResult:
    succeeded: bool
    errors: tuple[UserError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> UserResult:
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: UserError) -> UserResult:
        return cls(succeeded=False, errors=tuple(errors))

    @property
    def codes(self) -> list[str]:
        return [e.code for e in self.errors]

    def __str__(self) -> str:
        if self.succeeded:
            return "Succeeded"
        return "Failed : " + ",".join(self.codes)


def invalid_user_name(user_name: str | None) -> UserError:
    return UserError(
        "InvalidUserName",
        f"Username '{user_name}' is invalid, can only contain letters or digits.",
    )


def duplicate_user_name(user_name: str) -> UserError:
    return UserError("DuplicateUserName", f"Username '{user_name}' is already taken.")


def invalid_email(email: str | None) -> UserError:
    return UserError("InvalidEmail", f"Email '{email}' is invalid.")


def duplicate_email(email: str) -> UserError:
    return UserError("DuplicateEmail", f"Email '{email}' is already taken.")


def password_too_short(length: int) -> UserError:
    return UserError("PasswordTooShort", f"Passwords must be at least {length} characters.")


def password_too_long(limit: int) -> UserError:
    return UserError("PasswordTooLong", f"Passwords must be at most {limit} bytes once encoded.")


def password_requires_unique_chars(unique_chars: int) -> UserError:
    return UserError(
        "PasswordRequiresUniqueChars",
        f"Passwords must use at least {unique_chars} different characters.",
    )


def password_requires_non_alphanumeric() -> UserError:
    return UserError(
        "PasswordRequiresNonAlphanumeric",
        "Passwords must have at least one non alphanumeric character.",
    )


def password_requires_digit() -> UserError:
    return UserError("PasswordRequiresDigit", "Passwords must have at least one digit ('0'-'9').")


def password_requires_lower() -> UserError:
    return UserError(
        "PasswordRequiresLower", "Passwords must have at least one lowercase ('a'-'z')."
    )


def password_requires_upper() -> UserError:
    return UserError(
        "PasswordRequiresUpper", "Passwords must have at least one uppercase ('A'-'Z')."
    )


def concurrency_failure() -> UserError:
    return UserError(
        "ConcurrencyFailure", "Optimistic concurrency failure, object has been modified."
    )


def user_not_found(user_id: str) -> UserError:
    return UserError("UserNotFound", f"User '{user_id}' does not exist.")


def user_already_exists(user_id: str) -> UserError:
    return UserError("UserAlreadyExists", f"User '{user_id}' already exists.")
