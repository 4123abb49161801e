"""Random role names and passwords for new bindings."""

from __future__ import annotations

import secrets
import string
import uuid
from typing import Protocol, runtime_checkable

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
# Quotes and backslashes are excluded: the password is embedded in a
# single-quoted SQL literal.
SPECIAL = "!@#$%^&*()-_=+"

DEFAULT_PASSWORD_LENGTH = 16


def new_identifier() -> str:
    """Return a valid unquoted PostgreSQL identifier that is unique per call."""

    return "a" + uuid.uuid4().hex


def new_password(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
    """Return a random password with at least one char from each class."""

    classes = (LOWERCASE, UPPERCASE, DIGITS, SPECIAL)
    if length < len(classes):
        raise ValueError(f"Password length must be at least {len(classes)}, got {length}")
    alphabet = "".join(classes)
    chars = [secrets.choice(pool) for pool in classes]
    chars.extend(secrets.choice(alphabet) for _ in range(length - len(classes)))
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


@runtime_checkable
class CredentialGenerator(Protocol):
    """Source of role names and passwords for the provisioner."""

    def identifier(self) -> str: ...

    def password(self) -> str: ...


class SecureCredentialGenerator:
    """Default generator backed by ``uuid4`` and the ``secrets`` module."""

    def __init__(self, *, password_length: int = DEFAULT_PASSWORD_LENGTH) -> None:
        self._password_length = password_length

    def identifier(self) -> str:
        return new_identifier()

    def password(self) -> str:
        return new_password(self._password_length)


__all__ = [
    "CredentialGenerator",
    "DEFAULT_PASSWORD_LENGTH",
    "SPECIAL",
    "SecureCredentialGenerator",
    "new_identifier",
    "new_password",
]
