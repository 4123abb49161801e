"""Tests for role name and password generation."""

from __future__ import annotations

import re
import string

import pytest

from pgbind.generate import SPECIAL, CredentialGenerator, SecureCredentialGenerator, new_identifier, new_password


def test_identifier_is_a_valid_unquoted_role_name() -> None:
    identifier = new_identifier()

    assert re.fullmatch(r"a[0-9a-f]{32}", identifier)


def test_identifiers_do_not_repeat() -> None:
    identifiers = {new_identifier() for _ in range(200)}

    assert len(identifiers) == 200


def test_password_covers_every_character_class() -> None:
    password = new_password()

    assert len(password) == 16
    assert any(ch in string.ascii_lowercase for ch in password)
    assert any(ch in string.ascii_uppercase for ch in password)
    assert any(ch in string.digits for ch in password)
    assert any(ch in SPECIAL for ch in password)


def test_password_is_safe_inside_sql_literal() -> None:
    for _ in range(100):
        password = new_password(24)
        assert "'" not in password
        assert "\\" not in password
        assert '"' not in password


def test_password_rejects_lengths_below_class_count() -> None:
    with pytest.raises(ValueError):
        new_password(3)


def test_secure_generator_satisfies_protocol() -> None:
    generator = SecureCredentialGenerator(password_length=20)

    assert isinstance(generator, CredentialGenerator)
    assert len(generator.password()) == 20
    assert generator.identifier().startswith("a")
