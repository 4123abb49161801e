"""Tests for the provisioning helper script."""

from __future__ import annotations

import json

import pytest
from pydantic import SecretStr

from pgbind.config import BindingConfig, ServerConfig
from scripts import provision_binding


def test_render_redacts_secrets_by_default() -> None:
    payload = {"username": "a1@srv1", "password": "pw", "uri": "postgresql://x", "jdbcUrl": "jdbc:x"}

    rendered = json.loads(provision_binding.render(payload, show_secret=False))

    assert rendered["username"] == "a1@srv1"
    assert rendered["password"] == provision_binding.REDACTED
    assert rendered["uri"] == provision_binding.REDACTED
    assert rendered["jdbcUrl"] == provision_binding.REDACTED


def test_render_can_show_secrets() -> None:
    payload = {"password": "pw"}

    rendered = json.loads(provision_binding.render(payload, show_secret=True))

    assert rendered["password"] == "pw"


def test_main_requires_configured_servers(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(provision_binding, "load_config", lambda: BindingConfig())

    assert provision_binding.main(["srv1", "mydb"]) == 1
    assert "No servers configured" in capsys.readouterr().out


def test_main_lists_servers_for_unknown_name(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config = BindingConfig(
        servers=[ServerConfig(name="srv1", fqdn="srv1.example.com", administrator_password=SecretStr("pw"))]
    )
    monkeypatch.setattr(provision_binding, "load_config", lambda: config)

    assert provision_binding.main(["srv9", "mydb"]) == 1
    out = capsys.readouterr().out
    assert "Server 'srv9' not found." in out
    assert "Configured servers: srv1" in out
