"""Configuration loading helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, SecretStr

CONFIG_FILE = Path.home() / ".config" / "pgbind" / "config.toml"


class ServerConfig(BaseModel):
    """Database server that bindings are provisioned on."""

    name: str
    fqdn: str
    administrator_login: str = "postgres"
    administrator_password: SecretStr
    enforce_ssl: bool = True
    connect_timeout: float = 5.0


class BindingConfig(BaseModel):
    """Shape of the configuration file."""

    log_level: str = "INFO"
    servers: list[ServerConfig] = Field(default_factory=list)

    def server(self, name: str) -> ServerConfig:
        """Return the server registered under ``name``."""

        for server in self.servers:
            if server.name == name:
                return server
        raise ValueError(f"Server '{name}' not found.")


def load_config() -> BindingConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return BindingConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return BindingConfig()

    servers_data = data.get("servers")
    servers: list[ServerConfig] = []
    if isinstance(servers_data, list):
        servers = [
            ServerConfig(**server)
            for server in servers_data  # type: ignore[list-item]
            if isinstance(server, dict)
        ]

    return BindingConfig(
        log_level=data.get("log_level", BindingConfig.model_fields["log_level"].default),
        servers=servers,
    )


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if isinstance(raw, dict):
        log_level = raw.get("log_level")
        # Unknown level names fall back to the default.
        if isinstance(log_level, str) and log_level.upper() in logging.getLevelNamesMapping():
            data["log_level"] = log_level.upper()
        servers = raw.get("servers")
        if isinstance(servers, list):
            parsed_servers: list[dict[str, object]] = []
            for server in servers:
                if not isinstance(server, dict):
                    continue
                parsed: dict[str, object] = {}
                for key in ("name", "fqdn", "administrator_login", "administrator_password"):
                    value = server.get(key)
                    if isinstance(value, str):
                        parsed[key] = value
                enforce_ssl = server.get("enforce_ssl")
                if isinstance(enforce_ssl, bool):
                    parsed["enforce_ssl"] = enforce_ssl
                timeout = server.get("connect_timeout")
                if isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
                    parsed["connect_timeout"] = float(timeout)
                # Entries missing any required key are skipped.
                if all(parsed.get(key) for key in ("name", "fqdn", "administrator_password")):
                    parsed_servers.append(parsed)
            data["servers"] = parsed_servers
    return data


__all__ = ["BindingConfig", "CONFIG_FILE", "ServerConfig", "load_config"]
