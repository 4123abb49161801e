"""Shared dataclasses describing provisioned bindings and their credentials."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import SecretStr

POSTGRESQL_PORT = 5432
POSTGRESQL_TAG = "postgresql"
PRIMARY_DATABASE = "postgres"


class ProvisioningStep(str, Enum):
    """Steps of the role provisioning sequence, in execution order."""

    CONNECT = "connect"
    BEGIN = "begin"
    CREATE_ROLE = "create_role"
    GRANT_ROLE = "grant_role"
    SET_DEFAULT_ROLE = "set_default_role"
    COMMIT = "commit"
    ROLLBACK = "rollback"


@dataclass(frozen=True, slots=True)
class BindingDetails:
    """Login role created for a single binding."""

    login_name: str
    password: SecretStr

    def __post_init__(self) -> None:
        if not isinstance(self.password, SecretStr):
            object.__setattr__(self, "password", SecretStr(self.password))


@dataclass(frozen=True, slots=True)
class Credentials:
    """Connection details handed to the consumer of a binding."""

    host: str
    port: int
    database: str
    username: str
    password: SecretStr
    ssl_required: bool
    uri: str = field(repr=False)
    jdbc: str = field(repr=False)
    tags: tuple[str, ...] = (POSTGRESQL_TAG,)

    def to_payload(self) -> dict[str, object]:
        """Render the JSON-ready mapping returned to the broker."""

        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "username": self.username,
            "password": self.password.get_secret_value(),
            "sslRequired": self.ssl_required,
            "uri": self.uri,
            "jdbcUrl": self.jdbc,
            "tags": list(self.tags),
        }


__all__ = [
    "BindingDetails",
    "Credentials",
    "POSTGRESQL_PORT",
    "POSTGRESQL_TAG",
    "PRIMARY_DATABASE",
    "ProvisioningStep",
]
