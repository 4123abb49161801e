"""Administrative connections used to provision roles."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import asyncpg

from .errors import ServerConnectionError
from .models import POSTGRESQL_PORT, PRIMARY_DATABASE, ProvisioningStep


@runtime_checkable
class AdminTransaction(Protocol):
    """Explicitly driven transaction (``asyncpg.transaction.Transaction``)."""

    async def start(self) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


@runtime_checkable
class AdminConnection(Protocol):
    """Subset of ``asyncpg.Connection`` the provisioner relies on."""

    def transaction(self) -> AdminTransaction: ...

    async def execute(self, query: str, *args: Any) -> str: ...

    async def close(self) -> None: ...


class ConnectionFactory(Protocol):
    """Opens administrative connections to a database server."""

    async def connect(
        self,
        *,
        enforce_ssl: bool,
        server_name: str,
        admin_password: str,
        fqdn: str,
        database: str = PRIMARY_DATABASE,
    ) -> AdminConnection: ...


class AsyncpgConnectionFactory:
    """Connection factory that logs in as the server administrator via asyncpg."""

    def __init__(self, *, admin_login: str = "postgres", connect_timeout: float = 5.0) -> None:
        self._admin_login = admin_login
        self._connect_timeout = connect_timeout

    async def connect(
        self,
        *,
        enforce_ssl: bool,
        server_name: str,
        admin_password: str,
        fqdn: str,
        database: str = PRIMARY_DATABASE,
    ) -> AdminConnection:
        kwargs = self._connect_kwargs(
            enforce_ssl=enforce_ssl,
            server_name=server_name,
            admin_password=admin_password,
            fqdn=fqdn,
            database=database,
        )
        try:
            return await asyncpg.connect(**kwargs)
        except Exception as exc:
            raise ServerConnectionError(
                f"error connecting to the database: {exc}",
                step=ProvisioningStep.CONNECT,
                database_name=database,
            ) from exc

    def _connect_kwargs(
        self,
        *,
        enforce_ssl: bool,
        server_name: str,
        admin_password: str,
        fqdn: str,
        database: str,
    ) -> dict[str, object]:
        return {
            "host": fqdn,
            "port": POSTGRESQL_PORT,
            # The server family authenticates logins as <login>@<server>.
            "user": f"{self._admin_login}@{server_name}",
            "password": admin_password,
            "database": database,
            "ssl": "require" if enforce_ssl else "disable",
            "timeout": self._connect_timeout,
        }


__all__ = [
    "AdminConnection",
    "AdminTransaction",
    "AsyncpgConnectionFactory",
    "ConnectionFactory",
]
