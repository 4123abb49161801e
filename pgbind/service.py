"""Binding orchestration for configured servers."""

from __future__ import annotations

from .config import BindingConfig, ServerConfig
from .connections import AsyncpgConnectionFactory
from .credentials import create_credential
from .models import Credentials
from .provisioner import RoleProvisioner


class BindingService:
    """Provisions a role on a configured server and renders its credentials."""

    def __init__(
        self,
        config: BindingConfig,
        *,
        provisioner: RoleProvisioner | None = None,
    ) -> None:
        self._config = config
        self._provisioner = provisioner
        self._provisioners: dict[str, RoleProvisioner] = {}

    @property
    def servers(self) -> tuple[ServerConfig, ...]:
        """Servers available in the current config."""

        return tuple(self._config.servers)

    async def bind(self, server_name: str, database_name: str) -> Credentials:
        """Create a binding for ``database_name`` on the named server."""

        server = self._config.server(server_name)
        details = await self._provisioner_for(server).create_binding(
            server.enforce_ssl,
            server.name,
            server.administrator_password,
            server.fqdn,
            database_name,
        )
        return create_credential(
            server.fqdn,
            server.enforce_ssl,
            server.name,
            database_name,
            details,
        )

    def _provisioner_for(self, server: ServerConfig) -> RoleProvisioner:
        if self._provisioner is not None:
            return self._provisioner
        provisioner = self._provisioners.get(server.name)
        if provisioner is None:
            factory = AsyncpgConnectionFactory(
                admin_login=server.administrator_login,
                connect_timeout=server.connect_timeout,
            )
            provisioner = RoleProvisioner(factory)
            self._provisioners[server.name] = provisioner
        return provisioner


__all__ = ["BindingService"]
