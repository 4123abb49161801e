"""Role provisioning for new bindings."""

from __future__ import annotations

import logging
from typing import Callable

from pydantic import SecretStr

from .connections import AdminConnection, AsyncpgConnectionFactory, ConnectionFactory
from .errors import BindingError, RollbackError, ServerConnectionError, StatementError
from .events import EventKind, ProvisioningEvent, ProvisioningListener
from .generate import CredentialGenerator, SecureCredentialGenerator
from .models import PRIMARY_DATABASE, BindingDetails, ProvisioningStep
from .transaction import scoped_transaction

LOG = logging.getLogger(__name__)

CREATE_ROLE_SQL = "CREATE ROLE {role} WITH PASSWORD '{password}' LOGIN"
GRANT_ROLE_SQL = "GRANT {database} TO {role}"
SET_DEFAULT_ROLE_SQL = "ALTER ROLE {role} SET ROLE {database}"


class RoleProvisioner:
    """Creates login roles scoped to a single database.

    Every call opens its own administrative connection and runs the three
    provisioning statements inside one transaction, so a failed call leaves
    no usable role behind. The operation is not idempotent: each successful
    call creates a distinct role.
    """

    def __init__(
        self,
        connection_factory: ConnectionFactory | None = None,
        *,
        generator: CredentialGenerator | None = None,
    ) -> None:
        self._connection_factory = connection_factory or AsyncpgConnectionFactory()
        self._generator = generator or SecureCredentialGenerator()
        self._listeners: set[ProvisioningListener] = set()

    def subscribe(self, listener: ProvisioningListener) -> Callable[[], None]:
        """Subscribe to provisioning events; returns an unsubscribe handle."""

        self._listeners.add(listener)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    async def create_binding(
        self,
        enforce_ssl: bool,
        server_name: str,
        admin_password: str | SecretStr,
        fqdn: str,
        database_name: str,
    ) -> BindingDetails:
        """Provision a new role that is a member of ``database_name``."""

        role_name = self._generator.identifier()
        password = SecretStr(self._generator.password())
        if isinstance(admin_password, SecretStr):
            admin_password = admin_password.get_secret_value()
        LOG.debug(
            "Provisioning binding role",
            extra={"role": role_name, "database": database_name, "server": server_name},
        )
        try:
            conn = await self._connection_factory.connect(
                enforce_ssl=enforce_ssl,
                server_name=server_name,
                admin_password=admin_password,
                fqdn=fqdn,
                database=PRIMARY_DATABASE,
            )
        except BindingError as exc:
            exc.role_name = role_name
            exc.database_name = database_name
            self._fail(exc, role_name, database_name)
            raise
        except Exception as exc:
            error = ServerConnectionError(
                f"error connecting to the database: {exc}",
                step=ProvisioningStep.CONNECT,
                role_name=role_name,
                database_name=database_name,
            )
            self._fail(error, role_name, database_name)
            raise error from exc

        try:
            async with scoped_transaction(
                conn,
                role_name=role_name,
                database_name=database_name,
                on_rollback_error=self._rollback_failed,
            ):
                await self._run_statements(conn, role_name, password, database_name)
        except BindingError as exc:
            self._fail(exc, role_name, database_name)
            raise
        finally:
            await _close(conn, role_name)

        LOG.info("Provisioned binding role", extra={"role": role_name, "database": database_name})
        self._emit(
            ProvisioningEvent(
                kind=EventKind.BINDING_CREATED,
                role_name=role_name,
                database_name=database_name,
            )
        )
        return BindingDetails(login_name=role_name, password=password)

    async def _run_statements(
        self,
        conn: AdminConnection,
        role_name: str,
        password: SecretStr,
        database_name: str,
    ) -> None:
        await self._execute(
            conn,
            CREATE_ROLE_SQL.format(role=role_name, password=password.get_secret_value()),
            step=ProvisioningStep.CREATE_ROLE,
            message=f'error creating role "{role_name}"',
            role_name=role_name,
            database_name=database_name,
        )
        await self._execute(
            conn,
            GRANT_ROLE_SQL.format(database=database_name, role=role_name),
            step=ProvisioningStep.GRANT_ROLE,
            message=f'error adding role "{database_name}" to role "{role_name}"',
            role_name=role_name,
            database_name=database_name,
        )
        await self._execute(
            conn,
            SET_DEFAULT_ROLE_SQL.format(role=role_name, database=database_name),
            step=ProvisioningStep.SET_DEFAULT_ROLE,
            message=f'error making "{database_name}" the default role for "{role_name}" sessions',
            role_name=role_name,
            database_name=database_name,
        )

    @staticmethod
    async def _execute(
        conn: AdminConnection,
        statement: str,
        *,
        step: ProvisioningStep,
        message: str,
        role_name: str,
        database_name: str,
    ) -> None:
        try:
            await conn.execute(statement)
        except Exception as exc:
            raise StatementError(
                f"{message}: {exc}",
                step=step,
                role_name=role_name,
                database_name=database_name,
            ) from exc

    def _rollback_failed(self, error: RollbackError) -> None:
        LOG.error(
            "error rolling back transaction",
            extra={"role": error.role_name, "database": error.database_name, "error": str(error)},
        )
        self._emit(
            ProvisioningEvent(
                kind=EventKind.ROLLBACK_FAILED,
                role_name=error.role_name or "",
                database_name=error.database_name or "",
                step=ProvisioningStep.ROLLBACK,
                error=error,
            )
        )

    def _fail(self, error: BindingError, role_name: str, database_name: str) -> None:
        LOG.warning(
            "Binding provisioning failed",
            extra={"role": role_name, "database": database_name, "step": error.step.value},
        )
        self._emit(
            ProvisioningEvent(
                kind=EventKind.BINDING_FAILED,
                role_name=role_name,
                database_name=database_name,
                step=error.step,
                error=error,
            )
        )

    def _emit(self, event: ProvisioningEvent) -> None:
        # Listener failures must not replace the binding or the primary error.
        for listener in tuple(self._listeners):
            try:
                listener(event)
            except Exception:
                LOG.exception(
                    "Provisioning listener failed",
                    extra={"event": event.kind.value, "role": event.role_name},
                )


async def _close(conn: AdminConnection, role_name: str) -> None:
    try:
        await conn.close()
    except Exception:
        LOG.warning("Failed to close admin connection", extra={"role": role_name}, exc_info=True)


async def create_binding(
    enforce_ssl: bool,
    server_name: str,
    admin_password: str | SecretStr,
    fqdn: str,
    database_name: str,
) -> BindingDetails:
    """Provision a binding role with the default asyncpg-backed provisioner."""

    return await RoleProvisioner().create_binding(
        enforce_ssl,
        server_name,
        admin_password,
        fqdn,
        database_name,
    )


__all__ = [
    "CREATE_ROLE_SQL",
    "GRANT_ROLE_SQL",
    "RoleProvisioner",
    "SET_DEFAULT_ROLE_SQL",
    "create_binding",
]
