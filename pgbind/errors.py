"""Error taxonomy raised while provisioning a binding."""

from __future__ import annotations

from .models import ProvisioningStep


class BindingError(RuntimeError):
    """Base error for provisioning failures.

    Carries enough context (operation, step, role, database) to diagnose a
    failure without re-running it. ``rollback_error`` is populated when the
    transaction could not be unwound after this error occurred.
    """

    def __init__(
        self,
        message: str,
        *,
        step: ProvisioningStep,
        operation: str = "create_binding",
        role_name: str | None = None,
        database_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.step = step
        self.operation = operation
        self.role_name = role_name
        self.database_name = database_name
        self.rollback_error: RollbackError | None = None

    @property
    def role_may_exist(self) -> bool:
        """True when the role was created but the rollback did not go through."""

        if self.rollback_error is None:
            return False
        return self.step not in (ProvisioningStep.CONNECT, ProvisioningStep.BEGIN, ProvisioningStep.CREATE_ROLE)


class ServerConnectionError(BindingError):
    """Raised when the server cannot be reached or rejects the admin login."""


class TransactionError(BindingError):
    """Raised when the transaction cannot be started or committed."""


class StatementError(BindingError):
    """Raised when one of the provisioning statements fails."""


class RollbackError(BindingError):
    """Secondary failure while unwinding; reported, never raised to callers."""


__all__ = [
    "BindingError",
    "RollbackError",
    "ServerConnectionError",
    "StatementError",
    "TransactionError",
]
