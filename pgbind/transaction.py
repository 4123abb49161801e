"""Scoped transaction helper that always unwinds on failure."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from .connections import AdminConnection, AdminTransaction
from .errors import BindingError, RollbackError, TransactionError
from .models import ProvisioningStep

RollbackHandler = Callable[[RollbackError], None]


@asynccontextmanager
async def scoped_transaction(
    conn: AdminConnection,
    *,
    role_name: str | None = None,
    database_name: str | None = None,
    on_rollback_error: RollbackHandler | None = None,
) -> AsyncIterator[AdminTransaction]:
    """Run the enclosed block in one transaction.

    The transaction commits when the block exits cleanly. Any exception
    raised by the block (cancellation included) or by the commit triggers a
    rollback before it propagates. A failed rollback never replaces the
    original exception: it is attached to it as ``rollback_error`` when the
    original is a ``BindingError`` and handed to ``on_rollback_error``.
    """

    transaction = conn.transaction()
    try:
        await transaction.start()
    except Exception as exc:
        raise TransactionError(
            f"error starting transaction: {exc}",
            step=ProvisioningStep.BEGIN,
            role_name=role_name,
            database_name=database_name,
        ) from exc

    try:
        yield transaction
    except BaseException as exc:
        await _rollback(
            transaction,
            exc,
            role_name=role_name,
            database_name=database_name,
            on_rollback_error=on_rollback_error,
        )
        raise

    try:
        await transaction.commit()
    except Exception as exc:
        error = TransactionError(
            f"error committing transaction: {exc}",
            step=ProvisioningStep.COMMIT,
            role_name=role_name,
            database_name=database_name,
        )
        await _rollback(
            transaction,
            error,
            role_name=role_name,
            database_name=database_name,
            on_rollback_error=on_rollback_error,
        )
        raise error from exc


async def _rollback(
    transaction: AdminTransaction,
    cause: BaseException,
    *,
    role_name: str | None,
    database_name: str | None,
    on_rollback_error: RollbackHandler | None,
) -> None:
    try:
        await transaction.rollback()
    except Exception as exc:
        rollback_error = RollbackError(
            f"error rolling back transaction: {exc}",
            step=ProvisioningStep.ROLLBACK,
            role_name=role_name,
            database_name=database_name,
        )
        rollback_error.__cause__ = exc
        if isinstance(cause, BindingError):
            cause.rollback_error = rollback_error
        if on_rollback_error is not None:
            on_rollback_error(rollback_error)


__all__ = ["RollbackHandler", "scoped_transaction"]
