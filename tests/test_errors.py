"""Tests for the binding error taxonomy."""

from __future__ import annotations

import pytest

from pgbind.errors import BindingError, RollbackError, ServerConnectionError, StatementError, TransactionError
from pgbind.models import ProvisioningStep


@pytest.mark.parametrize("cls", [ServerConnectionError, TransactionError, StatementError, RollbackError])
def test_errors_share_the_binding_base(cls: type[BindingError]) -> None:
    error = cls("boom", step=ProvisioningStep.GRANT_ROLE, role_name="a1", database_name="mydb")

    assert isinstance(error, BindingError)
    assert isinstance(error, RuntimeError)
    assert error.operation == "create_binding"
    assert error.role_name == "a1"
    assert error.database_name == "mydb"
    assert error.rollback_error is None


@pytest.mark.parametrize(
    ("step", "expected"),
    [
        (ProvisioningStep.CREATE_ROLE, False),
        (ProvisioningStep.GRANT_ROLE, True),
        (ProvisioningStep.SET_DEFAULT_ROLE, True),
        (ProvisioningStep.COMMIT, True),
    ],
)
def test_role_may_exist_only_after_failed_rollback(step: ProvisioningStep, expected: bool) -> None:
    error = StatementError("boom", step=step)
    assert error.role_may_exist is False

    error.rollback_error = RollbackError("rollback failed", step=ProvisioningStep.ROLLBACK)

    assert error.role_may_exist is expected
