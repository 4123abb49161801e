"""Provision scoped PostgreSQL roles and render their connection credentials."""

from __future__ import annotations

__version__ = "0.1.0"

from .credentials import create_credential
from .errors import (
    BindingError,
    RollbackError,
    ServerConnectionError,
    StatementError,
    TransactionError,
)
from .models import BindingDetails, Credentials, ProvisioningStep
from .provisioner import RoleProvisioner, create_binding
from .service import BindingService

__all__ = [
    "BindingDetails",
    "BindingError",
    "BindingService",
    "Credentials",
    "ProvisioningStep",
    "RoleProvisioner",
    "RollbackError",
    "ServerConnectionError",
    "StatementError",
    "TransactionError",
    "__version__",
    "create_binding",
    "create_credential",
]
