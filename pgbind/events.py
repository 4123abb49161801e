"""Events reported to provisioning observers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from .errors import BindingError
from .models import ProvisioningStep


class EventKind(str, Enum):
    """Outcome categories emitted by the provisioner."""

    BINDING_CREATED = "binding_created"
    BINDING_FAILED = "binding_failed"
    ROLLBACK_FAILED = "rollback_failed"


@dataclass(frozen=True, slots=True)
class ProvisioningEvent:
    """Snapshot emitted whenever a provisioning call finishes or unwinds badly."""

    kind: EventKind
    role_name: str
    database_name: str
    step: ProvisioningStep | None = None
    error: BindingError | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


ProvisioningListener = Callable[[ProvisioningEvent], None]


__all__ = ["EventKind", "ProvisioningEvent", "ProvisioningListener"]
