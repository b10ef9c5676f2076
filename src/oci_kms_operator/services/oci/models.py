"""Models for OCI KMS key versions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class LifecycleState(str, Enum):
    """Lifecycle states reported by the service for a key version.

    Values are the SDK wire strings. DISABLING, CANCELLING_DELETION, UPDATING,
    BACKUP_IN_PROGRESS and RESTORING are never in a wait table, so observing
    one while waiting raises UnexpectedStateError.
    """

    CREATING = "CREATING"
    ENABLING = "ENABLING"
    ENABLED = "ENABLED"
    DISABLING = "DISABLING"
    DISABLED = "DISABLED"
    DELETING = "DELETING"
    DELETED = "DELETED"
    PENDING_DELETION = "PENDING_DELETION"
    SCHEDULING_DELETION = "SCHEDULING_DELETION"
    CANCELLING_DELETION = "CANCELLING_DELETION"
    UPDATING = "UPDATING"
    BACKUP_IN_PROGRESS = "BACKUP_IN_PROGRESS"
    RESTORING = "RESTORING"


@dataclass(frozen=True)
class KeyVersionSnapshot:
    """Point-in-time view of a remote key version."""

    id: str | None
    key_id: str | None
    vault_id: str | None = None
    compartment_id: str | None = None
    lifecycle_state: str | None = None
    time_created: datetime | None = None
    time_of_deletion: datetime | None = None

    @classmethod
    def from_oci(cls, key_version: Any) -> KeyVersionSnapshot:
        """Build a snapshot from an ``oci.key_management.models.KeyVersion``."""
        return cls(
            id=key_version.id,
            key_id=key_version.key_id,
            vault_id=key_version.vault_id,
            compartment_id=key_version.compartment_id,
            lifecycle_state=key_version.lifecycle_state,
            time_created=key_version.time_created,
            time_of_deletion=key_version.time_of_deletion,
        )
