"""Test doubles and sample data shared by unit tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from oci_kms_operator.services.oci.models import KeyVersionSnapshot

KEY_ID = "ocid1.key.oc1.iad.exampleaaaa"
KEY_VERSION_ID = "ocid1.keyversion.oc1.iad.exampleaaaa"
VAULT_ID = "ocid1.vault.oc1.iad.exampleaaaa"
COMPARTMENT_ID = "ocid1.compartment.oc1..exampleaaaa"
ENDPOINT = "https://example-management.kms.us-ashburn-1.oraclecloud.com"


def make_snapshot(state: str | None = "ENABLED", **overrides: Any) -> KeyVersionSnapshot:
    """Build a key version snapshot with sensible defaults."""
    fields = {
        "id": KEY_VERSION_ID,
        "key_id": KEY_ID,
        "vault_id": VAULT_ID,
        "compartment_id": COMPARTMENT_ID,
        "lifecycle_state": state,
        "time_created": datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc),
        "time_of_deletion": None,
    }
    fields.update(overrides)
    return KeyVersionSnapshot(**fields)


class FakeKmsProvider:
    """Call-counting stand-in for the KMS service.

    ``get_results`` is consumed in order; entries may be snapshots or
    exceptions to raise.
    """

    def __init__(
        self,
        created: KeyVersionSnapshot | None = None,
        get_results: list[Any] | None = None,
        deleted: KeyVersionSnapshot | None = None,
        create_error: Exception | None = None,
        delete_error: Exception | None = None,
    ):
        self.created = created or make_snapshot("CREATING")
        self.get_results = list(get_results or [])
        self.deleted = deleted or make_snapshot("SCHEDULING_DELETION")
        self.create_error = create_error
        self.delete_error = delete_error
        self.calls: list[tuple[Any, ...]] = []

    def create_key_version(self, key_id: str) -> KeyVersionSnapshot:
        self.calls.append(("create", key_id))
        if self.create_error is not None:
            raise self.create_error
        return self.created

    def get_key_version(self, key_id: str, key_version_id: str) -> KeyVersionSnapshot:
        self.calls.append(("get", key_id, key_version_id))
        result = self.get_results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def schedule_key_version_deletion(
        self,
        key_id: str,
        key_version_id: str,
        time_of_deletion: datetime | None = None,
    ) -> KeyVersionSnapshot:
        self.calls.append(("delete", key_id, key_version_id, time_of_deletion))
        if self.delete_error is not None:
            raise self.delete_error
        return self.deleted

