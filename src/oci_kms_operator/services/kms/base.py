"""Base KMS provider interface."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..oci.models import KeyVersionSnapshot


class KmsProvider(Protocol):
    """Protocol defining key version operations of a key management service."""

    def create_key_version(self, key_id: str) -> KeyVersionSnapshot:
        """Create a new version of a key."""
        ...

    def get_key_version(self, key_id: str, key_version_id: str) -> KeyVersionSnapshot:
        """Get a key version.

        Raises:
            ResourceNotFoundError: If the key version does not exist
        """
        ...

    def schedule_key_version_deletion(
        self,
        key_id: str,
        key_version_id: str,
        time_of_deletion: datetime | None = None,
    ) -> KeyVersionSnapshot:
        """Schedule deletion of a key version.

        Args:
            key_id: OCID of the key
            key_version_id: OCID of the key version
            time_of_deletion: When to delete; the service default applies if None
        """
        ...
