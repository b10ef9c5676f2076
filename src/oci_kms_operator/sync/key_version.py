"""Synchronizer for OCI KMS key versions."""

from __future__ import annotations

import logging
import time
from typing import Callable

from ..config import OperatorConfig
from ..services.kms.base import KmsProvider
from ..services.oci.models import KeyVersionSnapshot, LifecycleState
from ..utils.errors import MalformedIdentifierError
from ..utils.timestamps import format_rfc3339, parse_rfc3339
from .base import ResourceSync
from .data import ResourceData
from .identifiers import decode_key_version_id, encode_key_version_id, parse_import_id

logger = logging.getLogger(__name__)


class KeyVersionSync(ResourceSync):
    """Create, read and schedule deletion of a key version."""

    created_pending = frozenset({LifecycleState.CREATING.value, LifecycleState.ENABLING.value})
    created_target = frozenset({LifecycleState.ENABLED.value})
    deleted_pending = frozenset({
        LifecycleState.DISABLED.value,
        LifecycleState.DELETING.value,
        LifecycleState.SCHEDULING_DELETION.value,
    })
    deleted_target = frozenset({LifecycleState.DELETED.value, LifecycleState.PENDING_DELETION.value})

    def __init__(
        self,
        client: KmsProvider,
        data: ResourceData,
        config: OperatorConfig,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(data)
        self.client = client
        self.config = config
        self.res: KeyVersionSnapshot | None = None
        self._sleep = sleep

    @staticmethod
    def import_state(data: ResourceData) -> None:
        """Populate local state from an import identifier held in ``data.id()``.

        Raises:
            ImportFormatError: If the identifier does not match the import format
        """
        imported = parse_import_id(data.id())
        data.set("management_endpoint", imported.management_endpoint)
        data.set("key_id", imported.key_id)
        data.set("key_version_id", imported.key_version_id)
        data.set_id(imported.composite_id)

    def _decode_id(self, operation: str) -> tuple[str, str]:
        try:
            return decode_key_version_id(self.data.id())
        except MalformedIdentifierError:
            logger.warning(f"{operation}() unable to parse current ID: {self.data.id()}")
            raise

    def create(self) -> None:
        key_id = self.data.get("key_id")
        self.res = self.client.create_key_version(key_id)

        # A new key version cannot be read back straight away
        if self.config.create_settle_delay_seconds > 0:
            logger.debug(
                f"Waiting {self.config.create_settle_delay_seconds:g}s before reading key version {self.res.id}"
            )
            self._sleep(self.config.create_settle_delay_seconds)

    def get(self) -> None:
        key_id, key_version_id = self._decode_id("get")
        self.res = self.client.get_key_version(key_id, key_version_id)

    def delete(self) -> bool:
        if self.config.disable_key_version_delete:
            logger.info(f"Key version deletion is disabled, leaving {self.data.id()} in place")
            return False

        key_id, key_version_id = self._decode_id("delete")

        time_of_deletion = None
        value, ok = self.data.get_ok_exists("time_of_deletion")
        if ok and value:
            time_of_deletion = parse_rfc3339(value)

        self.res = self.client.schedule_key_version_deletion(key_id, key_version_id, time_of_deletion)
        return True

    def id(self) -> str:
        return encode_key_version_id(self.res.key_id, self.res.id)

    def state(self) -> str | None:
        return self.res.lifecycle_state if self.res is not None else None

    def set_data(self) -> None:
        try:
            key_id, key_version_id = decode_key_version_id(self.data.id())
        except MalformedIdentifierError as e:
            logger.warning(f"set_data() unable to parse current ID: {self.data.id()}")
            self.diagnostics.append(str(e))
        else:
            self.data.set("key_id", key_id)
            self.data.set("key_version_id", key_version_id)

        res = self.res
        if res is None:
            return

        if res.compartment_id is not None:
            self.data.set("compartment_id", res.compartment_id)

        if res.key_id is not None:
            self.data.set("key_id", res.key_id)

        if res.lifecycle_state is not None:
            self.data.set("state", res.lifecycle_state)

        if res.time_created is not None:
            self.data.set("time_created", format_rfc3339(res.time_created))

        if res.time_of_deletion is not None:
            self.data.set("time_of_deletion", format_rfc3339(res.time_of_deletion))

        if res.vault_id is not None:
            self.data.set("vault_id", res.vault_id)
