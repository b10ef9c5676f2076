"""OCI KMS client implementation."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable

import oci
from oci.exceptions import ServiceError
from oci.key_management import KmsManagementClient
from oci.key_management.models import ScheduleKeyVersionDeletionDetails

from ... import metrics
from ...utils.errors import RemoteServiceError, ResourceNotFoundError
from ...utils.rate_limit import rate_limit_kms
from .models import KeyVersionSnapshot

logger = logging.getLogger(__name__)


class OCIKmsProvider:
    """Key version operations against an OCI vault management endpoint."""

    def __init__(
        self,
        config: dict[str, Any],
        management_endpoint: str,
        retry_mutating_calls: bool = False,
        client: Any | None = None,
    ) -> None:
        """Initialize OCI KMS provider.

        Args:
            config: OCI SDK configuration (user, tenancy, fingerprint, key, region)
            management_endpoint: Vault management endpoint URL
            retry_mutating_calls: Apply the SDK default retry strategy to
                non-idempotent calls as well
            client: Preconfigured KmsManagementClient (mainly for tests)
        """
        self.management_endpoint = management_endpoint
        self.retry_mutating_calls = retry_mutating_calls
        self.client = client or KmsManagementClient(config, service_endpoint=management_endpoint)

    def retry_strategy_for(self, mutating: bool) -> Any:
        """Return the SDK retry strategy for a read or mutating call."""
        if mutating and not self.retry_mutating_calls:
            return oci.retry.NoneRetryStrategy()
        return oci.retry.DEFAULT_RETRY_STRATEGY

    def _call(self, operation: str, mutating: bool, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        start_time = time.time()
        try:
            response = rate_limit_kms(fn)(*args, retry_strategy=self.retry_strategy_for(mutating), **kwargs)
            metrics.api_call_total.labels(api_type="kms", operation=operation, result="success").inc()
            return response
        except ServiceError as e:
            metrics.api_call_total.labels(api_type="kms", operation=operation, result="error").inc()
            if e.status == 429:
                metrics.rate_limit_hits_total.labels(api_type="kms").inc()
            if e.status == 404:
                raise ResourceNotFoundError(f"{operation}: {e.message}") from e
            logger.error(f"KMS {operation} failed with status {e.status} ({e.code}): {e.message}")
            raise RemoteServiceError(
                f"{operation} failed: {e.message}",
                status=e.status,
                code=e.code,
                request_id=(e.headers or {}).get("opc-request-id"),
            ) from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="kms", operation=operation).observe(duration)

    def create_key_version(self, key_id: str) -> KeyVersionSnapshot:
        """Create a new version of a key."""
        response = self._call("create_key_version", True, self.client.create_key_version, key_id)
        snapshot = KeyVersionSnapshot.from_oci(response.data)
        logger.info(f"Created key version {snapshot.id} for key {key_id}")
        return snapshot

    def get_key_version(self, key_id: str, key_version_id: str) -> KeyVersionSnapshot:
        """Get a key version."""
        response = self._call("get_key_version", False, self.client.get_key_version, key_id, key_version_id)
        return KeyVersionSnapshot.from_oci(response.data)

    def schedule_key_version_deletion(
        self,
        key_id: str,
        key_version_id: str,
        time_of_deletion: datetime | None = None,
    ) -> KeyVersionSnapshot:
        """Schedule deletion of a key version."""
        details = ScheduleKeyVersionDeletionDetails(time_of_deletion=time_of_deletion)
        response = self._call(
            "schedule_key_version_deletion",
            True,
            self.client.schedule_key_version_deletion,
            key_id,
            key_version_id,
            details,
        )
        logger.info(f"Scheduled deletion of key version {key_version_id} of key {key_id}")
        return KeyVersionSnapshot.from_oci(response.data)
