"""Handler for KeyVersion CRD."""

from __future__ import annotations

import threading
from typing import Any

import kopf
from kubernetes import client

from .. import metrics
from ..builders.provider import create_kms_provider
from ..config import OperatorConfig, load_config
from ..constants import (
    ANNOTATION_IMPORT_ID,
    API_GROUP_VERSION,
    COND_NOT_FOUND,
    KEY_VERSION_STATUS_FIELDS,
    KIND_KEY_VERSION,
)
from ..services.oci.models import LifecycleState
from ..sync.data import ResourceData
from ..sync.driver import create_resource, delete_resource, read_resource
from ..sync.key_version import KeyVersionSync
from ..tracing import trace_span
from ..utils.conditions import (
    remove_condition,
    set_creation_failed_condition,
    set_deletion_scheduled_condition,
    set_not_found_condition,
    set_ready_condition,
)
from ..utils.errors import (
    ImportFormatError,
    InvalidTimestampError,
    MalformedIdentifierError,
    PollCancelledError,
    RemoteServiceError,
    ResourceNotFoundError,
    UnexpectedStateError,
    WaitTimeoutError,
    sanitize_exception,
)
from ..utils.events import (
    emit_key_version_created,
    emit_key_version_deletion_scheduled,
    emit_key_version_deletion_skipped,
    emit_key_version_imported,
    emit_key_version_not_found,
    emit_validate_succeeded,
)
from .base import BaseHandler
from .shared import get_k8s_client, get_provider_with_cache, is_provider_ready, shutdown_event

# Errors that will not go away by retrying the same operation
PERMANENT_ERRORS = (MalformedIdentifierError, InvalidTimestampError, UnexpectedStateError)
# Errors worth retrying by re-running the whole operation
TEMPORARY_ERRORS = (WaitTimeoutError, PollCancelledError, RemoteServiceError)

RETRY_DELAY_SECONDS = 60


def build_resource_data(spec: dict[str, Any], status: dict[str, Any]) -> ResourceData:
    """Build local state from the recorded status and the declared spec."""
    fields = {
        field: status.get(status_key)
        for status_key, field in KEY_VERSION_STATUS_FIELDS.items()
    }
    for spec_key, field in (
        ("keyId", "key_id"),
        ("managementEndpoint", "management_endpoint"),
        ("timeOfDeletion", "time_of_deletion"),
    ):
        if spec.get(spec_key):
            fields[field] = spec[spec_key]
    return ResourceData(fields, status.get("id", ""))


def status_from_data(data: ResourceData) -> dict[str, Any]:
    """Render local state as KeyVersion status fields.

    Fields that are unset are rendered as None so the merge patch removes them.
    """
    status = {"id": data.id() or None}
    for status_key, field in KEY_VERSION_STATUS_FIELDS.items():
        status[status_key] = data.get(field)
    return status


class KeyVersionHandler(BaseHandler):
    """Handler for KeyVersion resources."""

    def __init__(
        self,
        config: OperatorConfig | None = None,
        cancel_event: threading.Event | None = None,
    ):
        """Initialize key version handler.

        Args:
            config: Operator configuration; loaded from the environment on first use if None
            cancel_event: Event that interrupts lifecycle polling
        """
        super().__init__(KIND_KEY_VERSION)
        self._config = config
        self.cancel_event = cancel_event if cancel_event is not None else shutdown_event

    @property
    def config(self) -> OperatorConfig:
        if self._config is None:
            self._config = load_config()
        return self._config

    def _get_provider(
        self,
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> dict[str, Any]:
        provider_ref = spec.get("providerRef", {})
        provider_name = provider_ref.get("name")
        provider_ns = provider_ref.get("namespace", meta.get("namespace", "default"))

        try:
            provider_obj = get_provider_with_cache(get_k8s_client(), provider_name, provider_ns)
        except client.exceptions.ApiException as e:
            if e.status == 404:
                self.handle_provider_not_found(
                    meta, status, patch, f"Provider {provider_name} not found in namespace {provider_ns}"
                )
            raise

        if not is_provider_ready(provider_obj):
            self.handle_provider_not_ready(
                meta, status, patch, provider_name, f"Provider {provider_name} is not ready"
            )
        return provider_obj

    def _make_sync(self, provider_obj: dict[str, Any], data: ResourceData) -> KeyVersionSync:
        kms_client = create_kms_provider(
            provider_obj.get("spec", {}),
            provider_obj.get("metadata", {}),
            data.get("management_endpoint"),
            self.config,
        )
        return KeyVersionSync(kms_client, data, self.config)

    def _raise_for(self, meta: dict[str, Any], error: Exception, action: str) -> None:
        message = f"Failed to {action} key version: {sanitize_exception(error)}"
        if isinstance(error, PERMANENT_ERRORS):
            self.log_error(meta, message, error=error, reason="PermanentFailure")
            raise kopf.PermanentError(message) from error
        self.log_warning(meta, message, reason="TemporaryFailure", error_type=type(error).__name__)
        raise kopf.TemporaryError(message, delay=RETRY_DELAY_SECONDS) from error

    def reconcile(
        self,
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Reconcile KeyVersion resource."""
        name = meta.get("name", "unknown")

        with trace_span("reconcile_key_version", kind=KIND_KEY_VERSION, attributes={"keyversion.name": name}):
            if not spec.get("providerRef", {}).get("name"):
                self.handle_validation_error(meta, "providerRef.name is required")

            data = build_resource_data(spec, status)
            import_id = (meta.get("annotations") or {}).get(ANNOTATION_IMPORT_ID)
            importing = not data.id() and bool(import_id)

            if importing:
                data = ResourceData({"time_of_deletion": spec.get("timeOfDeletion")}, import_id)
                try:
                    KeyVersionSync.import_state(data)
                except ImportFormatError as e:
                    self.handle_validation_error(meta, str(e))
            elif not data.id() and not (data.get("key_id") and data.get("management_endpoint")):
                self.handle_validation_error(meta, "keyId and managementEndpoint are required")

            emit_validate_succeeded(meta)

            provider_obj = self._get_provider(spec, meta, status, patch)
            sync = self._make_sync(provider_obj, data)
            conditions = status.get("conditions", [])

            if not data.id():
                with trace_span("create_key_version", kind=KIND_KEY_VERSION):
                    try:
                        create_resource(data, sync, self.config, self.cancel_event)
                    except Exception as e:
                        # Keep the identity of a version that was created but never settled
                        conditions = set_creation_failed_condition(conditions, sanitize_exception(e))
                        patch.status.update({**status_from_data(data), "conditions": conditions})
                        if isinstance(e, PERMANENT_ERRORS + TEMPORARY_ERRORS):
                            self._raise_for(meta, e, "create")
                        raise
                emit_key_version_created(meta, data.get("key_version_id"))
                self.log_info(meta, f"Created key version {data.id()}", event="created", reason="Created")
            else:
                try:
                    read_resource(sync)
                except ResourceNotFoundError:
                    self._prune(meta, data, conditions, patch)
                except PERMANENT_ERRORS + TEMPORARY_ERRORS as e:
                    self._raise_for(meta, e, "read")
                if importing:
                    emit_key_version_imported(meta, data.get("key_version_id"))

            for diagnostic in sync.diagnostics:
                self.log_warning(meta, diagnostic, reason="PartialProjection")

            conditions = remove_condition(conditions, COND_NOT_FOUND)
            state = data.get("state")
            ready = state == LifecycleState.ENABLED.value
            pending_deletion = state in KeyVersionSync.deleted_target
            conditions = set_deletion_scheduled_condition(
                conditions, pending_deletion, f"Key version is {state}"
            )
            conditions = set_ready_condition(
                conditions, ready, f"Key version {data.get('key_version_id')} is {state}"
            )
            self.update_resource_status(patch, meta, ready, {**status_from_data(data), "conditions": conditions})

    def _prune(
        self,
        meta: dict[str, Any],
        data: ResourceData,
        conditions: list[dict[str, Any]],
        patch: kopf.Patch,
    ) -> None:
        """Forget a key version that no longer exists so the next pass recreates it.

        Raises:
            kopf.TemporaryError: Always raises to trigger re-creation
        """
        missing_id = data.id()
        message = f"Key version {missing_id} no longer exists and will be recreated"
        self.log_warning(meta, message, reason="NotFound")
        emit_key_version_not_found(meta, missing_id)

        data.set_id("")
        for field in ("key_version_id", "state", "time_created", "time_of_deletion", "compartment_id", "vault_id"):
            data.unset(field)

        conditions = set_not_found_condition(conditions, message)
        conditions = set_ready_condition(conditions, False, message, reason="NotFound")
        self.update_resource_status(patch, meta, False, {**status_from_data(data), "conditions": conditions})
        raise kopf.TemporaryError(message, delay=RETRY_DELAY_SECONDS)

    def delete(
        self,
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Handle KeyVersion resource deletion."""
        data = build_resource_data(spec, status)
        if not data.id():
            self.log_info(meta, "KeyVersion has no remote counterpart", event="deletion", reason="Deletion")
            self.remove_finalizer(meta, patch)
            return

        # Disabled deletion must not depend on the provider or its credentials
        if self.config.disable_key_version_delete:
            metrics.key_version_operations_total.labels(operation="delete", result="skipped").inc()
            emit_key_version_deletion_skipped(meta, data.id())
            self.log_info(meta, f"Deletion of {data.id()} skipped", event="deletion", reason="DeletionSkipped")
            self.remove_finalizer(meta, patch)
            return

        with trace_span("delete_key_version", kind=KIND_KEY_VERSION):
            provider_obj = self._get_provider(spec, meta, status, patch)
            sync = self._make_sync(provider_obj, data)
            composite_id = data.id()

            try:
                issued = delete_resource(data, sync, self.config, self.cancel_event)
            except PERMANENT_ERRORS + TEMPORARY_ERRORS as e:
                self._raise_for(meta, e, "delete")

            if issued:
                emit_key_version_deletion_scheduled(meta, composite_id)
                self.log_info(meta, f"Scheduled deletion of {composite_id}", event="deletion", reason="Deletion")
            else:
                emit_key_version_deletion_skipped(meta, composite_id)
                self.log_info(meta, f"Deletion of {composite_id} skipped", event="deletion", reason="DeletionSkipped")

        self.remove_finalizer(meta, patch)


# Global handler instance
_handler = KeyVersionHandler()


@kopf.on.create(API_GROUP_VERSION, KIND_KEY_VERSION)
@kopf.on.update(API_GROUP_VERSION, KIND_KEY_VERSION)
@kopf.on.resume(API_GROUP_VERSION, KIND_KEY_VERSION)
def handle_key_version(
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle KeyVersion resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(meta, lambda: _handler.reconcile(spec, meta, status, patch))


@kopf.timer(API_GROUP_VERSION, KIND_KEY_VERSION, interval=load_config().drift_check_interval_seconds, idle=60)
def check_key_version_drift(
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Periodically re-read KeyVersions that already exist remotely."""
    if not status.get("id"):
        return
    _handler.reconcile_with_metrics(meta, lambda: _handler.reconcile(spec, meta, status, patch))


@kopf.on.delete(API_GROUP_VERSION, KIND_KEY_VERSION)
def handle_key_version_delete(
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle KeyVersion resource deletion."""
    _handler.reconcile_with_metrics(meta, lambda: _handler.delete(spec, meta, status, patch))
