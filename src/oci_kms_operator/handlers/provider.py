"""Handler for Provider CRD."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import kopf
import oci

from .. import metrics
from ..builders.provider import create_oci_config_from_spec
from ..constants import API_GROUP_VERSION, KIND_PROVIDER
from ..tracing import trace_span
from ..utils.cache import invalidate_cache, make_cache_key
from ..utils.conditions import set_auth_valid_condition, set_ready_condition
from ..utils.errors import sanitize_exception
from ..utils.events import emit_validate_succeeded
from .base import BaseHandler


class ProviderHandler(BaseHandler):
    """Handler for Provider resources."""

    def __init__(self):
        """Initialize provider handler."""
        super().__init__(KIND_PROVIDER)

    def reconcile(
        self,
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Reconcile Provider resource."""
        name = meta.get("name", "unknown")
        namespace = meta.get("namespace", "default")

        with trace_span("reconcile_provider", kind=KIND_PROVIDER, attributes={"provider.name": name}):
            if not spec.get("region") or not spec.get("tenancyId"):
                self.handle_validation_error(meta, "region and tenancyId are required")

            emit_validate_succeeded(meta)

            # Handlers of dependent resources must see the new credentials
            invalidate_cache(make_cache_key(KIND_PROVIDER, namespace, name))

            conditions = status.get("conditions", [])
            try:
                create_oci_config_from_spec(spec, meta)
                auth_valid = True
                auth_message = "OCI configuration is valid"
            except (ValueError, oci.exceptions.InvalidConfig) as e:
                auth_valid = False
                sanitized_error = sanitize_exception(e)
                auth_message = f"Invalid OCI configuration: {sanitized_error}"
                metrics.error_total.labels(kind=KIND_PROVIDER, error_type=type(e).__name__).inc()
                self.log_error(meta, auth_message, error=e, reason="AuthFailed")

            conditions = set_auth_valid_condition(conditions, auth_valid, auth_message)
            ready_message = "Provider is ready" if auth_valid else "Provider is not ready"
            conditions = set_ready_condition(conditions, auth_valid, ready_message)

            status_data = {
                "region": spec.get("region"),
                "lastValidatedTime": datetime.now(timezone.utc).isoformat() if auth_valid else None,
                "conditions": conditions,
            }
            self.update_resource_status(patch, meta, auth_valid, status_data)

    def delete(
        self,
        spec: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Handle Provider resource deletion."""
        self.log_info(meta, "Provider is being deleted", event="deletion", reason="Deletion")
        invalidate_cache(make_cache_key(KIND_PROVIDER, meta.get("namespace", "default"), meta.get("name", "")))
        self.remove_finalizer(meta, patch)


# Global handler instance
_handler = ProviderHandler()


@kopf.on.create(API_GROUP_VERSION, KIND_PROVIDER)
@kopf.on.update(API_GROUP_VERSION, KIND_PROVIDER)
@kopf.on.resume(API_GROUP_VERSION, KIND_PROVIDER)
def handle_provider(
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle Provider resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(meta, lambda: _handler.reconcile(spec, meta, status, patch))


@kopf.on.delete(API_GROUP_VERSION, KIND_PROVIDER)
def handle_provider_delete(
    spec: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle Provider resource deletion."""
    _handler.delete(spec, meta, patch)
