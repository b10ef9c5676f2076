"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_KEY_VERSION_CREATED,
    EVENT_REASON_KEY_VERSION_DELETION_SCHEDULED,
    EVENT_REASON_KEY_VERSION_DELETION_SKIPPED,
    EVENT_REASON_KEY_VERSION_IMPORTED,
    EVENT_REASON_KEY_VERSION_NOT_FOUND,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_VALIDATE_FAILED,
    EVENT_REASON_VALIDATE_SUCCEEDED,
)


def emit_event(
    meta: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        meta: Resource metadata
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        meta,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(meta: dict[str, Any]) -> None:
    """Emit reconcile started event."""
    emit_event(meta, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(meta: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(meta, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_validate_succeeded(meta: dict[str, Any]) -> None:
    """Emit validation succeeded event."""
    emit_event(meta, EVENT_REASON_VALIDATE_SUCCEEDED, "Validation succeeded")


def emit_validate_failed(meta: dict[str, Any], message: str) -> None:
    """Emit validation failed event."""
    emit_event(meta, EVENT_REASON_VALIDATE_FAILED, message, type_="Warning")


def emit_key_version_created(meta: dict[str, Any], key_version_id: str) -> None:
    """Emit key version created event."""
    emit_event(meta, EVENT_REASON_KEY_VERSION_CREATED, f"Key version {key_version_id} created")


def emit_key_version_imported(meta: dict[str, Any], key_version_id: str) -> None:
    """Emit key version imported event."""
    emit_event(meta, EVENT_REASON_KEY_VERSION_IMPORTED, f"Key version {key_version_id} imported")


def emit_key_version_not_found(meta: dict[str, Any], key_version_id: str) -> None:
    """Emit key version not found event."""
    emit_event(
        meta,
        EVENT_REASON_KEY_VERSION_NOT_FOUND,
        f"Key version {key_version_id} no longer exists",
        type_="Warning",
    )


def emit_key_version_deletion_scheduled(meta: dict[str, Any], key_version_id: str) -> None:
    """Emit key version deletion scheduled event."""
    emit_event(
        meta,
        EVENT_REASON_KEY_VERSION_DELETION_SCHEDULED,
        f"Deletion of key version {key_version_id} scheduled",
    )


def emit_key_version_deletion_skipped(meta: dict[str, Any], key_version_id: str) -> None:
    """Emit key version deletion skipped event."""
    emit_event(
        meta,
        EVENT_REASON_KEY_VERSION_DELETION_SKIPPED,
        f"Key version deletion is disabled, {key_version_id} left in place",
    )
