"""Generic create/read/delete sequencing for resource synchronizers."""

from __future__ import annotations

import logging
import threading

from .. import metrics
from ..config import OperatorConfig
from ..utils.errors import ResourceNotFoundError
from .base import ResourceSync
from .data import ResourceData
from .waiter import wait_for_state

logger = logging.getLogger(__name__)


def _observe(sync: ResourceSync):
    def observe() -> str | None:
        sync.get()
        return sync.state()

    return observe


def create_resource(
    data: ResourceData,
    sync: ResourceSync,
    config: OperatorConfig,
    cancel_event: threading.Event | None = None,
) -> None:
    """Create a resource, wait for it to become available and project it.

    Args:
        data: Local state; receives the new identifier and projected fields
        sync: Synchronizer for the resource
        config: Operator configuration (poll interval and create timeout)
        cancel_event: Event that aborts polling when set
    """
    try:
        sync.create()
    except Exception:
        metrics.key_version_operations_total.labels(operation="create", result="error").inc()
        raise
    metrics.key_version_operations_total.labels(operation="create", result="success").inc()

    data.set_id(sync.id())
    logger.info(f"Created resource {data.id()}, waiting for {sorted(sync.created_target)}")

    if sync.created_target:
        wait_for_state(
            _observe(sync),
            sync.created_pending,
            sync.created_target,
            config.create_timeout_seconds,
            interval=config.poll_interval_seconds,
            jitter=config.poll_jitter,
            cancel_event=cancel_event,
            operation="create",
        )

    sync.set_data()


def read_resource(sync: ResourceSync) -> None:
    """Refresh a resource and project it into local state.

    A missing resource raises ResourceNotFoundError; the caller decides
    whether to prune local state.
    """
    sync.get()
    sync.set_data()


def delete_resource(
    data: ResourceData,
    sync: ResourceSync,
    config: OperatorConfig,
    cancel_event: threading.Event | None = None,
) -> bool:
    """Delete a resource and wait until it is gone or in a deleted state.

    Args:
        data: Local state; its identifier is cleared once deletion completes
        sync: Synchronizer for the resource
        config: Operator configuration (poll interval and delete timeout)
        cancel_event: Event that aborts polling when set

    A resource already gone when deletion is requested counts as deleted.

    Returns:
        False if the synchronizer skipped the remote deletion, True otherwise
    """
    try:
        issued = sync.delete()
    except ResourceNotFoundError:
        metrics.key_version_operations_total.labels(operation="delete", result="not_found").inc()
        logger.info(f"Resource {data.id()} no longer exists, treating as deleted")
        data.set_id("")
        return True
    except Exception:
        metrics.key_version_operations_total.labels(operation="delete", result="error").inc()
        raise

    if not issued:
        metrics.key_version_operations_total.labels(operation="delete", result="skipped").inc()
        logger.info(f"Deletion of {data.id()} skipped")
        data.set_id("")
        return False

    metrics.key_version_operations_total.labels(operation="delete", result="success").inc()

    if sync.deleted_target:
        wait_for_state(
            _observe(sync),
            sync.deleted_pending,
            sync.deleted_target,
            config.delete_timeout_seconds,
            interval=config.poll_interval_seconds,
            jitter=config.poll_jitter,
            not_found_ok=True,
            cancel_event=cancel_event,
            operation="delete",
        )

    logger.info(f"Deleted resource {data.id()}")
    data.set_id("")
    return True
