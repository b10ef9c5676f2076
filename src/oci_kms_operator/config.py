"""Operator configuration loaded from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "t", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "f", "false", "no", "n", "off"}


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime settings for reconciliation.

    Attributes:
        disable_key_version_delete: When true, deleting a KeyVersion never
            contacts the service. Scheduling deletion is only valid for a
            version that is not the key's current version, so automated
            test runs switch it off.
        create_settle_delay_seconds: Pause after create before the first get,
            since a freshly created key version is not immediately readable.
        poll_interval_seconds: Base delay between lifecycle state polls
        poll_jitter: Fraction of the interval added as random jitter
        create_timeout_seconds: Deadline for reaching the created target state
        delete_timeout_seconds: Deadline for reaching the deleted target state
        retry_mutating_calls: Retry non-idempotent KMS calls with the SDK
            default retry strategy
        drift_check_interval_seconds: Interval of the periodic re-read timer
        metrics_port: Port for the metrics and health endpoints
        max_workers: Size of the kopf sync handler pool
    """

    disable_key_version_delete: bool = False
    create_settle_delay_seconds: float = 30.0
    poll_interval_seconds: float = 5.0
    poll_jitter: float = 0.2
    create_timeout_seconds: float = 1200.0
    delete_timeout_seconds: float = 1200.0
    retry_mutating_calls: bool = False
    drift_check_interval_seconds: int = 300
    metrics_port: int = 8080
    max_workers: int = 4


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean setting, returning the default when unset or unparsable."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    logger.warning(f"Ignoring unparsable boolean setting '{value}', using {default}")
    return default


def _parse_number(env: Mapping[str, str], name: str, default: float, cast: type = float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: '{raw}', using default {default}")
        return default
    if value < 0:
        logger.warning(f"Negative value for {name}: '{raw}', using default {default}")
        return default
    return value


def load_config(env: Mapping[str, str] | None = None) -> OperatorConfig:
    """Build the operator configuration from environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        OperatorConfig instance
    """
    if env is None:
        env = os.environ

    defaults = OperatorConfig()
    return OperatorConfig(
        disable_key_version_delete=parse_bool(env.get("DISABLE_KMS_VERSION_DELETE")),
        create_settle_delay_seconds=_parse_number(
            env, "KMS_CREATE_SETTLE_SECONDS", defaults.create_settle_delay_seconds
        ),
        poll_interval_seconds=_parse_number(env, "KMS_POLL_INTERVAL_SECONDS", defaults.poll_interval_seconds),
        poll_jitter=_parse_number(env, "KMS_POLL_JITTER", defaults.poll_jitter),
        create_timeout_seconds=_parse_number(env, "KMS_CREATE_TIMEOUT_SECONDS", defaults.create_timeout_seconds),
        delete_timeout_seconds=_parse_number(env, "KMS_DELETE_TIMEOUT_SECONDS", defaults.delete_timeout_seconds),
        retry_mutating_calls=parse_bool(env.get("OCI_RETRY_MUTATING_CALLS")),
        drift_check_interval_seconds=int(
            _parse_number(env, "DRIFT_CHECK_INTERVAL_SECONDS", defaults.drift_check_interval_seconds, int)
        ),
        metrics_port=int(_parse_number(env, "METRICS_PORT", defaults.metrics_port, int)),
        max_workers=int(_parse_number(env, "MAX_WORKERS", defaults.max_workers, int)),
    )
