"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from oci_kms_operator.config import OperatorConfig


@pytest.fixture
def config() -> OperatorConfig:
    """Configuration that never sleeps."""
    return OperatorConfig(
        create_settle_delay_seconds=0,
        poll_interval_seconds=0,
        poll_jitter=0,
        create_timeout_seconds=60,
        delete_timeout_seconds=60,
    )


@pytest.fixture
def guarded_config() -> OperatorConfig:
    """Configuration with key version deletion disabled."""
    return OperatorConfig(
        disable_key_version_delete=True,
        create_settle_delay_seconds=0,
        poll_interval_seconds=0,
        poll_jitter=0,
    )
