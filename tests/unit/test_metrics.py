"""Tests for Prometheus metrics."""

from __future__ import annotations

import pytest

from oci_kms_operator.metrics import (
    api_call_duration_seconds,
    api_call_total,
    error_total,
    key_version_operations_total,
    rate_limit_hits_total,
    reconcile_duration_seconds,
    reconcile_total,
    resource_status_total,
    state_wait_duration_seconds,
)


class TestMetricsExist:
    """Test that all expected metrics are defined."""

    @pytest.mark.parametrize(
        "metric,name",
        [
            # Prometheus counters don't include "_total" in their _name attribute
            (reconcile_total, "oci_kms_operator_reconcile"),
            (error_total, "oci_kms_operator_error"),
            (resource_status_total, "oci_kms_operator_resource_status"),
            (key_version_operations_total, "oci_kms_operator_key_version_operations"),
            (api_call_total, "oci_kms_operator_api_call"),
            (rate_limit_hits_total, "oci_kms_operator_rate_limit_hits"),
            (reconcile_duration_seconds, "oci_kms_operator_reconcile_duration_seconds"),
            (state_wait_duration_seconds, "oci_kms_operator_state_wait_duration_seconds"),
            (api_call_duration_seconds, "oci_kms_operator_api_call_duration_seconds"),
        ],
    )
    def test_metric_name(self, metric, name):
        """Test that metrics carry the operator prefix."""
        assert metric._name == name


class TestMetricLabels:
    """Test that metrics have correct labels."""

    def test_key_version_operations_labels(self):
        """Test key_version_operations_total labels."""
        key_version_operations_total.labels(operation="create", result="success").inc(0)
        key_version_operations_total.labels(operation="delete", result="skipped").inc(0)

    def test_state_wait_labels(self):
        """Test state_wait_duration_seconds labels."""
        state_wait_duration_seconds.labels(operation="create", result="timeout").observe(0)

    def test_api_call_labels(self):
        """Test api_call_total and api_call_duration_seconds labels."""
        api_call_total.labels(api_type="kms", operation="get_key_version", result="success").inc(0)
        api_call_duration_seconds.labels(api_type="kms", operation="get_key_version").observe(0.1)

    def test_wrong_labels_rejected(self):
        """Test that unknown label names are rejected."""
        with pytest.raises(ValueError):
            key_version_operations_total.labels(kind="KeyVersion", result="success")


class TestMetricOperations:
    """Test metric operations."""

    def test_counter_increment(self):
        """Test that counters can be incremented."""
        counter = key_version_operations_total.labels(operation="test-increment", result="success")
        initial = counter._value.get()

        counter.inc()

        assert counter._value.get() == initial + 1

    def test_different_label_values_independent(self):
        """Test that metrics with different labels are independent."""
        key_version_operations_total.labels(operation="test-a", result="error").inc(3)
        key_version_operations_total.labels(operation="test-b", result="error").inc(5)

        assert key_version_operations_total.labels(operation="test-a", result="error")._value.get() == 3
        assert key_version_operations_total.labels(operation="test-b", result="error")._value.get() == 5
