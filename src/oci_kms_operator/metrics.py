"""Prometheus metrics for the OCI KMS Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "oci_kms_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "oci_kms_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 5.0, 30.0, 60.0, 300.0],
)

error_total = Counter(
    "oci_kms_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "oci_kms_operator_resource_status_total",
    "Total number of resource status updates",
    ["kind", "status"],
)

# KMS operation metrics
key_version_operations_total = Counter(
    "oci_kms_operator_key_version_operations_total",
    "Total number of key version lifecycle operations",
    ["operation", "result"],
)

state_wait_duration_seconds = Histogram(
    "oci_kms_operator_state_wait_duration_seconds",
    "Time spent waiting for a lifecycle state transition",
    ["operation", "result"],
    buckets=[1.0, 5.0, 15.0, 30.0, 60.0, 300.0, 1200.0],
)

# API call metrics
api_call_total = Counter(
    "oci_kms_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "oci_kms_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

rate_limit_hits_total = Counter(
    "oci_kms_operator_rate_limit_hits_total",
    "Total number of rate limit hits",
    ["api_type"],
)
