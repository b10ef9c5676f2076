"""Utility functions for the OCI KMS Operator."""

from .cache import (
    get_cached_object,
    invalidate_cache,
    make_cache_key,
    set_cached_object,
)
from .conditions import (
    set_provider_not_ready_condition,
    set_ready_condition,
    update_condition,
)
from .context import (
    get_context_dict,
    get_correlation_id,
    with_correlation_id,
)
from .events import emit_event
from .rate_limit import handle_rate_limit_error, rate_limit_k8s, rate_limit_kms
from .secrets import get_secret_value
from .timestamps import format_rfc3339, parse_rfc3339

__all__ = [
    "update_condition",
    "set_ready_condition",
    "set_provider_not_ready_condition",
    "emit_event",
    "get_secret_value",
    "get_cached_object",
    "set_cached_object",
    "invalidate_cache",
    "make_cache_key",
    "rate_limit_k8s",
    "rate_limit_kms",
    "handle_rate_limit_error",
    "get_correlation_id",
    "with_correlation_id",
    "get_context_dict",
    "parse_rfc3339",
    "format_rfc3339",
]
