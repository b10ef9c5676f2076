"""Rate limiting utilities for API calls."""

from __future__ import annotations

import os
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from kubernetes.client.exceptions import ApiException

_F = TypeVar("_F", bound=Callable[..., Any])

# Rate limit configuration
_K8S_RATE_LIMIT_PER_SECOND = float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10.0"))
_KMS_RATE_LIMIT_PER_SECOND = float(os.getenv("KMS_RATE_LIMIT_PER_SECOND", "5.0"))

# Track last call times
_k8s_last_call_time: float = 0.0
_kms_last_call_time: float = 0.0


def rate_limit_k8s(func: _F) -> _F:
    """Decorator to rate limit Kubernetes API calls.

    Implements a simple token bucket-like rate limiter to prevent overwhelming
    the Kubernetes API server.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        global _k8s_last_call_time
        current_time = time.time()
        min_interval = 1.0 / _K8S_RATE_LIMIT_PER_SECOND

        time_since_last_call = current_time - _k8s_last_call_time
        if time_since_last_call < min_interval:
            time.sleep(min_interval - time_since_last_call)

        _k8s_last_call_time = time.time()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def rate_limit_kms(func: _F) -> _F:
    """Decorator to rate limit OCI KMS management API calls.

    Vault management endpoints throttle aggressively, so calls from all
    handler threads share one minimum interval.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        global _kms_last_call_time
        current_time = time.time()
        min_interval = 1.0 / _KMS_RATE_LIMIT_PER_SECOND

        time_since_last_call = current_time - _kms_last_call_time
        if time_since_last_call < min_interval:
            time.sleep(min_interval - time_since_last_call)

        _kms_last_call_time = time.time()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def handle_rate_limit_error(e: Exception, attempt: int = 0, max_retries: int = 3) -> bool:
    """Check if a Kubernetes API exception is a rate limit error and back off.

    The caller owns the attempt counter, so concurrent handlers never share
    retry state.

    Args:
        e: Exception raised by the API call
        attempt: Number of rate limit retries already made by the caller
        max_retries: Maximum number of retries

    Returns:
        True if the caller should retry, False otherwise
    """
    if not isinstance(e, ApiException):
        return False

    # Kubernetes API rate limit errors typically return 429 or 503
    if e.status == 429 or (e.status == 503 and "rate limit" in str(e).lower()):
        if attempt < max_retries:
            # Exponential backoff: 1s, 2s, 4s
            time.sleep(2 ** attempt)
            return True

    return False
