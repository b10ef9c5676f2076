"""Utilities for reading Kubernetes secrets."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from kubernetes import client


def get_secret_value(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    key: str,
) -> str:
    """Get a value from a Kubernetes secret.

    Args:
        api: Kubernetes API client
        namespace: Namespace of the secret
        secret_name: Name of the secret
        key: Key in the secret

    Returns:
        Secret value

    Raises:
        ValueError: If secret or key not found
    """
    try:
        secret = api.read_namespaced_secret(name=secret_name, namespace=namespace)
    except client.exceptions.ApiException as e:
        if e.status == 404:
            raise ValueError(f"Secret '{secret_name}' not found in namespace '{namespace}'") from e
        raise

    data = secret.data or {}
    if key not in data:
        raise ValueError(f"Key '{key}' not found in secret '{secret_name}'")

    value = data[key]
    # Handle both string and bytes (different versions of kubernetes client)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            # Already decoded
            return value
    return value.decode("utf-8")


def get_secret_ref_value(
    api: client.CoreV1Api,
    namespace: str,
    ref: dict[str, Any] | None,
    default_key: str,
) -> str | None:
    """Resolve an optional ``{name, key, namespace}`` secret reference.

    Returns:
        Secret value, or None when the reference has no name
    """
    if not ref or not ref.get("name"):
        return None
    return get_secret_value(
        api,
        ref.get("namespace", namespace),
        ref["name"],
        ref.get("key", default_key),
    )
