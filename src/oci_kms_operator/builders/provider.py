"""Builder for OCI KMS provider instances."""

from __future__ import annotations

from typing import Any

import oci
from kubernetes import client, config

from ..config import OperatorConfig
from ..services.oci.client import OCIKmsProvider
from ..utils.secrets import get_secret_ref_value


def create_oci_config_from_spec(
    spec: dict[str, Any],
    meta: dict[str, Any],
) -> dict[str, Any]:
    """Assemble an OCI SDK configuration from a Provider spec.

    Args:
        spec: Provider CRD spec
        meta: Provider metadata

    Returns:
        OCI configuration dict accepted by the SDK clients

    Raises:
        ValueError: If required fields or secrets are missing
        oci.exceptions.InvalidConfig: If the assembled configuration is invalid
    """
    for field in ("region", "tenancyId", "userId", "fingerprint"):
        if not spec.get(field):
            raise ValueError("region, tenancyId, userId and fingerprint are required")

    # Get Kubernetes API client
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    api = client.CoreV1Api()
    namespace = meta.get("namespace", "default")

    auth = spec.get("auth", {})
    private_key = get_secret_ref_value(api, namespace, auth.get("privateKeySecretRef"), "private-key")
    if not private_key:
        raise ValueError("auth.privateKeySecretRef is required")
    passphrase = get_secret_ref_value(api, namespace, auth.get("passphraseSecretRef"), "passphrase")

    oci_config = {
        "user": spec["userId"],
        "tenancy": spec["tenancyId"],
        "fingerprint": spec["fingerprint"],
        "region": spec["region"],
        "key_content": private_key,
    }
    if passphrase:
        oci_config["pass_phrase"] = passphrase

    oci.config.validate_config(oci_config)
    return oci_config


def create_kms_provider(
    provider_spec: dict[str, Any],
    provider_meta: dict[str, Any],
    management_endpoint: str,
    operator_config: OperatorConfig,
) -> OCIKmsProvider:
    """Create a KMS client for a vault management endpoint.

    Args:
        provider_spec: Provider CRD spec holding credentials
        provider_meta: Provider metadata
        management_endpoint: Vault management endpoint URL
        operator_config: Operator configuration

    Returns:
        Configured OCIKmsProvider

    Raises:
        ValueError: If the endpoint or credentials are missing
    """
    if not management_endpoint:
        raise ValueError("management endpoint missing")

    oci_config = create_oci_config_from_spec(provider_spec, provider_meta)
    return OCIKmsProvider(
        oci_config,
        management_endpoint,
        retry_mutating_calls=operator_config.retry_mutating_calls,
    )
