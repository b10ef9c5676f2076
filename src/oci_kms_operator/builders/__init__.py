"""Builders for provider clients."""

from .provider import create_kms_provider, create_oci_config_from_spec

__all__ = ["create_kms_provider", "create_oci_config_from_spec"]
