"""Kubernetes operator reconciling OCI KMS key versions."""

__version__ = "0.1.0"
