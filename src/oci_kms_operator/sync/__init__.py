"""Lifecycle reconciliation of remote resources."""

from .data import ResourceData
from .driver import create_resource, delete_resource, read_resource
from .identifiers import decode_key_version_id, encode_key_version_id, parse_import_id
from .key_version import KeyVersionSync
from .waiter import wait_for_state

__all__ = [
    "ResourceData",
    "KeyVersionSync",
    "create_resource",
    "read_resource",
    "delete_resource",
    "encode_key_version_id",
    "decode_key_version_id",
    "parse_import_id",
    "wait_for_state",
]
