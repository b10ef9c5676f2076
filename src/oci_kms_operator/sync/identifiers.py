"""Composite identifiers for key versions.

A key version is addressed remotely by two server-assigned IDs. Locally it is
stored under a single identifier of the form::

    keys/{keyId}/keyVersions/{keyVersionId}

where each segment is percent-escaped so that reserved characters (including
``/``) survive the round trip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote

from ..utils.errors import ImportFormatError, MalformedIdentifierError

KEYS_LABEL = "keys"
KEY_VERSIONS_LABEL = "keyVersions"

IMPORT_ID_FORMAT = "managementEndpoint/{managementEndpoint}/keys/{keyId}/keyVersions/{keyVersionId}"

# Characters left unescaped in a path segment, besides letters, digits and "_.-~"
_PATH_SAFE = "$&+,:;=@"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_IMPORT_ID = re.compile(r"^managementEndpoint/(.+)/keys/([^/]+)/keyVersions/([^/]+)$")


@dataclass(frozen=True)
class ImportedKeyVersion:
    """Fields recovered from an import identifier."""

    management_endpoint: str
    key_id: str
    key_version_id: str

    @property
    def composite_id(self) -> str:
        return encode_key_version_id(self.key_id, self.key_version_id)


def _escape(segment: str) -> str:
    return quote(segment, safe=_PATH_SAFE)


def _unescape(segment: str, composite_id: str) -> str:
    if _BAD_ESCAPE.search(segment):
        raise MalformedIdentifierError(f"illegal compositeId {composite_id} encountered")
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedIdentifierError(f"illegal compositeId {composite_id} encountered") from e


def encode_key_version_id(key_id: str, key_version_id: str) -> str:
    """Build the composite identifier for a key version.

    Args:
        key_id: OCID of the owning key
        key_version_id: OCID of the key version

    Returns:
        Composite identifier string
    """
    return f"{KEYS_LABEL}/{_escape(key_id)}/{KEY_VERSIONS_LABEL}/{_escape(key_version_id)}"


def decode_key_version_id(composite_id: str) -> tuple[str, str]:
    """Split a composite identifier back into its key and key version IDs.

    Args:
        composite_id: Identifier produced by encode_key_version_id

    Returns:
        Tuple of (key_id, key_version_id)

    Raises:
        MalformedIdentifierError: If the identifier does not match the grammar
    """
    parts = (composite_id or "").split("/")
    if len(parts) != 4 or parts[0] != KEYS_LABEL or parts[2] != KEY_VERSIONS_LABEL:
        raise MalformedIdentifierError(f"illegal compositeId {composite_id} encountered")

    return _unescape(parts[1], composite_id), _unescape(parts[3], composite_id)


def parse_import_id(import_id: str) -> ImportedKeyVersion:
    """Parse an import identifier.

    Args:
        import_id: String of the form described by IMPORT_ID_FORMAT

    Returns:
        ImportedKeyVersion with endpoint, key and key version IDs

    Raises:
        ImportFormatError: If the identifier does not match the import format
    """
    match = _IMPORT_ID.match(import_id or "")
    if not match:
        raise ImportFormatError(f"id {import_id} should be of format: {IMPORT_ID_FORMAT}")

    endpoint, key_id, key_version_id = match.groups()
    return ImportedKeyVersion(
        management_endpoint=endpoint,
        key_id=key_id,
        key_version_id=key_version_id,
    )
