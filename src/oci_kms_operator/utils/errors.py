"""Error types and sanitization utilities to prevent information leakage."""

import re
from typing import Any


class KeyVersionError(Exception):
    """Base class for key version reconciliation errors."""


class MalformedIdentifierError(KeyVersionError):
    """An identifier does not match its expected grammar."""


class ImportFormatError(MalformedIdentifierError):
    """An import identifier does not match the import format."""


class InvalidTimestampError(KeyVersionError):
    """A timestamp supplied by the user could not be parsed."""


class ResourceNotFoundError(KeyVersionError):
    """The remote resource does not exist."""


class UnexpectedStateError(KeyVersionError):
    """The remote resource reached a state outside the expected protocol."""

    def __init__(self, state: str | None, pending: Any, target: Any):
        self.state = state
        self.pending = sorted(pending)
        self.target = sorted(target)
        super().__init__(
            f"unexpected state '{state}', wanted target {self.target} (pending {self.pending})"
        )


class WaitTimeoutError(KeyVersionError):
    """The deadline elapsed while the remote resource was still pending."""

    def __init__(self, last_state: str | None, timeout: float, target: Any):
        self.last_state = last_state
        self.timeout = timeout
        self.target = sorted(target)
        super().__init__(
            f"timeout after {timeout:g}s while waiting for state to become {self.target} "
            f"(last state: '{last_state}')"
        )


class PollCancelledError(KeyVersionError):
    """Polling was interrupted by a cancellation request."""


class RemoteServiceError(KeyVersionError):
    """Any other error returned by the remote key management service."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
        request_id: str | None = None,
    ):
        self.status = status
        self.code = code
        self.request_id = request_id
        super().__init__(message)


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"(ocid1\.tenancy\.[a-z0-9]+\.[a-z0-9\-]*\.)[a-z0-9]+",
    r"(ocid1\.user\.[a-z0-9]+\.[a-z0-9\-]*\.)[a-z0-9]+",
    r"(fingerprint[:\s]+)(?:[0-9a-f]{2}:){15}[0-9a-f]{2}",
    r"(provider[_\s]?name[:\s]+)[a-zA-Z0-9\-_]+",
    r"(namespace[:\s]+)[a-zA-Z0-9\-_]+",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "private_key",
    "key_content",
    "key_file",
    "pass_phrase",
    "passphrase",
    "password",
    "secret",
    "credentials",
    "token",
}

_PEM_BLOCK = re.compile(
    r"-----BEGIN [A-Z ]*PRIVATE KEY-----.*?-----END [A-Z ]*PRIVATE KEY-----",
    flags=re.DOTALL,
)


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = _PEM_BLOCK.sub("[REDACTED]", message)

    # Replace sensitive patterns
    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1[REDACTED]", sanitized, flags=re.IGNORECASE)

    # Redact common sensitive field names
    for field in SENSITIVE_FIELDS:
        # Replace field: value patterns
        sanitized = re.sub(
            rf"{field}[:=\s]+([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    error_msg = str(error)
    return sanitize_error_message(error_msg)
