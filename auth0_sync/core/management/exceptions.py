"""Management API exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class ManagementError(Exception):
    """Base exception for all management API operations."""
    pass


class ConfigurationError(ManagementError):
    """No usable credential or domain was supplied."""
    pass


class InvalidStateError(ManagementError):
    """Operation called on a resource in the wrong lifecycle state."""
    pass


class TransportError(ManagementError):
    """Network, TLS or I/O failure talking to the management API.

    Attributes:
        cause: Underlying exception raised by the transport
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ManagementAPIError(ManagementError):
    """Non-2xx response where success was required.

    Attributes:
        status_code: HTTP status code
        body: Raw response body, verbatim
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, body: str, endpoint: str):
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {body}")


class AuthRejected(ManagementAPIError):
    """Token endpoint refused the client credentials exchange."""
    pass


class CreateRejected(ManagementAPIError):
    """Create did not answer 201."""
    pass


class ReadError(ManagementAPIError):
    """Read failed with a status that does not mean absence."""
    pass


class UpdateRejected(ManagementAPIError):
    """Update did not answer 200."""
    pass


class DeleteRejected(ManagementAPIError):
    """Delete did not answer 204."""
    pass


class DecodeError(ManagementError):
    """2xx response body could not be parsed into the expected shape.

    Attributes:
        body: Raw response body
    """

    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(message)


class DuplicateResourceError(ManagementError):
    """Grant lookup matched more than one record for a client and audience."""

    def __init__(self, matches: int, body: str):
        self.matches = matches
        self.body = body
        super().__init__(
            f"Multiple grants found for the same client and audience ({matches}): {body}"
        )
