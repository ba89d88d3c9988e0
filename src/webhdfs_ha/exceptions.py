"""Custom exceptions for the WebHDFS HA client.

Every public operation either returns a typed result or raises exactly one
of these, so callers can tell network failures, protocol violations and
server-side application errors apart.
"""

from typing import Optional

import requests

from .models import RemoteException


class WebHDFSError(Exception):
    """Base exception for all WebHDFS client errors."""

    pass


class ConfigurationError(WebHDFSError, ValueError):
    """Raised for invalid client settings or invalid operation arguments."""

    pass


class UnavailableError(WebHDFSError):
    """Raised when none of the configured NameNodes reports itself active."""

    pass


class UnsupportedOperationError(WebHDFSError):
    """Raised when an operation kind has no request template."""

    pass


class MalformedResponseError(WebHDFSError):
    """Raised when a response decodes but lacks an expected field.

    The transport succeeded, so this is a protocol violation rather than a
    network error.
    """

    pass


class TransportError(WebHDFSError, OSError):
    """Network or HTTP layer failure with response context for debugging.

    Attributes:
        status_code: The HTTP status code from the response, if any.
        response: The full requests Response object, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        response: Optional[requests.Response] = None,
    ):
        """Initialize the transport error with response context.

        Args:
            message: Human-readable error message.
            response: Optional requests Response object with error details.
        """
        self.response = response
        self.status_code: Optional[int] = None

        if response is not None:
            self.status_code = response.status_code
            message = f"{message} (HTTP {self.status_code})"

        super().__init__(message)


class ResponseDecodeError(TransportError):
    """Raised when a response payload cannot be decoded."""

    pass


class RemoteError(WebHDFSError):
    """Application failure reported by the server inside a response.

    Attributes:
        remote: The decoded RemoteException record.
        exception: Short exception name, e.g. ``FileNotFoundException``.
        java_class_name: Fully qualified Java class of the exception.
        status_code: HTTP status code of the carrying response, if known.

    Example:
        >>> try:
        ...     client.list_status("/missing")
        ... except RemoteError as e:
        ...     if e.exception == "FileNotFoundException":
        ...         ...
    """

    def __init__(self, remote: RemoteException, *, status_code: Optional[int] = None):
        self.remote = remote
        self.exception = remote.exception
        self.java_class_name = remote.java_class_name
        self.message = remote.message
        self.status_code = status_code
        super().__init__(f"RemoteException: {remote.exception} [{remote.java_class_name}] {remote.message}")
