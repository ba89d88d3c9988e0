"""Python client for the WebHDFS REST API with NameNode HA support."""

from .__version__ import __version__
from .client import WebHDFSClient
from .exceptions import (
    ConfigurationError,
    MalformedResponseError,
    RemoteError,
    ResponseDecodeError,
    TransportError,
    UnavailableError,
    UnsupportedOperationError,
    WebHDFSError,
)
from .models import (
    ContentSummary,
    DelegationToken,
    Endpoint,
    FileChecksum,
    FileStatus,
    HAState,
    Operation,
    OperationRequest,
    RemoteException,
)

__all__ = [
    # Clients
    "WebHDFSClient",
    # Models
    "Operation",
    "OperationRequest",
    "Endpoint",
    "HAState",
    "DelegationToken",
    "FileStatus",
    "FileChecksum",
    "ContentSummary",
    "RemoteException",
    # Exceptions
    "WebHDFSError",
    "ConfigurationError",
    "UnavailableError",
    "UnsupportedOperationError",
    "RemoteError",
    "MalformedResponseError",
    "TransportError",
    "ResponseDecodeError",
    # Version
    "__version__",
]
