"""Base client functionality: endpoint and identity configuration."""

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union

from ._headers import get_user_name_to_send
from .constants import DEFAULT_REQUEST_TIMEOUT, DEFAULT_SCHEME
from .exceptions import ConfigurationError
from .models import OperationRequest, ResponseEnvelope


def parse_namenodes(namenodes: Union[str, Sequence[str]]) -> List[str]:
    """Normalize NameNode addresses.

    Accepts a sequence or a comma/semicolon separated string, drops blanks
    and surrounding whitespace, and keeps the given order.
    """
    items = re.split(r"[,;]", namenodes) if isinstance(namenodes, str) else list(namenodes)
    return [item.strip() for item in items if item and item.strip()]


class BaseClient(ABC):
    """Base class holding the connection settings of a client."""

    def __init__(
        self,
        namenodes: Union[str, Sequence[str]],
        user_name: Optional[str] = None,
        scheme: str = DEFAULT_SCHEME,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize base client.

        Args:
            namenodes: NameNode HTTP addresses ("host:port"), in priority order.
            user_name: Optional user for simple authentication. Defaults to the
                HADOOP_USER_NAME environment variable.
            scheme: "http" or "https".
            timeout: Request timeout in seconds. Defaults to 30.0.

        Raises:
            ConfigurationError: If no NameNode is given or the scheme is unknown.
        """
        self.namenodes = parse_namenodes(namenodes)
        if not self.namenodes:
            raise ConfigurationError("At least one NameNode address is required")
        if scheme not in ("http", "https"):
            raise ConfigurationError(f"Unsupported scheme: {scheme}")
        self.scheme = scheme
        self.timeout = timeout
        self.user_name = get_user_name_to_send(user_name)

    @abstractmethod
    def _request(self, request: OperationRequest, signed: bool = False) -> ResponseEnvelope:
        """Send an operation request and decode the response.

        Args:
            request: The operation to perform.
            signed: Sign the request with the authentication handler.

        Returns:
            Decoded response envelope
        """
        pass
