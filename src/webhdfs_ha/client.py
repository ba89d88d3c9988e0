"""Synchronous client for the WebHDFS REST API."""

import logging
from functools import partial
from typing import IO, List, Optional, Sequence, Union

import requests
from pydantic import ValidationError
from requests.auth import AuthBase
from requests_kerberos import OPTIONAL, HTTPKerberosAuth

from ._base import BaseClient
from ._http import build_session, send
from .constants import DEFAULT_POOL_CONNECTIONS, DEFAULT_POOL_MAXSIZE, DEFAULT_REQUEST_TIMEOUT, DEFAULT_SCHEME
from .exceptions import ConfigurationError, MalformedResponseError, ResponseDecodeError, TransportError, WebHDFSError
from .models import (
    ContentSummary,
    DelegationToken,
    Endpoint,
    FileChecksum,
    FileStatus,
    Operation,
    OperationRequest,
    ResponseEnvelope,
)
from .request import RequestBuilder
from .resolver import NameNodeResolver
from .response import parse
from .tokens import TokenManager

logger = logging.getLogger(__name__)


class WebHDFSClient(BaseClient):
    """Synchronous WebHDFS client with NameNode HA support.

    With more than one NameNode configured, the active one is looked up
    through JMX before every operation. With an authentication handler
    (e.g. Kerberos), data requests carry a delegation token instead of
    being signed; ``auto_token=True`` acquires one at construction and keeps
    it renewed in a background thread until :meth:`close`.

    Examples:
        >>> from webhdfs_ha import WebHDFSClient
        >>> with WebHDFSClient(["nn1:50070", "nn2:50070"], user_name="hdfs") as client:
        ...     for status in client.list_status("/user/hdfs"):
        ...         print(status.path_suffix)
    """

    def __init__(
        self,
        namenodes: Union[str, Sequence[str]],
        user_name: Optional[str] = None,
        auth: Optional[AuthBase] = None,
        kerberos: bool = False,
        auto_token: bool = False,
        scheme: str = DEFAULT_SCHEME,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
        pool_connections: int = DEFAULT_POOL_CONNECTIONS,
        pool_maxsize: int = DEFAULT_POOL_MAXSIZE,
    ):
        """Initialize the client.

        Args:
            namenodes: NameNode HTTP addresses ("host:port") in priority order,
                as a sequence or a comma separated string.
            user_name: User for simple authentication. Ignored when ``auth`` is set.
            auth: Request signer used for token operations. Enables
                delegation-token authentication.
            kerberos: Use SPNEGO (HTTPKerberosAuth) when ``auth`` is not given.
            auto_token: Acquire a delegation token now and renew it in the
                background. Requires ``auth`` or ``kerberos``.
            scheme: "http" or "https".
            timeout: Request timeout in seconds. Defaults to 30.0.
            session: Optional requests session to use. The caller keeps
                ownership and must close it.
            pool_connections: Per-host pools of the internal session.
            pool_maxsize: Connections per host of the internal session.

        Raises:
            ConfigurationError: If no NameNode is given.
            UnavailableError: If none of several NameNodes is active.
        """
        super().__init__(namenodes, user_name, scheme, timeout)
        if kerberos and auth is None:
            auth = HTTPKerberosAuth(mutual_authentication=OPTIONAL)
        self.auth = auth
        self.auto_token = auto_token and auth is not None

        self._owns_session = session is None
        self._session = session or build_session(pool_connections, pool_maxsize)
        self._resolver = NameNodeResolver(self.namenodes, self._session, self.scheme, self.timeout)
        self._tokens = TokenManager(partial(self._request, signed=True))
        self._builder = RequestBuilder(
            self._resolver,
            token_source=self._tokens.current_value if self.auth is not None else None,
            user_name=self.user_name,
        )

        try:
            if len(self.namenodes) > 1:
                self._resolver.resolve()
            if self.auto_token:
                self._tokens.token = self._tokens.acquire()
                self._tokens.start()
        except WebHDFSError:
            self.close()
            raise

    @property
    def active_namenode(self) -> Optional[Endpoint]:
        """The NameNode selected by the latest resolution."""
        return self._resolver.current

    @property
    def delegation_token(self) -> Optional[DelegationToken]:
        """The delegation token currently attached to requests."""
        return self._tokens.token

    def _operation(self, op: Operation, path: str, **fields: int) -> OperationRequest:
        """Build an operation request from caller arguments.

        Raises:
            ConfigurationError: If an argument is invalid, e.g. a negative offset.
        """
        try:
            return OperationRequest(op=op, path=path, **fields)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {op.value} arguments: {e.error_count()} error(s)") from e

    def _raise_for_status(self, response: requests.Response, message: str) -> None:
        """Raise the most specific error for a failed response.

        Raises:
            RemoteError: If the body carries a RemoteException.
            TransportError: Otherwise.
        """
        try:
            parse(response.content, response.status_code)
        except ResponseDecodeError:
            pass
        raise TransportError(message, response=response)

    def _request(self, request: OperationRequest, signed: bool = False) -> ResponseEnvelope:
        """Send an operation request and decode the JSON response.

        Raises:
            UnsupportedOperationError: If the operation has no template.
            UnavailableError: If no active NameNode can be found.
            RemoteError: If the server reports an exception.
            TransportError: For network, HTTP status and decode failures.
        """
        target = self._builder.build(request)
        response = send(
            self._session,
            target.method,
            target.url,
            timeout=self.timeout,
            auth=self.auth if signed else None,
        )
        try:
            if not response.ok:
                self._raise_for_status(response, f"{request.op.value} failed")
            return parse(response.content, response.status_code)
        finally:
            response.close()

    # File and directory operations

    def open(self, path: str, offset: int = 0, length: int = 0, buffer_size: int = 0) -> IO[bytes]:
        """Open a file for streaming reads.

        Args:
            path: Absolute file path.
            offset: Starting byte position, 0 for the beginning.
            length: Number of bytes to read, 0 for the rest of the file.
            buffer_size: Server side buffer size, 0 for the default.

        Returns:
            The live response body. The caller owns it and must close it.

        Raises:
            ConfigurationError: If an offset, length or buffer size is negative.
            RemoteError: If the server reports an exception.
            TransportError: If the request fails or returns an error status.
        """
        target = self._builder.build(
            self._operation(Operation.OPEN, path, offset=offset, length=length, buffer_size=buffer_size)
        )
        response = send(self._session, target.method, target.url, timeout=self.timeout, stream=True)
        if not response.ok:
            try:
                self._raise_for_status(response, f"Open path({path}) failed")
            finally:
                response.close()
        response.raw.decode_content = True
        return response.raw

    def list_status(self, path: str) -> List[FileStatus]:
        """List the statuses of the entries of a directory.

        Args:
            path: Absolute directory path.

        Returns:
            List of FileStatus objects, empty for an empty directory.

        Raises:
            MalformedResponseError: If the response has no FileStatuses container.
        """
        envelope = self._request(self._operation(Operation.LISTSTATUS, path))
        if envelope.file_statuses is None:
            raise MalformedResponseError("LISTSTATUS response has no FileStatuses")
        return envelope.file_statuses.file_status

    def get_file_status(self, path: str) -> FileStatus:
        """Get the status of a file or directory."""
        envelope = self._request(self._operation(Operation.GETFILESTATUS, path))
        if envelope.file_status is None:
            raise MalformedResponseError("GETFILESTATUS response has no FileStatus")
        return envelope.file_status

    def get_file_checksum(self, path: str) -> FileChecksum:
        """Get the checksum of a file."""
        envelope = self._request(self._operation(Operation.GETFILECHECKSUM, path))
        if envelope.file_checksum is None:
            raise MalformedResponseError("GETFILECHECKSUM response has no FileChecksum")
        return envelope.file_checksum

    def get_content_summary(self, path: str) -> ContentSummary:
        """Get the content summary of a directory."""
        envelope = self._request(self._operation(Operation.GETCONTENTSUMMARY, path))
        if envelope.content_summary is None:
            raise MalformedResponseError("GETCONTENTSUMMARY response has no ContentSummary")
        return envelope.content_summary

    # Delegation token operations

    def get_delegation_token(self, renewer: Optional[str] = None) -> DelegationToken:
        """Get a new delegation token.

        With token-based authentication the new token also becomes the one
        attached to subsequent requests.

        Args:
            renewer: Optional user allowed to renew the token.

        Raises:
            MalformedResponseError: If the response carries no token.
        """
        token = self._tokens.acquire(renewer)
        if self.auth is not None:
            self._tokens.token = token
        return token

    def renew_delegation_token(self, token: Union[str, DelegationToken, None] = None) -> int:
        """Renew a delegation token, the current one by default.

        Returns:
            The new expiration time in milliseconds since the epoch.

        Raises:
            MalformedResponseError: If the returned expiration is not positive.
        """
        if isinstance(token, str):
            token = DelegationToken(value=token)
        return self._tokens.renew(token)

    def close(self) -> None:
        """Stop the token refresh thread and release the session."""
        self._tokens.stop()
        if self._owns_session:
            self._session.close()

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close client on exit."""
        self.close()
