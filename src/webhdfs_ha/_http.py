"""HTTP session management for the WebHDFS HA client.

Each client owns one ``requests.Session`` whose connection pool is shared by
every thread using the client, including the token refresh thread.
"""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from requests.auth import AuthBase

from ._headers import build_headers
from .constants import DEFAULT_POOL_CONNECTIONS, DEFAULT_POOL_MAXSIZE, DEFAULT_REQUEST_TIMEOUT
from .exceptions import TransportError

logger = logging.getLogger(__name__)


def build_session(
    pool_connections: int = DEFAULT_POOL_CONNECTIONS,
    pool_maxsize: int = DEFAULT_POOL_MAXSIZE,
) -> requests.Session:
    """Create a requests session with a sized connection pool.

    Args:
        pool_connections: Number of per-host pools to cache.
        pool_maxsize: Maximum connections kept per host.

    Returns:
        A new requests.Session with default headers set.
    """
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_connections, pool_maxsize=pool_maxsize)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update(build_headers())
    return session


def send(
    session: requests.Session,
    method: str,
    url: str,
    *,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
    auth: Optional[AuthBase] = None,
    stream: bool = False,
) -> requests.Response:
    """Send a single request without retrying.

    Args:
        session: Session to send the request with.
        method: HTTP method (GET, PUT, ...).
        url: Fully built request URL.
        timeout: Connect/read timeout in seconds.
        auth: Optional request signer, e.g. HTTPKerberosAuth.
        stream: Leave the body unread so it can be streamed to the caller.

    Returns:
        The response, whatever its status code.

    Raises:
        TransportError: If the request could not be completed.
    """
    logger.debug("%s %s", method, url)
    try:
        response = session.request(method=method, url=url, auth=auth, timeout=timeout, stream=stream)
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Request failed: {e}") from e
    logger.debug("Got response %d for %s %s", response.status_code, method, url)
    return response
