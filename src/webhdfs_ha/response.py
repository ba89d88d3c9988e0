"""Interpretation of WebHDFS JSON responses.

A payload decodes into a :class:`ResponseEnvelope`. A populated
``RemoteException`` always turns into a :class:`RemoteError`, no matter what
else the envelope carries. Which variant a caller needs is the caller's
business: a missing variant is reported by the caller as
:class:`MalformedResponseError`.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from .exceptions import RemoteError, ResponseDecodeError
from .models import JmxResponse, RemoteException, RemoteExceptionEnvelope, ResponseEnvelope

logger = logging.getLogger(__name__)


def _remote_exception_of(payload: bytes) -> Optional[RemoteException]:
    """Decode only the RemoteException of a payload whose other fields are invalid."""
    try:
        return RemoteExceptionEnvelope.model_validate_json(payload).remote_exception
    except ValidationError:
        return None


def parse(payload: bytes, status_code: Optional[int] = None) -> ResponseEnvelope:
    """Decode a WebHDFS response payload.

    Args:
        payload: Raw response body.
        status_code: HTTP status of the carrying response, attached to any
            RemoteError raised.

    Returns:
        The decoded envelope.

    Raises:
        ResponseDecodeError: If the payload is not a valid envelope.
        RemoteError: If the envelope carries a RemoteException.
    """
    try:
        envelope = ResponseEnvelope.model_validate_json(payload)
    except ValidationError as e:
        remote = _remote_exception_of(payload)
        if remote is not None:
            logger.debug("Server reported %s alongside an undecodable body", remote.exception)
            raise RemoteError(remote, status_code=status_code) from e
        raise ResponseDecodeError(f"Invalid WebHDFS response: {e.error_count()} decode error(s)") from e

    if envelope.remote_exception is not None:
        logger.debug("Server reported %s", envelope.remote_exception.exception)
        raise RemoteError(envelope.remote_exception, status_code=status_code)

    return envelope


def parse_ha_state(payload: bytes) -> Optional[str]:
    """Extract the ``tag.HAState`` value of a JMX HA state query.

    Returns:
        The state of the first bean, or None when there are no beans.

    Raises:
        ResponseDecodeError: If the payload is not valid JMX JSON.
    """
    try:
        jmx = JmxResponse.model_validate_json(payload)
    except ValidationError as e:
        raise ResponseDecodeError("Invalid JMX response") from e

    if not jmx.beans:
        return None
    return jmx.beans[0].ha_state
