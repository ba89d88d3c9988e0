"""Active NameNode resolution for HA deployments.

Endpoints are probed one at a time, in configured order, through the
NameNode JMX HA state query. The first endpoint reporting ``active`` wins.
Nothing is cached between calls: with more than one endpoint configured,
every operation pays for a fresh probe round so it always targets the
NameNode observed active most recently. A single configured endpoint is
assumed not to be HA and is never probed.
"""

import logging
import threading
from typing import Optional, Sequence, Tuple

import requests

from ._http import send
from .constants import DEFAULT_REQUEST_TIMEOUT, DEFAULT_SCHEME, JMX_HA_STATE_PATH
from .exceptions import ConfigurationError, TransportError, UnavailableError
from .models import Endpoint, HAState
from .response import parse_ha_state

logger = logging.getLogger(__name__)


class NameNodeResolver:
    """Select the active NameNode among the configured endpoints.

    Concurrent resolutions are not serialized; each writes its result to
    ``current`` under a lock, so the last finished resolution wins.
    """

    def __init__(
        self,
        addresses: Sequence[str],
        session: requests.Session,
        scheme: str = DEFAULT_SCHEME,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        if not addresses:
            raise ConfigurationError("At least one NameNode address is required")
        self._endpoints: Tuple[Endpoint, ...] = tuple(Endpoint(address=a) for a in addresses)
        self._session = session
        self.scheme = scheme
        self.timeout = timeout
        self._lock = threading.Lock()
        self._current: Optional[Endpoint] = self._endpoints[0] if len(self._endpoints) == 1 else None

    @property
    def endpoints(self) -> Tuple[Endpoint, ...]:
        return self._endpoints

    @property
    def current(self) -> Optional[Endpoint]:
        """The endpoint selected by the latest resolution, if any."""
        with self._lock:
            return self._current

    def probe(self, endpoint: Endpoint) -> HAState:
        """Query the HA state of a single endpoint.

        Raises:
            TransportError: If the endpoint cannot be reached or its answer
                cannot be decoded.
        """
        url = f"{self.scheme}://{endpoint.address}{JMX_HA_STATE_PATH}"
        response = send(self._session, "GET", url, timeout=self.timeout)
        try:
            state = parse_ha_state(response.content)
        finally:
            response.close()

        if state == HAState.ACTIVE.value:
            return HAState.ACTIVE
        if state == HAState.STANDBY.value:
            return HAState.STANDBY
        return HAState.UNKNOWN

    def resolve(self) -> Endpoint:
        """Return the active endpoint.

        Raises:
            UnavailableError: If no endpoint reports itself active. ``current``
                is cleared in that case.
        """
        if len(self._endpoints) == 1:
            return self._endpoints[0]

        selected: Optional[Endpoint] = None
        for endpoint in self._endpoints:
            try:
                state = self.probe(endpoint)
            except TransportError as e:
                logger.debug("HA state probe of %s failed: %s", endpoint.address, e)
                continue
            if state is HAState.ACTIVE:
                selected = endpoint.model_copy(update={"state": state})
                break
            logger.debug("NameNode %s is %s", endpoint.address, state.value)

        with self._lock:
            self._current = selected

        if selected is None:
            addresses = ", ".join(e.address for e in self._endpoints)
            logger.warning("No active NameNode among %s", addresses)
            raise UnavailableError(f"No active NameNode among: {addresses}")

        return selected
