"""Delegation token lifecycle.

The :class:`TokenManager` acquires and renews delegation tokens and can run
a background thread that keeps the current token alive for the lifetime of
the client:

1. renew the token and learn its expiration,
2. sleep until 30 minutes (minus up to 10 minutes of jitter) before it,
3. on failure retry after ``attempt * 10`` seconds,
4. after 3 consecutive failures acquire a fresh token instead.

Request-building threads read the token through :attr:`TokenManager.token`
while the refresh thread replaces it; both sides go through one lock.
"""

import logging
import random
import threading
import time
from typing import Callable, Optional

from .constants import (
    TOKEN_RENEW_BACKOFF,
    TOKEN_RENEW_MAX_ATTEMPTS,
    TOKEN_RENEW_MAX_JITTER,
    TOKEN_RENEW_SAFETY_MARGIN,
)
from .exceptions import ConfigurationError, MalformedResponseError, WebHDFSError
from .models import DelegationToken, Operation, OperationRequest, ResponseEnvelope

logger = logging.getLogger(__name__)


def renewal_delay(remaining: float, jitter: Optional[float] = None) -> float:
    """Seconds to wait before the next renewal.

    Args:
        remaining: Seconds until the token expires.
        jitter: Seconds of jitter to subtract. Drawn uniformly from
            ``[0, TOKEN_RENEW_MAX_JITTER]`` when omitted.

    Returns:
        ``remaining - TOKEN_RENEW_SAFETY_MARGIN - jitter``, never negative.
    """
    if jitter is None:
        jitter = random.uniform(0, TOKEN_RENEW_MAX_JITTER)
    return max(0.0, remaining - TOKEN_RENEW_SAFETY_MARGIN - jitter)


class TokenManager:
    """Acquire, renew and keep alive a delegation token.

    Args:
        request: Callable sending an operation request (signed with the
            client's authentication handler) and returning the decoded
            envelope.
        clock: Source of the current POSIX time in seconds.
    """

    def __init__(
        self,
        request: Callable[[OperationRequest], ResponseEnvelope],
        clock: Callable[[], float] = time.time,
    ):
        self._request = request
        self._clock = clock
        self._lock = threading.Lock()
        self._token: Optional[DelegationToken] = None
        self._failures = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def token(self) -> Optional[DelegationToken]:
        with self._lock:
            return self._token

    @token.setter
    def token(self, token: Optional[DelegationToken]) -> None:
        with self._lock:
            self._token = token

    @property
    def failures(self) -> int:
        """Consecutive failed refresh attempts."""
        return self._failures

    def current_value(self) -> Optional[str]:
        """Return the token value to attach to requests, if it is still valid."""
        token = self.token
        if token is None or token.is_expired(self._clock()):
            return None
        return token.value

    def acquire(self, renewer: Optional[str] = None) -> DelegationToken:
        """Request a new delegation token.

        Args:
            renewer: Optional user allowed to renew the token.

        Raises:
            MalformedResponseError: If the response carries no token.
        """
        envelope = self._request(OperationRequest(op=Operation.GETDELEGATIONTOKEN, user_name=renewer))
        if envelope.token is None:
            raise MalformedResponseError("GETDELEGATIONTOKEN response has no Token")
        return DelegationToken(value=envelope.token.url_string)

    def renew(self, token: Optional[DelegationToken] = None) -> int:
        """Renew a delegation token, the current one by default.

        When the renewed token is the current one, its expiration is updated.

        Returns:
            The new expiration time in milliseconds since the epoch.

        Raises:
            ConfigurationError: If there is no token to renew.
            MalformedResponseError: If the returned expiration is missing or
                not positive.
        """
        token = token or self.token
        if token is None:
            raise ConfigurationError("No delegation token to renew")

        envelope = self._request(OperationRequest(op=Operation.RENEWDELEGATIONTOKEN, delegation=token.value))
        if envelope.long is None or envelope.long <= 0:
            raise MalformedResponseError(f"Invalid token expiration: {envelope.long}")

        with self._lock:
            if self._token is not None and self._token.value == token.value:
                self._token = DelegationToken(value=token.value, expires_at=envelope.long / 1000)
        return envelope.long

    def refresh_once(self) -> float:
        """Run one refresh attempt.

        Returns:
            Seconds to wait before the next attempt.
        """
        if self._failures >= TOKEN_RENEW_MAX_ATTEMPTS:
            try:
                self.token = self.acquire()
            except WebHDFSError:
                logger.error("Failed to acquire a new delegation token", exc_info=True)
                return TOKEN_RENEW_BACKOFF * TOKEN_RENEW_MAX_ATTEMPTS
            logger.info("Acquired a new delegation token after %d failed renewals", self._failures)
            self._failures = 0
            return 0.0

        try:
            expiration = self.renew()
            remaining = expiration / 1000 - self._clock()
            if remaining <= 0:
                raise MalformedResponseError(f"Renewed token expired at {expiration}")
        except WebHDFSError as e:
            self._failures += 1
            backoff = self._failures * TOKEN_RENEW_BACKOFF
            logger.warning(
                "Delegation token renewal failed (attempt %d/%d), retrying in %.0fs: %s",
                self._failures,
                TOKEN_RENEW_MAX_ATTEMPTS,
                backoff,
                e,
            )
            return backoff

        self._failures = 0
        delay = renewal_delay(remaining)
        logger.debug("Delegation token renewed, next renewal in %.0fs", delay)
        return delay

    # Background refresh

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background refresh thread if it is not running."""
        if self.running:
            return
        # Each thread owns its event so a thread outliving stop() never sees it cleared
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop,), name="webhdfs-token-refresh", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the background refresh thread and wait for it to exit.

        A thread still busy with a request when ``timeout`` elapses exits as
        soon as that request returns.
        """
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self, stop: threading.Event) -> None:
        while not stop.is_set():
            try:
                delay = self.refresh_once()
            except Exception:
                logger.exception("Unexpected error while refreshing the delegation token")
                delay = TOKEN_RENEW_BACKOFF
            if stop.wait(delay):
                break
