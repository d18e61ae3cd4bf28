"""Session expiry coordination for browser-side calls.

The coordinator is a two-state machine:

- ``NORMAL``: calls go to the network.
- ``AWAITING_REAUTH``: entered when a refresh fails. The re-authentication
  prompt is open and every call is queued as a ``PendingRequest`` instead of
  being sent.

A successful sign-in closes the prompt and replays the queue in enqueue
order; ``clear_pending_requests`` rejects it instead. Either way the
coordinator returns to ``NORMAL`` with an empty queue.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import httpx
from structlog import get_logger

from src.client.prompt import ReauthPrompt
from src.core.exceptions import SessionRequestsCancelledError

logger = get_logger(__name__)


class SessionStatus(str, Enum):
    NORMAL = "normal"
    AWAITING_REAUTH = "awaiting_reauth"


@dataclass
class PendingRequest:
    """A call held back until the user signs in again.

    ``future`` is what the original caller awaits; it is settled exactly once,
    by a replay or by cancellation.
    """

    method: str
    url: str
    options: Dict[str, Any] = field(default_factory=dict)
    future: Optional[asyncio.Future] = None


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the coordinator.

    ``pending_requests`` is non-empty only while ``is_modal_open`` is true.
    """

    is_modal_open: bool
    pending_requests: Tuple[PendingRequest, ...] = ()


Replay = Callable[[PendingRequest], Awaitable[httpx.Response]]


class SessionExpiryCoordinator:
    """Owns the pending-request queue and the re-authentication prompt.

    No other component mutates the queue. One coordinator lives for the whole
    client session.
    """

    def __init__(self, prompt: Optional[ReauthPrompt] = None):
        self.prompt = prompt or ReauthPrompt()
        self.prompt.bind(self)
        self.status = SessionStatus.NORMAL
        self._pending: List[PendingRequest] = []

    @property
    def is_awaiting_reauth(self) -> bool:
        return self.status is SessionStatus.AWAITING_REAUTH

    @property
    def state(self) -> SessionState:
        return SessionState(is_modal_open=self.prompt.is_open, pending_requests=tuple(self._pending))

    def session_expired(self) -> None:
        """NORMAL -> AWAITING_REAUTH. Opens the prompt; a no-op if already waiting."""
        if self.is_awaiting_reauth:
            return
        self.status = SessionStatus.AWAITING_REAUTH
        logger.info("session_expired_awaiting_reauth")
        self.prompt.open()

    def enqueue(self, method: str, url: str, options: Optional[Dict[str, Any]] = None) -> asyncio.Future:
        """Queues a call for replay after re-authentication.

        Entering the queue always means the prompt is open, so a call that
        arrives in ``NORMAL`` triggers the transition first.

        Returns:
            The future the caller awaits for the replayed response.
        """
        self.session_expired()
        future = asyncio.get_running_loop().create_future()
        self._pending.append(PendingRequest(method, url, dict(options or {}), future))
        logger.debug("request_queued", method=method, url=url, queued=len(self._pending))
        return future

    async def flush(self, replay: Replay) -> int:
        """AWAITING_REAUTH -> NORMAL after a successful sign-in.

        The queue is detached and the prompt closed before replaying, then
        each entry is replayed one after the other in enqueue order and its
        own future settled with that replay's outcome. If the flush is
        interrupted, entries not yet settled are rejected with
        ``SessionRequestsCancelledError``.

        Returns:
            The number of replayed requests.
        """
        pending, self._pending = self._pending, []
        self.status = SessionStatus.NORMAL
        self.prompt.close()

        replayed = 0
        try:
            for entry in pending:
                if entry.future.done():
                    continue
                try:
                    response = await replay(entry)
                except Exception as exc:
                    logger.warning("pending_request_replay_failed", method=entry.method, url=entry.url, error=str(exc))
                    if not entry.future.done():
                        entry.future.set_exception(exc)
                else:
                    logger.debug("pending_request_replayed", method=entry.method, url=entry.url, status=response.status_code)
                    if not entry.future.done():
                        entry.future.set_result(response)
                replayed += 1
        finally:
            # An interrupted flush still settles every detached entry.
            abandoned = [entry for entry in pending if not entry.future.done()]
            for entry in abandoned:
                entry.future.set_exception(SessionRequestsCancelledError())
            if abandoned:
                logger.warning("pending_requests_abandoned", count=len(abandoned))

        logger.info("pending_requests_flushed", count=replayed)
        return replayed

    def clear_pending_requests(self) -> int:
        """Rejects every queued request without any network call.

        Returns to ``NORMAL`` and closes the prompt.

        Returns:
            The number of rejected requests.
        """
        pending, self._pending = self._pending, []
        self.status = SessionStatus.NORMAL
        self.prompt.close()

        for entry in pending:
            if not entry.future.done():
                entry.future.set_exception(SessionRequestsCancelledError())

        logger.info("pending_requests_cancelled", count=len(pending))
        return len(pending)
