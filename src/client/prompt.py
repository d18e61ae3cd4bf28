"""Re-authentication prompt state."""

from typing import TYPE_CHECKING, Callable, Optional

from structlog import get_logger

from src.domain.value_objects.login import LoginOutcome

if TYPE_CHECKING:
    from src.client.coordinator import SessionExpiryCoordinator

logger = get_logger(__name__)


class ReauthPrompt:
    """The "session expired" dialog asking the user to sign in again.

    The prompt only tracks visibility and the last failed attempt; the
    credentials themselves go through ``PortalSession.reauthenticate``.

    Attributes:
        prevent_close: While true, the dialog cannot be dismissed; only a
            successful sign-in or an explicit ``cancel`` closes it.
        on_open: Called each time the prompt opens.
        is_open: Whether the prompt is currently shown.
        error: Message of the last failed sign-in attempt.
        retry_after: Seconds to wait after a rate-limited attempt.
    """

    def __init__(self, prevent_close: bool = True, on_open: Optional[Callable[[], None]] = None):
        self.prevent_close = prevent_close
        self.on_open = on_open
        self.is_open = False
        self.error: Optional[str] = None
        self.retry_after: Optional[int] = None
        self._coordinator: Optional["SessionExpiryCoordinator"] = None

    def bind(self, coordinator: "SessionExpiryCoordinator") -> None:
        self._coordinator = coordinator

    def open(self) -> None:
        if self.is_open:
            return
        self.is_open = True
        self.error = None
        self.retry_after = None
        logger.info("reauth_prompt_opened")
        if self.on_open is not None:
            self.on_open()

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self.error = None
        self.retry_after = None
        logger.info("reauth_prompt_closed")

    def request_close(self) -> bool:
        """Handles a user dismissal (escape key, backdrop click).

        Returns:
            ``False`` when dismissal is refused because of ``prevent_close``.
            Otherwise the pending requests are cancelled and ``True`` returned.
        """
        if self.prevent_close:
            return False
        self.cancel()
        return True

    def cancel(self) -> None:
        """Abandons re-authentication and rejects every queued request."""
        if self._coordinator is not None:
            self._coordinator.clear_pending_requests()
        else:
            self.close()

    def show_failure(self, outcome: LoginOutcome) -> None:
        self.error = outcome.error or "Login failed"
        self.retry_after = outcome.retry_after
