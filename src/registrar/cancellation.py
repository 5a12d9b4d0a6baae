"""Cooperative cancellation for units of work."""

from __future__ import annotations

import threading
import time

from registrar.exceptions import OperationCancelledError


class CancellationToken:
    """Signal checked by the record store before each I/O call.

    Cancelling is thread-safe; any thread may call ``cancel()`` while another
    thread runs the operation that holds the token.
    """

    def __init__(self, deadline: float | None = None) -> None:
        """Initialize the token.

        Args:
            deadline: Optional ``time.monotonic()`` value after which the
                token counts as cancelled.
        """
        self._event = threading.Event()
        self._deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> CancellationToken:
        """Create a token that cancels itself after ``seconds``."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested or the deadline passed."""
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if cancelled."""
        if self.cancelled:
            raise OperationCancelledError("Operation cancelled")
