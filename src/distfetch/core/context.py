"""Cancellation and deadline carrier passed to every fetch."""

from __future__ import annotations

import threading
import time
from typing import Optional

from .model import FetchCancelledError


class FetchContext:
    """Cancellable operation context with an optional deadline.

    Children inherit cancellation from their parent and never outlive the
    parent's deadline. Backends call ``check()`` before doing I/O and use
    ``remaining()`` as their I/O timeout.
    """

    def __init__(self, timeout: Optional[float] = None, parent: Optional["FetchContext"] = None):
        self._parent = parent
        self._event = threading.Event()
        deadline = time.monotonic() + timeout if timeout is not None else None
        if parent is not None and parent.deadline is not None:
            if deadline is None or parent.deadline < deadline:
                deadline = parent.deadline
        self._deadline = deadline

    @classmethod
    def background(cls) -> "FetchContext":
        """Return a context that is never cancelled and has no deadline."""
        return cls()

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._parent is not None and self._parent.cancelled:
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def expired(self) -> bool:
        """True when the deadline, rather than ``cancel()``, ended the context."""
        return self._deadline is not None and time.monotonic() >= self._deadline

    def cancel(self) -> None:
        self._event.set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise FetchCancelledError if the context is no longer live."""
        if not self.cancelled:
            return
        if self.expired:
            raise FetchCancelledError("context deadline exceeded")
        raise FetchCancelledError("context cancelled")

    def with_timeout(self, seconds: float) -> "FetchContext":
        return FetchContext(timeout=seconds, parent=self)

    def with_cancel(self) -> "FetchContext":
        return FetchContext(parent=self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Leaving the block releases anything still waiting on this context
        self.cancel()
