"""A one-time event that may occur in the future."""

from __future__ import annotations

import threading


class Event:
    """An event that fires at most once and can be awaited by many threads."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()

    def fire(self) -> bool:
        """Fire the event; return True only for the call that fired it."""
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the event fires or the timeout passes; return whether it fired."""
        return self._event.wait(timeout)

    def has_fired(self) -> bool:
        """Return True if the event has been fired."""
        return self._event.is_set()