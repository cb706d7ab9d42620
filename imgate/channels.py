"""A thread-safe registry of live channels keyed by their id."""

from __future__ import annotations

import logging
import threading
from typing import Any

log = logging.getLogger(__name__)


class ChannelMap:
    """Holds channels by id; any object with an ``id`` attribute can be stored."""

    def __init__(self) -> None:
        self._channels: dict[str, Any] = {}
        self._lock = threading.Lock()

    def add(self, channel: Any) -> None:
        """Store a channel under its id; channels without an id are refused."""
        if not channel.id:
            log.error("channel id is required")
            return
        with self._lock:
            self._channels[channel.id] = channel

    def remove(self, id: str) -> None:
        """Forget the channel with this id, if any."""
        with self._lock:
            self._channels.pop(id, None)

    def get(self, id: str) -> Any | None:
        """Return the channel with this id, or None."""
        if not id:
            log.error("channel id is required")
            return None
        with self._lock:
            return self._channels.get(id)

    def all(self) -> list[Any]:
        """Return every stored channel."""
        with self._lock:
            return list(self._channels.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)