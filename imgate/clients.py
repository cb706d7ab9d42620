"""A thread-safe registry of clients connected to other services."""

from __future__ import annotations

import logging
import threading
from typing import Any

log = logging.getLogger(__name__)


class ClientMap:
    """Holds clients by service id; a client needs ``id`` and ``meta`` attributes."""

    def __init__(self) -> None:
        self._clients: dict[str, Any] = {}
        self._lock = threading.Lock()

    def add(self, client: Any) -> None:
        """Store a client under its service id."""
        if not client.id:
            log.error("client id is required")
        with self._lock:
            self._clients[client.id] = client

    def remove(self, id: str) -> None:
        """Forget the client with this id, if any."""
        with self._lock:
            self._clients.pop(id, None)

    def get(self, id: str) -> Any | None:
        """Return the client with this id, or None."""
        if not id:
            log.error("client id is required")
        with self._lock:
            return self._clients.get(id)

    def services(self, *args: str) -> list[Any]:
        """Return the stored services, optionally only those whose meta[key] equals value.

        Call with no arguments or with one key and one value; any other number of
        arguments yields an empty list.
        """
        if len(args) not in (0, 2):
            return []
        with self._lock:
            clients = list(self._clients.values())
        if not args:
            return clients
        key, value = args
        return [c for c in clients if (c.meta or {}).get(key, "") == value]

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)