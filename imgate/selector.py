"""Choosing a service node for a channel."""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from typing import Any


def hash_code(key: str) -> int:
    """Return the CRC-32 (IEEE) checksum of the key's UTF-8 bytes."""
    return zlib.crc32(key.encode("utf-8"))


class HashSelector:
    """Picks a service by hashing the channel id, so a channel sticks to one node."""

    def lookup(self, channel_id: str, services: Sequence[Any]) -> str:
        """Return the id of the service chosen for this channel."""
        if not services:
            raise ValueError("no services to select from")
        return services[hash_code(channel_id) % len(services)].id