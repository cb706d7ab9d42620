"""Shared protocol types and default timings for the gateway."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

# Timings, in seconds.
DEFAULT_READ_WAIT = 180.0
DEFAULT_WRITE_WAIT = 10.0
DEFAULT_LOGIN_WAIT = 10.0
DEFAULT_HEARTBEAT = 55.0

# Default sizes of the worker pools.
DEFAULT_MESSAGE_READ_POOL = 5000
DEFAULT_CONNECTION_POOL = 5000

Meta = dict


class OpCode(IntEnum):
    """Frame operation codes shared by the tcp and websocket transports."""

    CONTINUATION = 0x0
    TEXT = 0x1
    BINARY = 0x2
    CLOSE = 0x8
    PING = 0x9
    PONG = 0xA


@dataclass
class Frame:
    """A single frame read from or written to a connection."""

    opcode: OpCode
    payload: bytes = b""


@dataclass
class DialerContext:
    """What a dialer needs to connect to and handshake with a service."""

    id: str
    name: str
    address: str
    timeout: float = DEFAULT_LOGIN_WAIT