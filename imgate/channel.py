"""A server-side channel bound to one client connection."""

from __future__ import annotations

import contextlib
import logging
import queue
import threading
import time
from concurrent.futures import Executor
from enum import Enum
from typing import Any

from .core import DEFAULT_READ_WAIT, DEFAULT_WRITE_WAIT, OpCode

log = logging.getLogger(__name__)

_CLOSED = object()


class ChannelError(Exception):
    """Raised when a channel is used in a state that does not allow it."""


class _State(Enum):
    INIT = 0
    STARTED = 1
    CLOSED = 2


class Channel:
    """Wraps a framed connection: reads frames into a listener, writes pushes in order.

    The connection must provide ``read_frame()``, ``write_frame(opcode, payload)``,
    ``flush()`` and ``set_read_deadline(deadline)``. Received payloads are handed to
    ``listener.receive(channel, payload)`` through the given executor.
    """

    def __init__(self, id: str, meta: dict | None, conn: Any, executor: Executor) -> None:
        self.id = id
        self.meta = meta if meta is not None else {}
        self.conn = conn
        self._executor = executor
        self._write_wait = DEFAULT_WRITE_WAIT
        self._read_wait = DEFAULT_READ_WAIT
        self._state = _State.INIT
        self._state_lock = threading.Lock()
        self._queue: queue.Queue = queue.Queue(maxsize=5)
        self._writer = threading.Thread(
            target=self._writeloop, name=f"channel-{id}-writer", daemon=True
        )
        self._writer.start()

    @property
    def write_wait(self) -> float:
        return self._write_wait

    @property
    def read_wait(self) -> float:
        return self._read_wait

    def _swap_state(self, expected: _State, new: _State) -> bool:
        with self._state_lock:
            if self._state is not expected:
                return False
            self._state = new
            return True

    def _writeloop(self) -> None:
        failed = False
        while True:
            payload = self._queue.get()
            if payload is _CLOSED:
                break
            if failed:
                continue
            try:
                self.conn.write_frame(OpCode.BINARY, payload)
                finished = False
                for _ in range(self._queue.qsize()):
                    payload = self._queue.get_nowait()
                    if payload is _CLOSED:
                        finished = True
                        break
                    self.conn.write_frame(OpCode.BINARY, payload)
                self.conn.flush()
                if finished:
                    break
            except Exception as exc:  # the connection is gone; drop further pushes
                log.info("channel %s write failed: %s", self.id, exc)
                failed = True
        log.debug("channel %s writeloop exited", self.id)

    def push(self, payload: bytes) -> None:
        """Queue a payload to be written asynchronously."""
        if self._state is not _State.STARTED:
            raise ChannelError(f"channel {self.id} has closed")
        self._queue.put(payload)

    def close(self) -> None:
        """Stop the writer once queued payloads are written."""
        if not self._swap_state(_State.STARTED, _State.CLOSED):
            raise ChannelError("channel has started")
        self._queue.put(_CLOSED)

    def set_write_wait(self, write_wait: float) -> None:
        """Set the write timeout; zero leaves it unchanged."""
        if write_wait:
            self._write_wait = write_wait

    def set_read_wait(self, read_wait: float) -> None:
        """Set the read timeout; zero leaves it unchanged."""
        if read_wait:
            self._read_wait = read_wait

    def readloop(self, listener: Any) -> None:
        """Read frames until the connection fails or the peer closes it.

        Pings are answered with pongs, empty payloads are skipped, and every
        other payload is handed to the listener. Always ends by raising.
        """
        if not self._swap_state(_State.INIT, _State.STARTED):
            raise ChannelError("channel has started")
        while True:
            with contextlib.suppress(Exception):
                self.conn.set_read_deadline(time.time() + self._read_wait)
            try:
                frame = self.conn.read_frame()
            except Exception as exc:
                log.info("channel %s read failed: %s", self.id, exc)
                raise
            if frame.opcode == OpCode.CLOSE:
                raise ChannelError("remote side closed the channel")
            if frame.opcode == OpCode.PING:
                log.debug("recv a ping; resp with a pong")
                with contextlib.suppress(Exception):
                    self.conn.write_frame(OpCode.PONG, b"")
                    self.conn.flush()
                continue
            payload = frame.payload
            if not payload:
                continue
            self._executor.submit(listener.receive, self, payload)