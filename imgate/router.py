"""Command routing through chains of handlers and middlewares."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)

NOT_IMPLEMENTED = "NotImplemented"

Handler = Callable[["Context"], None]


class FuncTree:
    """Maps command paths to their chains of handlers."""

    def __init__(self) -> None:
        self._nodes: dict[str, list[Optional[Handler]]] = {}

    def add(self, path: str, *args: Optional[Handler]) -> None:
        """Append handlers to the chain for a path."""
        self._nodes.setdefault(path, []).extend(args)

    def get(self, path: str) -> list[Optional[Handler]] | None:
        """Return a copy of the chain for a path, or None if none is registered."""
        chain = self._nodes.get(path)
        return None if chain is None else list(chain)


class Context:
    """State handed along a handler chain for one request.

    ``responder`` is called as ``responder(status, body)`` by :meth:`resp`.
    """

    def __init__(
        self,
        request: Any = None,
        session: Any = None,
        responder: Callable[[str, Any], None] | None = None,
    ) -> None:
        self.request = request
        self.session = session
        self.responder = responder
        self.command = ""
        self.handlers: list[Optional[Handler]] = []
        self.index = 0

    def next(self) -> None:
        """Run the next handler in the chain, if there is one."""
        if self.index >= len(self.handlers):
            return
        handler = self.handlers[self.index]
        self.index += 1
        if handler is None:
            log.warning("arrived unknown HandlerFunc")
            return
        handler(self)

    def resp(self, status: str, body: Any) -> None:
        """Send a response to the sender of the request."""
        if self.responder is None:
            raise RuntimeError("context has no responder")
        self.responder(status, body)


def _handle_not_found(ctx: Context) -> None:
    ctx.resp(NOT_IMPLEMENTED, {"message": "NotImplemented"})


class Router:
    """Routes commands to handler chains; middlewares run before the handlers."""

    def __init__(self) -> None:
        self._middlewares: list[Handler] = []
        self._handlers = FuncTree()

    def use(self, *args: Handler) -> None:
        """Add middlewares for commands registered from now on."""
        self._middlewares.extend(args)

    def handle(self, command: str, *args: Handler) -> None:
        """Register handlers for a command, preceded by the current middlewares."""
        self._handlers.add(command, *self._middlewares)
        self._handlers.add(command, *args)

    def serve(self, command: str, context: Context) -> None:
        """Run the chain registered for a command; unknown commands get NotImplemented."""
        chain = self._handlers.get(command)
        context.command = command
        context.index = 0
        context.handlers = chain if chain is not None else [_handle_not_found]
        context.next()