"""pytest configuration and shared fixtures."""

import asyncio
from typing import Any, Callable, Optional, Tuple

import pytest

from callbridge import EventEmitter


class FakeServer(EventEmitter):
    """Callback-style listener object, shaped like a Node net.Server.

    listen() and close() take a trailing completion callback, and the
    server emits "listening" / "close" events on the next loop iteration.
    """

    def __init__(self) -> None:
        super().__init__()
        self.address: Optional[Tuple[str, int]] = None

    def listen(self, port: int, callback: Callable[..., Any]) -> "FakeServer":
        loop = asyncio.get_running_loop()

        def bind() -> None:
            self.address = ("127.0.0.1", port or 49152)
            self.emit("listening")
            callback()

        loop.call_soon(bind)
        return self

    def close(self, callback: Callable[..., Any]) -> "FakeServer":
        loop = asyncio.get_running_loop()

        def unbind() -> None:
            if self.address is None:
                callback(RuntimeError("Server is not running"))
                return
            self.address = None
            self.emit("close")
            callback()

        loop.call_soon(unbind)
        return self


@pytest.fixture
def server() -> FakeServer:
    """A fresh, unbound FakeServer."""
    return FakeServer()


@pytest.fixture
def soon() -> Callable[..., asyncio.Handle]:
    """Schedule a callback on the running loop (the setImmediate of asyncio)."""
    def schedule(callback: Callable[..., Any], *args: Any) -> asyncio.Handle:
        return asyncio.get_running_loop().call_soon(callback, *args)
    return schedule
