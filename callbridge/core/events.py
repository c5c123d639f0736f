"""
Event Waiting

A minimal synchronous event emitter and once(), which turns the next
emission of an event into an asyncio future.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..exceptions import EmitterError
from .future import call_in_loop, set_exception_once, set_result_once, shape_results

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]

ERROR_EVENT = "error"


class EventEmitter:
    """
    Minimal synchronous event emitter.

    - `on(event, fn)` registers a listener.
    - `off(event, fn)` removes one registration of a listener.
    - `emit(event, *args)` calls listeners in registration order.

    Emitting "error" with no error listener raises the payload.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> 'EventEmitter':
        self._listeners[event].append(listener)
        return self

    add_listener = on

    def off(self, event: str, listener: Listener) -> 'EventEmitter':
        listeners = self._listeners.get(event)
        if not listeners:
            return self
        try:
            listeners.remove(listener)
        except ValueError:
            return self
        if not listeners:
            self._listeners.pop(event, None)
        return self

    remove_listener = off

    def remove_all_listeners(self, event: Optional[str] = None) -> 'EventEmitter':
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)
        return self

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Call every listener registered for event.

        Returns:
            True if the event had listeners

        Raises:
            The error payload (or EmitterError wrapping it) when an "error"
            event has no listeners
        """
        listeners = list(self._listeners.get(event, ()))
        if not listeners:
            if event == ERROR_EVENT:
                error = args[0] if args else None
                if isinstance(error, BaseException):
                    raise error
                raise EmitterError(error, event)
            return False

        for listener in listeners:
            listener(*args)
        return True


def _listener_api(emitter: Any) -> Tuple[Callable[..., Any], Callable[..., Any]]:
    add = getattr(emitter, "on", None) or getattr(emitter, "add_listener", None)
    remove = getattr(emitter, "off", None) or getattr(emitter, "remove_listener", None)
    if not callable(add) or not callable(remove):
        raise TypeError(
            f"{type(emitter).__name__} does not look like an event emitter "
            "(needs on/add_listener and off/remove_listener)"
        )
    return add, remove


def once(emitter: Any, event: str) -> 'asyncio.Future[Any]':
    """
    Wait for the next emission of event.

    Resolves with the emission's payload (None, the single argument, or a
    tuple of arguments). If an "error" event fires first the future is
    rejected. Listeners are removed as soon as the future settles, including
    when the caller cancels it.

    Args:
        emitter: Object exposing on/off (or add_listener/remove_listener)
        event: Event name

    Example:
        server.listen(8080)
        await once(server, "listening")
    """
    add, remove = _listener_api(emitter)
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    registered: List[Tuple[str, Listener]] = []
    removed = False

    def cleanup(*_: Any) -> None:
        nonlocal removed
        if removed:
            return
        removed = True
        for name, listener in registered:
            remove(name, listener)
        logger.debug(f"Removed once() listeners for {event!r} on {type(emitter).__name__}")

    def on_event(*args: Any) -> None:
        cleanup()
        call_in_loop(loop, set_result_once, future, shape_results(args))

    def on_error(error: Any = None, *_rest: Any) -> None:
        exc = error if isinstance(error, BaseException) else EmitterError(error, event)
        cleanup()
        call_in_loop(loop, set_exception_once, future, exc)

    registered.append((event, on_event))
    if event != ERROR_EVENT:
        registered.append((ERROR_EVENT, on_error))

    for name, listener in registered:
        add(name, listener)

    # Cancellation settles the future without any listener running.
    future.add_done_callback(cleanup)
    return future
