"""
Completion Combinators

A single-shot completion gate (when) and a callback invocation counter
(whenify) that signals once a callback has fired a given number of times.
"""

import asyncio
import functools
import logging
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from ..exceptions import UsageError
from .future import call_in_loop, set_result_once
from .options import OptionsLike, WhenifyOptions, coerce_whenify_options

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Marker:
    """Sentinel key for reading wrapper state without clashing with real attributes."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"<marker {self.name}>"


COUNT = Marker("count")
DONE = Marker("done")


class GateState(Enum):
    """Lifecycle of a CompletionGate."""

    UNARMED = "unarmed"
    ARMED = "armed"
    TRIGGERED_BEFORE_ARM = "triggered_before_arm"
    SETTLED = "settled"


class CompletionGate:
    """
    Single-shot completion signal.

    Calling the gate triggers it; done() returns the future that resolves
    once triggered. Someone must have asked for done() before the gate is
    triggered, otherwise the trigger raises UsageError and the gate is
    broken for good: every later done() or trigger raises UsageError too.
    Triggering a settled gate again is a no-op.

    Example:
        until = when()
        loop.call_later(1, until)
        await until.done()
    """

    def __init__(self):
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._future: Optional[asyncio.Future] = None
        self._state = GateState.UNARMED

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def triggered(self) -> bool:
        return self._state is GateState.SETTLED

    def done(self) -> 'asyncio.Future[None]':
        """Arm the gate. Returns the same future on every call."""
        if self._state is GateState.TRIGGERED_BEFORE_ARM:
            raise UsageError("gate was triggered before awaiting done()")
        if self._future is None:
            self._loop = asyncio.get_running_loop()
            self._future = self._loop.create_future()
            self._state = GateState.ARMED
        return self._future

    def __call__(self, *_args: Any, **_kwargs: Any) -> None:
        if self._state in (GateState.UNARMED, GateState.TRIGGERED_BEFORE_ARM):
            self._state = GateState.TRIGGERED_BEFORE_ARM
            raise UsageError("called before awaiting done()")
        if self._state is GateState.SETTLED:
            logger.debug("Completion gate already triggered, ignoring")
            return
        self._state = GateState.SETTLED
        call_in_loop(self._loop, set_result_once, self._future, None)

    def __repr__(self) -> str:
        return f"<CompletionGate {self.state.value}>"


def when() -> CompletionGate:
    """Create a fresh CompletionGate."""
    return CompletionGate()


class Whenified:
    """
    Callback-style function wrapper that counts callback invocations.

    Every invocation of the inner callback is forwarded to the caller's
    callback unchanged, then counted. Once the count reaches
    options.async_ops the completion gate fires.
    """

    def __init__(self, fn: Callable[..., Any], options: WhenifyOptions):
        functools.update_wrapper(self, fn)
        self._name = getattr(fn, "__name__", type(fn).__name__)
        self._fn = fn
        self.options = options
        self._gate = CompletionGate()
        self._count = 0
        self._max = options.async_ops - 1

    @property
    def count(self) -> int:
        """Number of callback invocations seen so far."""
        return self._count

    @property
    def gate(self) -> CompletionGate:
        return self._gate

    def done(self) -> 'asyncio.Future[None]':
        """Future resolving after async_ops callback invocations."""
        return self._gate.done()

    def __getitem__(self, key: Marker) -> Any:
        if key is COUNT:
            return self._count
        if key is DONE:
            return self.done()
        raise KeyError(key)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if not args or not callable(args[-1]):
            raise TypeError(f"{self._name}() expects a callback as its last positional argument")
        *args, callback = args

        def intercept(*cb_args: Any, **cb_kwargs: Any) -> None:
            callback(*cb_args, **cb_kwargs)
            self._count += 1
            if self._count == self._max + 1:
                logger.debug(f"{self._name}: {self._count} callback invocation(s), signalling completion")
                self._gate()

        return self._fn(*args, intercept, **kwargs)

    def __repr__(self) -> str:
        return f"<Whenified {self._name} count={self._count}/{self.options.async_ops}>"


def whenify(
    fn: Callable[..., Any],
    options: OptionsLike = None,
    *,
    async_ops: Optional[int] = None,
) -> Whenified:
    """
    Wrap a callback-style function to await N callback invocations.

    Args:
        fn: Function whose last positional parameter is a callback
        options: WhenifyOptions or a mapping of its fields
        async_ops: Shortcut for options.async_ops (default 1)

    Returns:
        Whenified wrapper exposing .count and .done()

    Example:
        batch = whenify(send_batch, async_ops=3)
        batch(items, on_item)
        await batch.done()
    """
    if not callable(fn):
        raise TypeError(f"whenify() expects a callable, got {type(fn).__name__}")
    return Whenified(fn, coerce_whenify_options(options, async_ops))


def whenify_method(
    instance: T,
    method: str,
    options: OptionsLike = None,
    *,
    async_ops: Optional[int] = None,
) -> T:
    """
    Replace instance.<method> with its whenified bound version.

    Returns:
        The same instance, for chaining
    """
    wrapped = whenify(getattr(instance, method), options, async_ops=async_ops)
    setattr(instance, method, wrapped)
    logger.debug(f"Whenified {type(instance).__name__}.{method} (async_ops={wrapped.options.async_ops})")
    return instance
