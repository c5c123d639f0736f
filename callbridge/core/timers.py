"""
Loop Timer Adapters

Future-returning wrappers over the event loop's call_soon and call_later.
"""

import asyncio
from typing import Optional, TypeVar

from .future import set_result_once

T = TypeVar('T')


def next_tick(value: Optional[T] = None) -> 'asyncio.Future[Optional[T]]':
    """
    Resolve with value on the next loop iteration.

    Callbacks already queued with call_soon run first.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    handle = loop.call_soon(set_result_once, future, value)
    future.add_done_callback(lambda _: handle.cancel())
    return future


def after_delay(delay: float, value: Optional[T] = None) -> 'asyncio.Future[Optional[T]]':
    """
    Resolve with value after delay seconds.

    The delay is in seconds like asyncio.sleep, not milliseconds like a
    JavaScript setTimeout.

    Cancelling the returned future cancels the timer.

    Raises:
        ValueError: If delay is negative
    """
    if delay < 0:
        raise ValueError(f"delay must be >= 0, got {delay}")
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    handle = loop.call_later(delay, set_result_once, future, value)
    future.add_done_callback(lambda _: handle.cancel())
    return future
