"""
Callback to Future Bridge

Bridges Node-style callback APIs (``fn(*args, callback)`` where the callback
receives ``(error, *results)``) to Python's async/await syntax.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Optional, Sequence, TypeVar

from ..exceptions import UpstreamError
from .options import PromisifyOptions

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Attribute a callback-style function sets to name its success results.
RESULT_FIELDS = "__result_fields__"


def result_fields(*names: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Declare named success results on a callback-style function.

    Example:
        @result_fields("shape", "color")
        def describe(cb):
            cb(None, "circle", "red")

        await promisify(describe)()   # {"shape": "circle", "color": "red"}
    """
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        setattr(fn, RESULT_FIELDS, tuple(names))
        return fn
    return decorator


def _in_loop(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


def call_in_loop(loop: asyncio.AbstractEventLoop, func: Callable[..., Any], *args: Any) -> None:
    """Run func on the loop's thread: inline if already there, else via call_soon_threadsafe."""
    if _in_loop(loop):
        func(*args)
    else:
        loop.call_soon_threadsafe(func, *args)


def set_result_once(future: asyncio.Future, value: Any) -> None:
    """Resolve future unless it is already settled or cancelled."""
    if future.done():
        logger.debug(f"Ignoring late result for settled future: {value!r}")
        return
    future.set_result(value)


def set_exception_once(future: asyncio.Future, exc: BaseException) -> None:
    """Reject future unless it is already settled or cancelled."""
    if future.done():
        logger.debug(f"Ignoring late error for settled future: {exc!r}")
        return
    future.set_exception(exc)


def as_exception(error: Any) -> BaseException:
    """Exceptions pass through; any other truthy error value is wrapped."""
    if isinstance(error, BaseException):
        return error
    return UpstreamError(error)


def shape_results(results: Sequence[Any], fields: Optional[Sequence[str]] = None) -> Any:
    """
    Collapse callback results into a single value.

    None for no results, the value itself for one, a dict keyed by fields
    (missing positions map to None) or else a tuple for several.
    """
    if not results:
        return None
    if len(results) == 1:
        return results[0]
    if fields:
        return {
            name: results[i] if i < len(results) else None
            for i, name in enumerate(fields)
        }
    return tuple(results)


def promisify(
    fn: Callable[..., Any],
    result_fields: Optional[Sequence[str]] = None,
) -> Callable[..., 'asyncio.Future[Any]']:
    """
    Convert a callback-style function into one returning an asyncio future.

    The returned function calls fn synchronously with an extra trailing
    callback. A truthy error argument rejects the future, otherwise it
    resolves with the shaped results. Exceptions raised synchronously by fn
    propagate to the caller instead of rejecting the future.

    Args:
        fn: Function whose last positional parameter is a callback
            ``(error, *results)``
        result_fields: Names for multiple results (overrides the
            RESULT_FIELDS attribute on fn)

    Returns:
        Function with fn's signature minus the callback

    Example:
        read = promisify(legacy_read)
        data = await read("path")
    """
    if not callable(fn):
        raise TypeError(f"promisify() expects a callable, got {type(fn).__name__}")

    if result_fields is None:
        result_fields = getattr(fn, RESULT_FIELDS, None)
    if isinstance(result_fields, str):
        raise TypeError("result_fields must be a sequence of names, not a single string")
    options = PromisifyOptions(
        result_fields=tuple(result_fields) if result_fields is not None else None
    )

    @functools.wraps(fn)
    def bridged(*args: Any, **kwargs: Any) -> 'asyncio.Future[Any]':
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def callback(error: Any = None, *results: Any) -> None:
            if error:
                call_in_loop(loop, set_exception_once, future, as_exception(error))
            else:
                value = shape_results(results, options.result_fields)
                call_in_loop(loop, set_result_once, future, value)

        fn(*args, callback, **kwargs)
        return future

    return bridged


def promisify_method(instance: T, *methods: str) -> T:
    """
    Replace callback-style methods of instance with promisified versions.

    Args:
        instance: Object to modify in place
        *methods: Method names

    Returns:
        The same instance, for chaining

    Raises:
        AttributeError: If a method is missing
        TypeError: If an attribute is not callable
    """
    bound = []
    for name in methods:
        method = getattr(instance, name)
        if not callable(method):
            raise TypeError(f"{type(instance).__name__}.{name} is not callable")
        bound.append((name, method))

    for name, method in bound:
        setattr(instance, name, promisify(method))
        logger.debug(f"Promisified {type(instance).__name__}.{name}")
    return instance


def promisify_of(method: str) -> Callable[[Any], Callable[..., 'asyncio.Future[Any]']]:
    """
    Build a reusable promisifier for a fixed method name.

    The method is looked up on the instance at call time.

    Example:
        listen = promisify_of("listen")
        await listen(server)(8080)
    """
    def for_instance(instance: Any) -> Callable[..., 'asyncio.Future[Any]']:
        def call(*args: Any, **kwargs: Any) -> Any:
            return getattr(instance, method)(*args, **kwargs)
        return promisify(call)
    return for_instance
