"""
callbridge - Callback to asyncio bridging

Small combinators for driving Node-style callback APIs from async/await code.

Features:
- promisify: callback function -> future-returning function
- once: await the next emission of an event
- when / whenify: await N invocations of a callback that fires repeatedly
- next_tick / after_delay: event loop timers as futures
"""

from .core import (
    COUNT,
    DONE,
    RESULT_FIELDS,
    CompletionGate,
    EventEmitter,
    GateState,
    PromisifyOptions,
    Whenified,
    WhenifyOptions,
    after_delay,
    next_tick,
    once,
    promisify,
    promisify_method,
    promisify_of,
    result_fields,
    when,
    whenify,
    whenify_method,
)
from .exceptions import CallbridgeError, EmitterError, UpstreamError, UsageError

__version__ = "0.1.0"

__all__ = [
    'COUNT',
    'DONE',
    'RESULT_FIELDS',
    'CompletionGate',
    'EventEmitter',
    'GateState',
    'PromisifyOptions',
    'Whenified',
    'WhenifyOptions',
    'after_delay',
    'next_tick',
    'once',
    'promisify',
    'promisify_method',
    'promisify_of',
    'result_fields',
    'when',
    'whenify',
    'whenify_method',
    'CallbridgeError',
    'EmitterError',
    'UpstreamError',
    'UsageError',
]
