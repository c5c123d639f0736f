"""
callbridge core

Combinators bridging callback-style APIs to asyncio futures.
"""

from .future import RESULT_FIELDS, promisify, promisify_method, promisify_of, result_fields
from .combinators import COUNT, DONE, CompletionGate, GateState, Whenified, when, whenify, whenify_method
from .events import EventEmitter, once
from .timers import after_delay, next_tick
from .options import PromisifyOptions, WhenifyOptions

__all__ = [
    'RESULT_FIELDS',
    'promisify',
    'promisify_method',
    'promisify_of',
    'result_fields',
    'COUNT',
    'DONE',
    'CompletionGate',
    'GateState',
    'Whenified',
    'when',
    'whenify',
    'whenify_method',
    'EventEmitter',
    'once',
    'after_delay',
    'next_tick',
    'PromisifyOptions',
    'WhenifyOptions',
]
