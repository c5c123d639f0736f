"""
Wrapper Options

Validated per-call configuration for the bridging combinators.
"""

from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class PromisifyOptions(BaseModel):
    """
    Options for promisify().

    Attributes:
        result_fields: Names for the callback's success results. When set and
            the callback reports more than one result, the future resolves
            with a dict keyed by these names instead of a tuple.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    result_fields: Optional[Tuple[str, ...]] = None


class WhenifyOptions(BaseModel):
    """
    Options for whenify().

    Attributes:
        async_ops: Number of callback invocations expected before the
            completion signal fires.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    async_ops: int = Field(default=1, ge=1)


OptionsLike = Union[WhenifyOptions, Mapping[str, Any], None]


def coerce_whenify_options(options: OptionsLike = None, async_ops: Optional[int] = None) -> WhenifyOptions:
    """Build WhenifyOptions from a model, a mapping, or the async_ops keyword."""
    if isinstance(options, WhenifyOptions):
        opts = options
    else:
        opts = WhenifyOptions.model_validate(dict(options or {}))

    if async_ops is not None:
        opts = WhenifyOptions(async_ops=async_ops)
    return opts
