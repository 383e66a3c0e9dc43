"""SSE message model."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# str, pydantic model, dict/list, awaitable, or zero-arg callable producing any of these
MessageData = (
    str
    | BaseModel
    | dict[str, Any]
    | list[Any]
    | Awaitable[Any]
    | Callable[[], Any]
)


def _shared_awaitable(value: Awaitable[Any]) -> "asyncio.Future[Any]":
    """Wrap an awaitable in a future so every format of the message sees its result."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        raise ValueError(
            "Awaitable SSE data needs a running event loop; pass a zero-argument callable instead."
        ) from None
    return asyncio.ensure_future(value)


class SSEMessage(BaseModel):
    """Structured SSE message.

    ``data`` may span several lines; ``event`` and ``id`` must be single-line.
    ``retry`` is the client reconnection delay in milliseconds.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    data: Any
    event: str | None = None
    id: str | None = None
    retry: int | None = Field(default=None, ge=0)

    @field_validator("data")
    @classmethod
    def _check_data(cls, value: Any) -> Any:
        if isinstance(value, str | BaseModel | dict | list):
            return value
        if inspect.isawaitable(value):
            return _shared_awaitable(value)
        if callable(value):
            return value
        raise ValueError(
            f"SSE data must be a string, model, JSON object or deferred value, got {type(value).__name__}"
        )

    @field_validator("event", "id")
    @classmethod
    def _single_line(cls, value: str | None) -> str | None:
        if value is not None and ("\n" in value or "\r" in value):
            raise ValueError("SSE 'event' and 'id' fields must not contain line breaks.")
        return value
