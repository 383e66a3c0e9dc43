"""SSE Event types for ticker streaming."""

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel

from ssestream import SSEMessage


class EventType(str, Enum):
    """Event types for SSE streaming."""

    START = "start"
    TICK = "tick"
    DONE = "done"


class SSEBaseEvent(BaseModel):
    """Base class for SSE payloads with bound event names."""

    event_type: ClassVar[EventType]


def sse_message(
    payload: "SSEBaseEvent",
    *,
    id: str | None = None,  # noqa: A002
    retry: int | None = None,
) -> SSEMessage:
    """Wrap payload into SSE message using its bound event type."""
    return SSEMessage(event=payload.event_type.value, data=payload, id=id, retry=retry)


class TickEvent(SSEBaseEvent):
    """One tick of the stream."""

    event_type: ClassVar[EventType] = EventType.TICK
    topic: str
    index: int
    remaining: int


class DoneEvent(SSEBaseEvent):
    """Stream completed."""

    event_type: ClassVar[EventType] = EventType.DONE
    topic: str
    total: int
