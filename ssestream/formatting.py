"""Server-Sent Events (SSE) wire formatting."""

import inspect
import json

from pydantic import BaseModel

from .exceptions import MessageDataError
from .types import MessageData, SSEMessage


async def resolve_data(data: MessageData) -> str:
    """Resolve message data into the text carried by ``data:`` lines.

    Deferred values are resolved first: a zero-argument callable is called, and
    an awaitable result is awaited. No escaping is applied.

    Args:
        data: String, pydantic model, JSON object or deferred value.

    Returns:
        Final data text.

    Raises:
        MessageDataError: If the resolved value is not a supported type.
    """
    if callable(data):
        data = data()
    if inspect.isawaitable(data):
        data = await data

    if isinstance(data, str):
        return data
    if isinstance(data, BaseModel):
        return data.model_dump_json()
    if isinstance(data, dict | list):
        return json.dumps(data, ensure_ascii=False)
    raise MessageDataError(data)


def build_frame(
    data: str,
    *,
    event: str | None = None,
    id: str | None = None,  # noqa: A002
    retry: int | None = None,
) -> str:
    """Serialize resolved message fields into one SSE frame.

    Field order is fixed: event, data lines, id, retry, blank line.
    A zero ``retry`` is omitted like an absent one.
    """
    frame = ""
    if event:
        frame += f"event: {event}\n"
    for line in data.split("\n"):
        frame += f"data: {line}\n"
    if id:
        frame += f"id: {id}\n"
    if retry:
        frame += f"retry: {retry}\n"
    return frame + "\n"


async def format_message(message: SSEMessage) -> str:
    """Format a message as a Server-Sent Event frame."""
    data = await resolve_data(message.data)
    return build_frame(data, event=message.event, id=message.id, retry=message.retry)
