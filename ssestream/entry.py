"""SSE response entry point."""

import asyncio
import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass

from fastapi.responses import StreamingResponse

from .lifetime import (
    DisconnectAware,
    SessionRegistry,
    StreamSession,
    backport_cancellation,
    registry,
)
from .stream import DEFAULT_BUFFER_SIZE, SSEStream
from .supervisor import ErrorHandler, Producer, Supervisor

logger = logging.getLogger(__name__)

SSE_HEADERS: dict[str, str] = {
    "Transfer-Encoding": "chunked",
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}
_SSE_HEADER_NAMES = {name.lower() for name in SSE_HEADERS}


@dataclass(frozen=True)
class SSEOptions:
    """Per-application streaming options."""

    propagates_cancellation: bool = True
    disconnect_poll_interval: float = 0.5
    buffer_size: int = DEFAULT_BUFFER_SIZE
    log_unrecognized: bool = True


async def _supervise(supervisor: Supervisor) -> None:
    try:
        await supervisor.run()
    except Exception:
        logger.exception("[SSE] session %s - error handler failed", supervisor.session_id)


def stream_sse(
    request: DisconnectAware,
    producer: Producer,
    on_error: ErrorHandler | None = None,
    *,
    headers: Mapping[str, str] | None = None,
    options: SSEOptions | None = None,
    sessions: SessionRegistry | None = None,
) -> StreamingResponse:
    """Start an SSE session and return its streaming response.

    The producer runs in its own task and keeps writing after this function
    returns. Must be called from a running event loop.

    Args:
        request: Inbound request.
        producer: Async callable writing events to the stream.
        on_error: Handler for producer errors; an ``error`` event follows it.
        headers: Extra response headers. SSE headers always take precedence.
        options: Streaming options.
        sessions: Registry retaining the session, the process-wide one by default.

    Returns:
        Response whose body is the stream's readable side.
    """
    options = options or SSEOptions()
    if sessions is None:
        sessions = registry

    response_headers = {
        name: value
        for name, value in (headers or {}).items()
        if name.lower() not in _SSE_HEADER_NAMES
    }
    response_headers.update(SSE_HEADERS)

    stream = SSEStream(max_buffer_size=options.buffer_size)
    session = StreamSession(
        session_id=uuid.uuid4().hex,
        stream=stream,
        request=request,
        headers=response_headers,
    )
    session.watcher = backport_cancellation(
        session,
        propagates_natively=options.propagates_cancellation,
        poll_interval=options.disconnect_poll_interval,
    )
    sessions.register(session)

    supervisor = Supervisor(
        stream,
        producer,
        on_error,
        session_id=session.session_id,
        log_unrecognized=options.log_unrecognized,
    )
    session.task = asyncio.create_task(
        _supervise(supervisor),
        name=f"sse-{session.session_id}",
    )
    logger.debug("[SSE] session %s - started", session.session_id)

    return StreamingResponse(stream.readable, headers=response_headers)
