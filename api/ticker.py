"""Ticker streaming producer."""

import logging

from ssestream import SSEMessage, SSEStream
from ssestream.supervisor import Producer

from .events import DoneEvent, EventType, TickEvent, sse_message
from .schemas import TickerRequest

logger = logging.getLogger(__name__)


class TickerFailedError(RuntimeError):
    """Ticker stopped at the requested failure point."""

    def __init__(self, topic: str, ticks: int) -> None:
        """Initialize with topic and number of ticks sent."""
        super().__init__(f"Ticker '{topic}' failed after {ticks} ticks")
        self.topic = topic
        self.ticks = ticks


async def _describe(request: TickerRequest) -> str:
    return f"topic: {request.topic}\nticks: {request.count}"


def ticker_producer(request: TickerRequest) -> Producer:
    """Build a producer streaming ``request.count`` tick events.

    The stream opens with a plain-text ``start`` event, then one ``tick`` per
    step and a final ``done``. ``fail_after`` raises after that many ticks.

    Args:
        request: Ticker parameters.

    Returns:
        Producer for ``stream_sse``.
    """

    async def produce(stream: SSEStream) -> None:
        await stream.write_event(SSEMessage(
            event=EventType.START.value,
            data=_describe(request),
            retry=request.retry,
        ))

        for index in range(1, request.count + 1):
            if request.fail_after is not None and index > request.fail_after:
                raise TickerFailedError(request.topic, index - 1)
            await stream.write_event(sse_message(
                TickEvent(topic=request.topic, index=index, remaining=request.count - index),
                id=str(index),
            ))
            if request.interval:
                await stream.sleep(request.interval)

        await stream.write_event(sse_message(DoneEvent(topic=request.topic, total=request.count)))

    return produce


async def log_ticker_error(error: Exception, stream: SSEStream) -> None:
    """Log a failed ticker before the error event is sent."""
    logger.warning("[Ticker] stream failed: %s (closed=%s)", error, stream.closed)
