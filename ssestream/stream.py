"""Duplex byte stream and its SSE-aware wrapper.

Provides:
- DuplexStream: writable sink plus a readable async iterator, with backpressure
- SSEStream: DuplexStream that writes whole SSE frames
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable, Mapping
from typing import Any

import anyio

from .exceptions import StreamClosedError, TransportWriteError
from .formatting import format_message
from .types import SSEMessage

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 16

Listener = Callable[[], object]


class DuplexStream:
    """Single-writer, single-reader byte channel.

    ``write`` suspends while ``max_buffer_size`` chunks are waiting for the
    reader. ``readable`` is consumed once, typically as a response body.
    """

    def __init__(self, max_buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        """Create the channel.

        Args:
            max_buffer_size: Chunks buffered before writers suspend.
        """
        send, receive = anyio.create_memory_object_stream[bytes](max_buffer_size)
        self._send = send
        self._receive = receive
        self._closed = False
        self._aborted = False
        self._abort_listeners: list[Listener] = []
        self._close_listeners: list[Listener] = []
        self.readable: AsyncIterator[bytes] = self._iter_readable()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def aborted(self) -> bool:
        return self._aborted

    async def write(self, data: str | bytes) -> None:
        """Write one chunk, waiting for buffer space.

        Raises:
            StreamClosedError: If the stream was already closed or aborted.
            TransportWriteError: If the reader side went away during the write.
        """
        if self._closed:
            raise StreamClosedError()
        chunk = data.encode("utf-8") if isinstance(data, str) else data
        try:
            await self._send.send(chunk)
        except (anyio.BrokenResourceError, anyio.ClosedResourceError) as e:
            raise TransportWriteError(e) from e

    async def writeln(self, text: str) -> None:
        await self.write(text + "\n")

    async def sleep(self, seconds: float) -> None:
        await anyio.sleep(seconds)

    async def pipe(self, source: AsyncIterable[str | bytes]) -> None:
        """Write every chunk of ``source``, then close the stream."""
        async for chunk in source:
            await self.write(chunk)
        self.close()

    def on_abort(self, listener: Listener) -> None:
        self._abort_listeners.append(listener)

    def on_close(self, listener: Listener) -> None:
        """Register a callback fired once on close or abort."""
        self._close_listeners.append(listener)

    def close(self) -> None:
        """End the stream normally; buffered chunks still reach the reader."""
        if self._closed:
            return
        self._closed = True
        self._send.close()
        self._notify(self._close_listeners)

    def abort(self) -> None:
        """End the stream abnormally, dropping buffered chunks."""
        if self._closed:
            return
        self._closed = True
        self._aborted = True
        # Closing the send side ends a waiting reader; closing the receive
        # side fails writers blocked on a full buffer.
        self._send.close()
        self._receive.close()
        self._notify(self._abort_listeners)
        self._notify(self._close_listeners)

    def _notify(self, listeners: list[Listener]) -> None:
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("[SSE] stream listener %r failed", listener)

    async def _iter_readable(self) -> AsyncIterator[bytes]:
        try:
            while True:
                try:
                    chunk = await self._receive.receive()
                except (anyio.EndOfStream, anyio.ClosedResourceError):
                    return
                yield chunk
        finally:
            # Reader cancelled or closed before the writer finished.
            self.abort()
            self._receive.close()


class SSEStream(DuplexStream):
    """Duplex stream that speaks Server-Sent Events."""

    async def write_event(self, message: SSEMessage | Mapping[str, Any]) -> None:
        """Format and write one SSE frame.

        Args:
            message: Message, or a mapping of its fields.

        Raises:
            WriteError: If the stream is closed or the transport write fails.
        """
        if not isinstance(message, SSEMessage):
            message = SSEMessage(**message)
        await self.write(await format_message(message))
