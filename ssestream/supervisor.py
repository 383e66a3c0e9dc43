"""Producer supervision for SSE streams.

Runs the user producer against an SSEStream, recovers its errors, optionally
surfaces them as an ``error`` event, and closes the stream exactly once.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import cast

from .stream import SSEStream
from .types import SSEMessage

logger = logging.getLogger(__name__)

ERROR_EVENT = "error"

Producer = Callable[[SSEStream], Awaitable[None]]
ErrorHandler = Callable[[Exception, SSEStream], Awaitable[None] | None]


class SupervisorState(str, Enum):
    """Supervisor lifecycle states."""

    RUNNING = "running"
    HANDLING_ERROR = "handling_error"
    CLOSING = "closing"
    CLOSED = "closed"


class ErrorKind(str, Enum):
    """How a value raised by the producer is treated."""

    RECOVERABLE = "recoverable"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ProducerFailure:
    """A raised value tagged with its error kind."""

    kind: ErrorKind
    error: BaseException

    @classmethod
    def from_exception(cls, error: BaseException) -> "ProducerFailure":
        """Tag ``Exception`` instances as recoverable, everything else as unrecognized."""
        if isinstance(error, Exception):
            return cls(kind=ErrorKind.RECOVERABLE, error=error)
        return cls(kind=ErrorKind.UNRECOGNIZED, error=error)

    @property
    def message(self) -> str:
        return str(self.error)


class Supervisor:
    """Drives one producer against one stream.

    Usage:
        supervisor = Supervisor(stream, producer, on_error)
        await supervisor.run()
        assert stream.closed
    """

    def __init__(
        self,
        stream: SSEStream,
        producer: Producer,
        on_error: ErrorHandler | None = None,
        *,
        session_id: str = "-",
        log_unrecognized: bool = True,
    ) -> None:
        """Initialize supervisor.

        Args:
            stream: Stream passed to the producer and closed at the end.
            producer: Async callable receiving the stream as sole argument.
            on_error: Optional handler for recoverable producer errors.
            session_id: Identifier used in log records.
            log_unrecognized: Log non-``Exception`` values raised by the producer.
        """
        self.stream = stream
        self.session_id = session_id
        self._producer = producer
        self._on_error = on_error
        self._log_unrecognized = log_unrecognized
        self._state = SupervisorState.RUNNING

    @property
    def state(self) -> SupervisorState:
        return self._state

    async def run(self) -> None:
        """Run the producer, then close the stream.

        Recoverable errors are handled here and unrecognized values are
        discarded. Task cancellation and errors raised by the error handler
        propagate after the stream is closed.
        """
        try:
            try:
                await self._producer(self.stream)
            except BaseException as e:
                failure = ProducerFailure.from_exception(e)
                await self._dispatch(failure)
                if isinstance(e, asyncio.CancelledError):
                    raise
        finally:
            self._transition(SupervisorState.CLOSING)
            self.stream.close()
            self._transition(SupervisorState.CLOSED)

    async def _dispatch(self, failure: ProducerFailure) -> None:
        if failure.kind is ErrorKind.RECOVERABLE and self._on_error is not None:
            self._transition(SupervisorState.HANDLING_ERROR)
            result = self._on_error(cast("Exception", failure.error), self.stream)
            if inspect.isawaitable(result):
                await result
            await self.stream.write_event(SSEMessage(event=ERROR_EVENT, data=failure.message))
            return

        if failure.kind is ErrorKind.RECOVERABLE:
            logger.error(
                "[SSE] session %s - producer failed: %s",
                self.session_id,
                failure.error,
                exc_info=failure.error,
            )
        elif self._log_unrecognized:
            logger.warning(
                "[SSE] session %s - producer interrupted by %s",
                self.session_id,
                type(failure.error).__name__,
            )

    def _transition(self, state: SupervisorState) -> None:
        logger.debug("[SSE] session %s - %s -> %s", self.session_id, self._state.value, state.value)
        self._state = state
