"""Server-Sent Events (SSE) streaming package."""

from .entry import SSE_HEADERS, SSEOptions, stream_sse
from .exceptions import (
    MessageDataError,
    SSEError,
    StreamClosedError,
    TransportWriteError,
    WriteError,
)
from .formatting import build_frame, format_message, resolve_data
from .lifetime import SessionRegistry, StreamSession, backport_cancellation, registry
from .stream import DuplexStream, SSEStream
from .supervisor import ErrorKind, ProducerFailure, Supervisor, SupervisorState
from .types import SSEMessage

__all__ = [
    "SSE_HEADERS",
    "DuplexStream",
    "ErrorKind",
    "MessageDataError",
    "ProducerFailure",
    "SSEError",
    "SSEMessage",
    "SSEOptions",
    "SSEStream",
    "SessionRegistry",
    "StreamClosedError",
    "StreamSession",
    "Supervisor",
    "SupervisorState",
    "TransportWriteError",
    "WriteError",
    "backport_cancellation",
    "build_frame",
    "format_message",
    "registry",
    "resolve_data",
    "stream_sse",
]
