"""SSE streaming exceptions."""


class SSEError(Exception):
    """Base exception for SSE streaming errors."""


class WriteError(SSEError):
    """Writing to the stream failed."""


class StreamClosedError(WriteError):
    """Write attempted after the stream reached its terminal state."""

    def __init__(self) -> None:
        """Initialize with default message."""
        super().__init__("Stream is closed")


class TransportWriteError(WriteError):
    """Underlying transport rejected the write."""

    def __init__(self, error: Exception) -> None:
        """Initialize with the transport error."""
        super().__init__(f"Transport write failed: {type(error).__name__}")
        self.original_error = error


class MessageDataError(SSEError):
    """Message data resolved to a value that cannot be sent."""

    def __init__(self, value: object) -> None:
        """Initialize with the offending value."""
        super().__init__(
            f"SSE data must resolve to str, model or JSON object, got {type(value).__name__}"
        )
        self.value = value
