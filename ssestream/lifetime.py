"""Session lifetime management.

Provides:
- StreamSession: one SSE connection and the request context it depends on
- SessionRegistry: process-wide sessions keyed by id, removed on close
- backport_cancellation: disconnect watcher for hosts that do not cancel the
  response body when the client goes away
"""

import asyncio
import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol

from .stream import SSEStream

logger = logging.getLogger(__name__)


class DisconnectAware(Protocol):
    """Inbound request that can report client disconnection."""

    async def is_disconnected(self) -> bool: ...


@dataclass
class StreamSession:
    """Active SSE connection."""

    session_id: str
    stream: SSEStream
    request: DisconnectAware
    headers: dict[str, str] = field(default_factory=dict)
    task: "asyncio.Task[None] | None" = None
    watcher: "asyncio.Task[None] | None" = None
    created_at: float = field(default_factory=time.monotonic)

    @property
    def closed(self) -> bool:
        return self.stream.closed


class SessionRegistry:
    """Keeps each session's request context alive until its stream closes."""

    def __init__(self) -> None:
        self._sessions: dict[str, StreamSession] = {}

    def register(self, session: StreamSession) -> None:
        """Track ``session`` until its stream reaches the closed state."""
        if session.closed:
            return
        self._sessions[session.session_id] = session
        session.stream.on_close(lambda: self.discard(session.session_id))

    def get(self, session_id: str) -> StreamSession | None:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> StreamSession | None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            logger.debug("[SSE] session %s - released", session_id)
        return session

    def active_ids(self) -> list[str]:
        return list(self._sessions)

    def abort_all(self) -> int:
        """Abort every active session.

        Returns:
            Number of sessions aborted.
        """
        sessions = list(self._sessions.values())
        for session in sessions:
            session.stream.abort()
        if sessions:
            logger.info("[SSE] aborted %d active session(s)", len(sessions))
        return len(sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __iter__(self) -> Iterator[StreamSession]:
        return iter(list(self._sessions.values()))


registry = SessionRegistry()


async def _watch_disconnect(session: StreamSession, poll_interval: float) -> None:
    stream = session.stream
    try:
        while not stream.closed:
            if await session.request.is_disconnected():
                if not stream.closed:
                    logger.info("[SSE] session %s - client disconnected, aborting", session.session_id)
                    stream.abort()
                return
            await asyncio.sleep(poll_interval)
    except Exception:
        logger.exception("[SSE] session %s - disconnect watcher failed", session.session_id)


def backport_cancellation(
    session: StreamSession,
    *,
    propagates_natively: bool,
    poll_interval: float = 0.5,
) -> "asyncio.Task[None] | None":
    """Abort the session's stream when the client disconnects.

    Hosts that cancel the response body on disconnect already abort the
    stream through its readable side; no watcher is started for them.

    Args:
        session: Session to guard.
        propagates_natively: Host cancels the response body on disconnect.
        poll_interval: Seconds between disconnect checks.

    Returns:
        The watcher task, or None when the host propagates cancellation.
    """
    if propagates_natively:
        return None
    watcher = asyncio.create_task(
        _watch_disconnect(session, poll_interval),
        name=f"sse-watch-{session.session_id}",
    )

    def stop_watcher() -> None:
        # The watcher closes the stream itself on disconnect.
        if watcher is not asyncio.current_task():
            watcher.cancel()

    session.stream.on_close(stop_watcher)
    return watcher
