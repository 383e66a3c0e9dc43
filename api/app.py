"""FastAPI application factory."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from config import (
    CORS_ORIGINS,
    SSE_DISCONNECT_POLL_INTERVAL,
    SSE_HOST_PROPAGATES_CANCELLATION,
    SSE_LOG_UNRECOGNIZED_ERRORS,
    SSE_WRITE_BUFFER_SIZE,
)
from ssestream import SessionRegistry, SSEOptions, registry, stream_sse

from .schemas import SessionsResponse, TickerRequest
from .ticker import log_ticker_error, ticker_producer


def create_app(
    options: SSEOptions | None = None,
    sessions: SessionRegistry | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if options is None:
        options = SSEOptions(
            propagates_cancellation=SSE_HOST_PROPAGATES_CANCELLATION,
            disconnect_poll_interval=SSE_DISCONNECT_POLL_INTERVAL,
            buffer_size=SSE_WRITE_BUFFER_SIZE,
            log_unrecognized=SSE_LOG_UNRECOGNIZED_ERRORS,
        )
    if sessions is None:
        sessions = registry

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        sessions.abort_all()

    @app.get("/")
    async def root() -> dict[str, Any]:
        return {"message": "SSE streaming service"}

    @app.get("/sessions")
    async def list_sessions() -> SessionsResponse:
        """Открытые SSE-сессии."""
        ids = sessions.active_ids()
        return SessionsResponse(active=len(ids), sessions=ids)

    @app.post("/events/ticker/stream")
    async def stream_ticker(body: TickerRequest, request: Request) -> StreamingResponse:
        return stream_sse(
            request,
            ticker_producer(body),
            log_ticker_error,
            options=options,
            sessions=sessions,
        )

    return app
