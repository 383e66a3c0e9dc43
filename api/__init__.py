"""HTTP API for SSE streaming."""

from .app import create_app

__all__ = ["create_app"]
