"""Application configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Logging
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

# SSE streaming
# True only for hosts advertising ASGI spec_version < 2.4 (uvicorn reports 2.3):
# Starlette then listens for http.disconnect and cancels the response body.
# On 2.4 hosts it stops listening; set false there to poll for disconnects.
SSE_HOST_PROPAGATES_CANCELLATION: bool = _env_flag("SSE_HOST_PROPAGATES_CANCELLATION", True)
SSE_DISCONNECT_POLL_INTERVAL: float = float(os.environ.get("SSE_DISCONNECT_POLL_INTERVAL", "0.5"))
SSE_WRITE_BUFFER_SIZE: int = int(os.environ.get("SSE_WRITE_BUFFER_SIZE", "16"))
SSE_LOG_UNRECOGNIZED_ERRORS: bool = _env_flag("SSE_LOG_UNRECOGNIZED_ERRORS", True)

# CORS
CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
]
