"""Shared fixtures for SSE streaming tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from ssestream import SessionRegistry, SSEOptions


class FakeRequest:
    """Request double whose client can be disconnected on demand."""

    def __init__(self) -> None:
        self._disconnected = False
        self.checks = 0

    def disconnect(self) -> None:
        self._disconnected = True

    async def is_disconnected(self) -> bool:
        self.checks += 1
        return self._disconnected


@pytest.fixture
def fake_request() -> FakeRequest:
    return FakeRequest()


@pytest.fixture
def sessions() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def client(sessions: SessionRegistry) -> Iterator[TestClient]:
    app = create_app(options=SSEOptions(), sessions=sessions)
    with TestClient(app) as test_client:
        yield test_client
