"""Configuration tests."""

import importlib

import pytest

import config
from ssestream import SSEOptions


@pytest.fixture
def reload_config(monkeypatch):
    def reload(**env: str):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return importlib.reload(config)

    yield reload
    monkeypatch.undo()
    importlib.reload(config)


def test_native_cancellation_is_default(reload_config, monkeypatch):
    monkeypatch.delenv("SSE_HOST_PROPAGATES_CANCELLATION", raising=False)

    settings = reload_config()

    assert settings.SSE_HOST_PROPAGATES_CANCELLATION is True
    assert SSEOptions().propagates_cancellation is True


@pytest.mark.parametrize("value", ["false", "0", "no", "off"])
def test_asgi_24_hosts_can_disable_native_cancellation(reload_config, value):
    settings = reload_config(SSE_HOST_PROPAGATES_CANCELLATION=value)

    assert settings.SSE_HOST_PROPAGATES_CANCELLATION is False
