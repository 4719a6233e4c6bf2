"""Pytest configuration and shared fixtures for testing."""

import json
import os
from decimal import Decimal
from typing import Callable
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from bitkub_hook.client import BitkubClient
from bitkub_hook.config import BitkubConfig
from bitkub_hook.models import Balance
from bitkub_hook.notifier import LineNotifier


# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

FIXED_TS = 1700000000


@pytest.fixture
def fixed_ts() -> int:
    """Timestamp returned by the clock of clients built with make_client."""
    return FIXED_TS


@pytest.fixture
def test_config() -> BitkubConfig:
    """Provide a test configuration."""
    return BitkubConfig(
        api_key="test-api-key",
        api_secret="test-api-secret",
        notify_token="test-notify-token",
        api_url="https://bitkub.test/api/",
        notify_url="https://notify.test/api/notify",
        test_mode=False,
    )


@pytest.fixture
def order_payload() -> dict:
    """A successful place-bid result as Bitkub returns it."""
    return {
        "id": 1,
        "hash": "fwQ6dnQWQPs4cbatF5Am2xCDP1J",
        "typ": "limit",
        "amt": 1000,
        "rat": 15000,
        "fee": 2.5,
        "cre": 2.5,
        "rec": 0.06666666,
        "ts": 1533834547,
    }


@pytest.fixture
def balances_payload() -> dict:
    return {
        "THB": {"available": 1000, "reserved": 0},
        "IOST": {"available": 37.5, "reserved": 2.5},
    }


@pytest.fixture
def recorded_requests() -> list:
    """Requests seen by the mock exchange transport."""
    return []


@pytest.fixture
def exchange_transport(recorded_requests) -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport answering every request with ``body``."""

    def factory(body=None, *, status_code: int = 200, raw: bytes = None, exc: Exception = None):
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            if exc is not None:
                raise exc
            if raw is not None:
                return httpx.Response(status_code, content=raw)
            return httpx.Response(status_code, content=json.dumps(body).encode())

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def make_client(test_config, exchange_transport) -> Callable[..., BitkubClient]:
    """Build a BitkubClient with a fixed clock and a mocked exchange."""

    def factory(body=None, **kwargs) -> BitkubClient:
        return BitkubClient(
            test_config,
            transport=exchange_transport(body, **kwargs),
            clock=lambda: FIXED_TS,
        )

    return factory


@pytest.fixture
def mock_notifier() -> LineNotifier:
    notifier = Mock(spec=LineNotifier)
    notifier.send = AsyncMock(return_value=True)
    return notifier


@pytest.fixture
def sample_balances():
    return {
        "THB": Balance(available=Decimal("1000"), reserved=Decimal("0")),
        "IOST": Balance(available=Decimal("37.5"), reserved=Decimal("0")),
    }


@pytest.fixture
def env_vars() -> dict:
    """Provide the required environment variables."""
    return {
        "BITKUB_API_KEY": "env-api-key",
        "BITKUB_API_SECRET": "env-api-secret",
        "LINE_NOTIFY_TOKEN": "env-notify-token",
    }


@pytest.fixture(autouse=True)
def clean_env():
    """Clean environment variables before each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith(("BITKUB_", "LINE_")):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)
