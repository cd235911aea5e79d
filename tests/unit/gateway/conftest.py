"""Fixtures for gateway unit tests"""

from collections import defaultdict
from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from topstepx.infrastructure.gateway import (
    SessionManager,
    TopstepXClient,
    TransportResponse,
)
from topstepx.shared.constants import DEFAULT_BASE_URL


class FakeTransport:
    """Scripted stand-in for GatewayTransport

    Responses are queued per path. Each request pops the next outcome; the
    last outcome repeats once the queue is down to one. Exceptions are
    raised instead of returned.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        self.base_url = base_url
        self.authorization: str | None = None
        self.calls: list[tuple[str, str, Any]] = []
        self._outcomes: dict[str, list[Any]] = defaultdict(list)
        self.open_socket = AsyncMock()
        self.aclose = AsyncMock()

    def queue(self, path: str, *outcomes: Any) -> None:
        self._outcomes[path].extend(outcomes)

    def set_bearer_token(self, token: str) -> None:
        self.authorization = f"Bearer {token}"

    def clear_bearer_token(self) -> None:
        self.authorization = None

    def websocket_url(self, path: str) -> str:
        return f"{self.base_url.replace('http', 'ws', 1)}{path}"

    async def request(
        self, method: str, path: str, json_body: Any = None
    ) -> TransportResponse:
        self.calls.append((method, path, json_body))
        outcomes = self._outcomes[path]
        if not outcomes:
            raise AssertionError(f"No response queued for {path}")
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return TransportResponse(status=200, data=outcome)

    def calls_to(self, path: str) -> list[tuple[str, str, Any]]:
        return [call for call in self.calls if call[1] == path]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest_asyncio.fixture
async def session(credentials, fake_transport):
    """SessionManager over the fake transport, torn down after the test"""
    manager = SessionManager(credentials, fake_transport)
    yield manager
    await manager.teardown()


@pytest_asyncio.fixture
async def client(credentials, fake_transport, load_fixture):
    """TopstepXClient whose login succeeds, disconnected after the test"""
    fake_transport.queue("/Auth/loginKey", load_fixture("login_success.json"))
    gateway_client = TopstepXClient(credentials, transport=fake_transport)
    yield gateway_client
    await gateway_client.disconnect()
