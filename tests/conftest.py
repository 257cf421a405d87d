import os
import tempfile
from dataclasses import dataclass, field
from typing import Any

import pytest

# settings are read at import time
_tmp = tempfile.mkdtemp(prefix="roomchat-test-")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp}/test.db"

from fastapi.testclient import TestClient  # noqa: E402

from roomchat.main import app  # noqa: E402
from roomchat.services.gateway import SessionGateway, get_gateway  # noqa: E402


@dataclass
class FakeSocket:
    """Stands in for a websocket; records what the server sends."""

    sent: list[dict] = field(default_factory=list)
    broken: bool = False

    async def send_json(self, data: Any) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    def events(self, name: str) -> list:
        return [f["data"] for f in self.sent if f["event"] == name]


@pytest.fixture
def gateway():
    return SessionGateway()


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    def _login(username: str, password: str = "pw-123456") -> str:
        client.post("/api/auth/register", json={"username": username, "password": password})
        r = client.post("/api/auth/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return r.json()["token"]
    return _login
