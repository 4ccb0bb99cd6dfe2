from __future__ import annotations

from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from devconnector.api.server import create_app
from devconnector.config import Config
from devconnector.db import init_db


@pytest.fixture
def cfg(tmp_path) -> Config:
    return Config(
        DB_DSN=str(tmp_path / "devconnector-test.sqlite"),
        AUTH_JWT_SECRET="test-secret",
        CORS_ALLOW_ORIGINS="",
    )


@pytest.fixture
def db(cfg) -> str:
    init_db(cfg.DB_DSN)
    return cfg.DB_DSN


@pytest.fixture
def client(cfg):
    app = create_app(cfg)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client) -> Callable[..., str]:
    """Register a user through the API and return its token."""

    def _register(name: str = "A", email: str = "a@x.com", password: str = "secret1") -> str:
        r = client.post("/api/users", json={"name": name, "email": email, "password": password})
        assert r.status_code == 200, r.text
        return r.json()["token"]

    return _register


def auth_headers(token: str) -> Dict[str, str]:
    return {"x-auth-token": token}


@pytest.fixture
def headers() -> Callable[[str], Dict[str, str]]:
    return auth_headers
