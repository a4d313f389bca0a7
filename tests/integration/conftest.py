from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from dineflow.api import dependencies
from dineflow.api.main import app
from dineflow.infrastructure.auth.tokens import Role, issue_token
from dineflow.infrastructure.db import session as db_session

BACKEND_DIR = Path(__file__).resolve().parents[2]


@pytest.fixture(autouse=True)
def integration_environment(monkeypatch) -> Iterator[None]:
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("AUTH_JWT_SECRET", "integration-secret")
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")
    for name in ("REDIS_URL", "DATABASE_URL", "PAYMENT_PROCESSOR_URL", "AUTH_JWT_AUDIENCE"):
        monkeypatch.delenv(name, raising=False)

    dependencies.get_stores.cache_clear()
    dependencies.get_payment_gateway.cache_clear()
    db_session._build_engine.cache_clear()
    yield
    dependencies.get_stores.cache_clear()
    dependencies.get_payment_gateway.cache_clear()
    db_session._build_engine.cache_clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth() -> Callable[[Role], dict[str, str]]:
    def _headers(role: Role, user_id: str | None = None) -> dict[str, str]:
        token = issue_token(user_id or f"usr_{role.value}", role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def owner(auth) -> dict[str, str]:
    return auth(Role.OWNER)


@pytest.fixture
def staff(auth) -> dict[str, str]:
    return auth(Role.STAFF)


@pytest.fixture
def customer(auth) -> dict[str, str]:
    return auth(Role.CUSTOMER, "usr_guest")


@pytest.fixture
def create_table(client, owner) -> Callable[..., dict]:
    def _create(number: int, capacity: int) -> dict:
        response = client.post("/v1/tables", json={"number": number, "capacity": capacity}, headers=owner)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_menu_item(client, owner) -> Callable[..., dict]:
    def _create(name: str, price: str, category: str = "mains", **extra) -> dict:
        body = {"name": name, "price": price, "category": category, **extra}
        response = client.post("/v1/menu-items", json=body, headers=owner)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
