import asyncio
import os
import tempfile
from pathlib import Path

# Must be set before farmledger.config is imported anywhere.
_DB_PATH = Path(tempfile.gettempdir()) / f"farmledger-test-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from hypothesis import HealthCheck, settings

import farmledger.models  # noqa: F401
from farmledger.database import Base, engine
from farmledger.main import app

settings.register_profile(
    "farmledger",
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("farmledger")


async def _reset_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def client():
    asyncio.run(_reset_schema())
    with TestClient(app) as c:
        yield c


def register(client: TestClient, email: str, roles: list[str] | None = None) -> dict:
    payload = {"email": email, "password": "secret123", "full_name": "Test User"}
    if roles is not None:
        payload["roles"] = roles
    resp = client.post("/auth/register", json=payload)
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def owner_headers(client):
    """Farm owner with a farm already created."""
    headers = register(client, "owner@example.com")
    resp = client.post("/farms", json={"name": "Sunrise Layers", "location": "Nakuru"}, headers=headers)
    assert resp.status_code == 201, resp.text
    return headers
