import asyncio
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from shop_service.config import Settings
from shop_service.db.database import build_engine
from shop_service.db.init_db import init_db
from shop_service.main import create_app
from shop_service.notifications import NotificationGateway, NotificationOutcome

ADMIN_SECRET = "s3cret"


class RecordingGateway(NotificationGateway):
    def __init__(self):
        self.notices = []

    async def notify(self, notice):
        self.notices.append(notice)
        return NotificationOutcome.ok()


class FailingGateway(NotificationGateway):
    def __init__(self):
        self.calls = 0

    async def notify(self, notice):
        self.calls += 1
        raise RuntimeError("merchant channel is down")


def drain(client: TestClient):
    """Wait for notification tasks started by earlier requests."""
    client.portal.call(client.app.state.dispatcher.drain)


def foreign_keys_enforced(client: TestClient) -> bool:
    async def pragma():
        async with client.app.state.engine.connect() as conn:
            return (await conn.execute(text("PRAGMA foreign_keys"))).scalar()

    return client.portal.call(pragma) == 1


@asynccontextmanager
async def open_db(path):
    engine = build_engine(Settings(database_url=f"sqlite+aiosqlite:///{path}"))
    await init_db(engine)
    try:
        async with AsyncSession(engine, expire_on_commit=False) as db:
            yield db
    finally:
        await engine.dispose()


def run(coro):
    return asyncio.run(coro)


def make_settings(tmp_path, **overrides):
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'shop.db'}", environment="test", **overrides)


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def client(tmp_path, gateway):
    app = create_app(make_settings(tmp_path), gateway=gateway)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def secured_client(tmp_path, gateway):
    app = create_app(make_settings(tmp_path, admin_secret=ADMIN_SECRET), gateway=gateway)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def admin_headers():
    return {"X-Admin-Secret": ADMIN_SECRET}
