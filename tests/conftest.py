import asyncio
import os
import tempfile
from datetime import datetime, timedelta, timezone

_TMP = tempfile.mkdtemp(prefix="karts-test-")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP}/global.db"
os.environ["UPLOAD_DIRECTORY"] = os.path.join(_TMP, "uploads")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["ROLE_LETTERS"] = "MBE"
os.environ["SHARED_PASSWORD"] = "1221"
os.environ["SECONDARY_PASSWORD_POLICY"] = "per_code"
os.environ["BPASSWORD_ADMIN_CODE"] = "E00002"
os.environ["FEATURED_MODE"] = "view"
os.environ["FEATURED_CAPACITY"] = "8"
os.environ["FEATURED_SLOT_CAPACITY"] = "2"
os.environ["PROMOTION_REQUIREMENT"] = "image_and_comment"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import karts.models  # noqa: F401
from karts.core import timeutil
from karts.core.database import Base, get_db, get_redis
from karts.core.roles import Role
from karts.core.security import Session
from karts.dependencies import get_image_host
from karts.main import app
from karts.services.document_store import SqlDocumentStore
from karts.services.storage import ImageHost, ImageHostError, UploadResult


class FakeImageHost(ImageHost):
    def __init__(self):
        self.uploads = []

    async def upload(self, data, *, content_type=None, public_id):
        self.uploads.append((public_id, content_type, len(data)))
        return UploadResult(
            secure_url=f"https://img.example/karts-artworks/{public_id}.png",
            public_id=f"karts-artworks/{public_id}",
        )


class FailingImageHost(ImageHost):
    def __init__(self):
        self.attempts = 0

    async def upload(self, data, *, content_type=None, public_id):
        self.attempts += 1
        raise ImageHostError("host unavailable")


class FakeRedis:
    def __init__(self):
        self.data = {}

    async def set(self, key, value, ex=None):
        self.data[key] = value
        return True

    async def exists(self, key):
        return int(key in self.data)


def make_session(code: str, role: Role) -> Session:
    return Session(
        code=code,
        role=role,
        token_id="test-token",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )


def _make_engine(path):
    return create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)


async def _create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
async def store(tmp_path):
    engine = _make_engine(tmp_path / "store.db")
    await _create_tables(engine)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield SqlDocumentStore(session)
    await engine.dispose()


@pytest.fixture
def clock(monkeypatch):
    """utcnow 가 호출될 때마다 1초씩 증가"""
    state = {"now": datetime(2025, 1, 1, tzinfo=timezone.utc)}

    def fake_utcnow():
        state["now"] = state["now"] + timedelta(seconds=1)
        return state["now"]

    monkeypatch.setattr(timeutil, "utcnow", fake_utcnow)
    return state


@pytest.fixture
def primary():
    return make_session("M00001", Role.PRIMARY)


@pytest.fixture
def secondary():
    return make_session("B00001", Role.SECONDARY)


@pytest.fixture
def admin():
    return make_session("E00002", Role.ADMIN)


@pytest.fixture
def image_host():
    return FakeImageHost()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(tmp_path, image_host, fake_redis):
    engine = _make_engine(tmp_path / "api.db")
    asyncio.run(_create_tables(engine))
    factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: fake_redis
    app.dependency_overrides[get_image_host] = lambda: image_host
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, code, password=None):
    res = client.post("/auth/login", json={"code": code, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}
