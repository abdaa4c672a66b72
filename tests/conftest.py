"""Shared pytest fixtures for DevMatch tests."""
import os

# Settings are read once at import time by app.database / app.main.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import app.models  # noqa: F401  (registers every table on Base.metadata)
from app.database import Base, get_db
from app.services.credential_service import CredentialService
from app.services.user_directory import UserDirectory

STRONG_PASSWORD = "Str0ng!Pass"


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    db_path = tmp_path / "devmatch.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield maker

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    from app.main import app

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def credentials():
    return CredentialService()


@pytest.fixture
def make_user(db, credentials):
    """Create a user through the directory; returns the ORM object."""
    directory = UserDirectory(db, credentials)
    counter = {"n": 0}

    async def _make(first_name=None, **overrides):
        counter["n"] += 1
        n = counter["n"]
        profile = {
            "firstName": first_name or f"User{n:03d}",
            "lastName": "Tester",
            "emailId": f"user{n}@example.com",
            "password": STRONG_PASSWORD,
        }
        profile.update(overrides)
        return await directory.create(profile)

    return _make


async def signup_and_login(client, first_name, email, password=STRONG_PASSWORD):
    """Register through the API and leave the session cookie on ``client``."""
    resp = await client.post(
        "/signup",
        json={"firstName": first_name, "lastName": "Doe", "emailId": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    return await login(client, email, password)


async def login(client, email, password=STRONG_PASSWORD):
    resp = await client.post("/login", json={"emailId": email, "password": password})
    assert resp.status_code == 200, resp.text
    token = resp.cookies["token"]
    client.cookies.clear()
    client.cookies.set("token", token)
    me = await client.get("/profile")
    assert me.status_code == 200, me.text
    return me.json()
