"""Shared test fixtures."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

import cidade_alerta.main as main_module
from cidade_alerta.auth.jwt_provider import JwtIdentityProvider
from cidade_alerta.auth.users import MemoryUserDirectory
from cidade_alerta.config import AppConfig
from cidade_alerta.core.models import Category, Location, Report, Severity, Status
from cidade_alerta.storage.memory_storage import MemoryReportStore

TEST_SECRET = "test-secret-at-least-32-bytes-long!!"

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_report():
    """Factory for Report objects with sensible defaults."""
    counter = itertools.count(1)

    def _make(lat=0.0, lon=0.0, **kwargs) -> Report:
        n = next(counter)
        kwargs.setdefault("id", f"r{n}")
        kwargs.setdefault("severity", Severity.MEDIUM)
        kwargs.setdefault("category", Category.INFRASTRUCTURE)
        kwargs.setdefault("status", Status.REPORTED)
        kwargs.setdefault("title", f"Problem {n}")
        kwargs.setdefault("created_at", BASE_TIME + timedelta(minutes=n))
        return Report(location=Location(latitude=lat, longitude=lon), **kwargs)

    return _make


@pytest.fixture
def store():
    return MemoryReportStore()


@pytest.fixture
def users():
    return MemoryUserDirectory({"citizen-1": False, "authority-1": True})


@pytest.fixture
def jwt_secret():
    return TEST_SECRET


@pytest.fixture
def identity(users, jwt_secret):
    return JwtIdentityProvider(secret=jwt_secret, users=users)


@pytest.fixture(autouse=True)
def _init_server(store, identity):
    """Initialize server singletons for every test, using in-memory backends."""
    config = AppConfig()
    config.storage.backend = "memory"
    config.auth.jwt_secret = TEST_SECRET
    config.logging.level = "warning"

    # Patch module-level singletons
    main_module._config = config
    main_module._store = store
    main_module._identity = identity

    yield

    # Cleanup
    main_module._config = None
    main_module._store = None
    main_module._identity = None


@pytest.fixture
async def client():
    from cidade_alerta.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
