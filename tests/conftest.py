"""Shared fixtures: fresh store, broadcaster and limiters per test, wired into the app."""

import pytest
from fastapi.testclient import TestClient

from infrastructure import (
    Broadcaster,
    RateLimiter,
    get_broadcaster,
    get_move_limiter,
    get_upload_limiter,
)
from main import app
from services import get_vision_client
from stores import MemoryStore, get_store

from tests.helpers import FakeClock, FakeVision


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def broadcaster():
    return Broadcaster()


@pytest.fixture
def move_limiter():
    return RateLimiter(60, 1.0, name="move")


@pytest.fixture
def upload_limiter():
    return RateLimiter(5, 60.0, name="upload")


@pytest.fixture
def vision():
    return FakeVision()


@pytest.fixture
def client(store, broadcaster, move_limiter, upload_limiter, vision):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    app.dependency_overrides[get_move_limiter] = lambda: move_limiter
    app.dependency_overrides[get_upload_limiter] = lambda: upload_limiter
    app.dependency_overrides[get_vision_client] = lambda: vision
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
