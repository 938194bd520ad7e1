import itertools

import fakeredis
import pytest
from fastapi.testclient import TestClient

from admission import AdmissionController
from authorizer import AccessAuthorizer
from backend import RedisBackend, get_redis_backend
from constants import AccessConfig
from dependencies import get_access_config


@pytest.fixture
def fake_redis():
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def backend(fake_redis):
    return RedisBackend(fake_redis)


@pytest.fixture
def config():
    return AccessConfig(capacity=3, fallback_ttl_seconds=600)


@pytest.fixture
def token_factory():
    counter = itertools.count(1)
    return lambda: f"token-{next(counter)}"


@pytest.fixture
def controller(backend, config, token_factory):
    return AdmissionController(backend, config, token_factory=token_factory)


@pytest.fixture
def authorizer(backend):
    return AccessAuthorizer(backend)


@pytest.fixture
def live_room(backend):
    """Room r1 with a 300s lifetime and nobody connected."""
    backend.create_room("r1", ttl=300)
    return "r1"


@pytest.fixture
def client(backend, config):
    from app import app

    app.dependency_overrides[get_redis_backend] = lambda: backend
    app.dependency_overrides[get_access_config] = lambda: config
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
