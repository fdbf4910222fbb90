# tests/conftest.py
import itertools
from datetime import datetime, timedelta, timezone

import pytest
from firebase_admin import firestore

from dogbook import create_app
from dogbook.utils.datetime_utils import DateTimeUtils
from tests.fakes import InMemoryFirestore, FakeBucket, run_transactional


@pytest.fixture(autouse=True)
def in_memory_transactions(monkeypatch):
    """Transactions against the in-memory client run once and then commit."""
    monkeypatch.setattr(firestore, "transactional", run_transactional)


@pytest.fixture
def db():
    return InMemoryFirestore()


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def app(db, bucket):
    app = create_app('testing', db=db, bucket=bucket)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clock(monkeypatch):
    """Makes DateTimeUtils.now() advance one second per call."""
    start = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    ticks = itertools.count()
    monkeypatch.setattr(DateTimeUtils, "now", staticmethod(lambda: start + timedelta(seconds=next(ticks))))
    return start


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, email="rex.owner@example.com", password="woofwoof"):
    response = client.post('/api/auth/register', json={"email": email, "password": password})
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def create_dog(client, token, **fields):
    body = {"name": "Rex", "breed": "Beagle", "age": 3}
    body.update(fields)
    response = client.post('/api/dogs', json=body, headers=auth_headers(token))
    assert response.status_code == 201, response.get_json()
    return response.get_json()


@pytest.fixture
def owner(client):
    """A registered user with a dog profile: {'token', 'user', 'dog'}."""
    data = register(client)
    data['dog'] = create_dog(client, data['token'])
    return data
