"""Shared test fixtures for task board tests."""

from datetime import datetime, timedelta, timezone

import pytest

from taskboard.config import BoardConfig
from taskboard.server import create_app
from taskboard.store import CardStore


class TickingClock:
    """Deterministic clock: each call advances one second."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    return CardStore(clock=clock)


@pytest.fixture
def app(store):
    app = create_app(BoardConfig(seed_examples=False), store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
