from __future__ import annotations

import pytest
from helpers import FakeEngine

from tgquery.config import Settings
from tgquery.dispatcher import Dispatcher
from tgquery.facade import UserQueries


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, request_timeout_seconds=1.0)


@pytest.fixture
def dispatcher(engine: FakeEngine, settings: Settings) -> Dispatcher:
    return Dispatcher(engine, settings)


@pytest.fixture
def queries(dispatcher: Dispatcher, settings: Settings) -> UserQueries:
    return UserQueries(dispatcher, settings)
