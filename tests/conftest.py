import itertools
from collections.abc import Iterator
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from homebrew.config import ServiceConfig, get_settings
from homebrew.database import DatabaseConfig, SqlConnection
from homebrew.routers.weather_reports import get_clock, get_oid_factory, get_store
from homebrew.schema import bootstrap_schema
from homebrew.store import RecordStore

API_KEY = "brew-s3cret"
FIXED_NOW = 1_700_000_000


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    bootstrap_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine: Engine) -> RecordStore:
    return RecordStore(SqlConnection(engine))


@pytest.fixture
def settings() -> ServiceConfig:
    return ServiceConfig(
        api_key=API_KEY,
        database=DatabaseConfig(username="test", password="", host="localhost", port=3306, database="test"),
    )


@pytest.fixture
def oid_factory():
    counter = itertools.count(1)
    return lambda: f"oid{next(counter):04d}"


@pytest.fixture
def app_overrides(settings: ServiceConfig, store: RecordStore, oid_factory) -> Dict[Any, Any]:
    return {
        get_settings: lambda: settings,
        get_store: lambda: store,
        get_oid_factory: lambda: oid_factory,
        get_clock: lambda: (lambda: FIXED_NOW),
    }


@pytest.fixture
def client(app_overrides: Dict[Any, Any]) -> Iterator[TestClient]:
    from main import app  # lifespan only runs inside a `with TestClient(...)` block

    app.dependency_overrides.update(app_overrides)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth() -> Dict[str, str]:
    return {"Authorization": API_KEY}
