from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from showroom.core.config import settings
from showroom.core.database import Base, get_db
from showroom.core.security import create_access_token
from showroom.main import app
from showroom.models import user_model, vehicle_model  # noqa: F401


class FakeVehicleStore:
    """In-memory stand-in for the aggregate side of VehicleStore."""

    def __init__(self, vehicles=None):
        self.vehicles = list(vehicles or [])
        self.price_range_calls = []

    def added_timestamps(self):
        return [v.created_at for v in self.vehicles]

    def count_by_brand(self):
        counts = {}
        for v in self.vehicles:
            counts[v.brand] = counts.get(v.brand, 0) + 1
        return list(counts.items())

    def count_by_type(self):
        groups = {}
        for v in self.vehicles:
            count, total = groups.get(v.type, (0, Decimal(0)))
            groups[v.type] = (count + 1, total + Decimal(str(v.price)))
        return [(key, count, total) for key, (count, total) in groups.items()]

    def count_in_price_range(self, lower, upper):
        self.price_range_calls.append((lower, upper))
        return sum(
            1 for v in self.vehicles
            if v.price >= lower and (upper is None or v.price < upper)
        )


def make_vehicle(brand="Toyota", type="Sedan", price=0, created_at=None):
    return SimpleNamespace(
        brand=brand,
        type=type,
        price=price,
        created_at=created_at or datetime(2026, 1, 5, 10, 30),
    )


@pytest.fixture
def fake_store_factory():
    return FakeVehicleStore


@pytest.fixture
def vehicle_factory():
    return make_vehicle


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def client(db_session, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(settings, "PURGE_ORPHANED_UPLOADS", False)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": "admin", "id": 1, "username": "admin", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}
