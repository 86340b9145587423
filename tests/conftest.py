"""Shared fixtures: in-memory SQLite session + small row factories."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_DIR", "")

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
import app.models  # noqa: F401 — registers all tables
from app.models.station import Station
from app.models.station_status import StationStatus
from app.models.contribution import Contribution

NOW = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def db():
    """Fresh in-memory SQLite database with all tables for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def make_station(db):
    def _make(name="Shell Hippodrome", is_active=True):
        station = Station(
            name=name, brand=None, municipality="Bamako", neighborhood="Hippodrome",
            latitude=12.65, longitude=-8.0, is_active=is_active,
            created_at=NOW, updated_at=NOW,
        )
        db.add(station)
        db.commit()
        return station
    return _make


@pytest.fixture
def add_contribution(db):
    def _add(station, minutes_ago=0, source="PUBLIC", queue=None, fuel_status=None):
        c = Contribution(
            station_id=station.id, source_type=source, queue_category=queue,
            fuel_status=fuel_status, created_at=NOW - timedelta(minutes=minutes_ago),
        )
        db.add(c)
        db.commit()
        return c
    return _add


@pytest.fixture
def add_status(db):
    def _add(station, fuel_type="ESSENCE", minutes_ago=0, availability="AVAILABLE",
             pumps_active=None, waiting_time_max=None, source="PUBLIC"):
        s = StationStatus(
            station_id=station.id, fuel_type=fuel_type, availability=availability,
            pumps_active=pumps_active, waiting_time_min=None, waiting_time_max=waiting_time_max,
            reliability_score=0, last_update_source=source,
            updated_at=NOW - timedelta(minutes=minutes_ago),
        )
        db.add(s)
        db.commit()
        return s
    return _add
