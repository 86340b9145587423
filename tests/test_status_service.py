"""Availability upsert through the read-then-branch path used by dialects without ON CONFLICT."""

import pytest
from unittest.mock import MagicMock, patch
from sqlalchemy.exc import DBAPIError, IntegrityError
from app.models.station_status import StationStatus
from app.models.enums import Availability, FuelType, SourceType
from app.services.status_service import StatusWriteRejected, upsert_station_status


class InsufficientPrivilege(Exception):
    pgcode = "42501"


@pytest.fixture
def no_native_upsert():
    with patch("app.services.status_service._dialect_insert", return_value=None):
        yield


def rows(db, station):
    return db.query(StationStatus).filter(StationStatus.station_id == station.id).all()


class TestReadThenWrite:
    def test_existing_row_updated_in_place(self, db, make_station, add_status, now, no_native_upsert):
        station = make_station()
        add_status(station, "ESSENCE", minutes_ago=30, availability="AVAILABLE", pumps_active=2)

        upsert_station_status(db, station.id, FuelType.ESSENCE, Availability.OUT,
                              SourceType.TRUSTED, now, pumps_active=4)
        db.commit()

        [row] = rows(db, station)
        assert (row.availability, row.last_update_source, row.pumps_active) == ("OUT", "TRUSTED", 4)
        assert row.updated_at == now

    def test_missing_row_inserted(self, db, make_station, now, no_native_upsert):
        station = make_station()

        upsert_station_status(db, station.id, FuelType.GASOIL, Availability.LIMITED,
                              SourceType.PUBLIC, now)
        db.commit()

        [row] = rows(db, station)
        assert (row.fuel_type, row.availability, row.last_update_source) == ("GASOIL", "LIMITED", "PUBLIC")
        assert row.reliability_score == 0

    def test_lost_insert_race_falls_back_to_update(self, now, no_native_upsert):
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        db.add.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        upsert_station_status(db, 1, FuelType.ESSENCE, Availability.OUT, SourceType.OFFICIAL, now)

        db.query.return_value.filter.return_value.update.assert_called_once_with({
            "availability": "OUT",
            "last_update_source": "OFFICIAL",
            "updated_at": now,
        })

    def test_policy_denial_on_update_is_a_rejection(self, now, no_native_upsert):
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = MagicMock()
        db.flush.side_effect = DBAPIError("UPDATE", {}, InsufficientPrivilege("denied"))

        with pytest.raises(StatusWriteRejected):
            upsert_station_status(db, 1, FuelType.GASOIL, Availability.OUT, SourceType.PUBLIC, now)

    def test_policy_denial_on_insert_is_a_rejection(self, now, no_native_upsert):
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        db.add.side_effect = DBAPIError("INSERT", {}, InsufficientPrivilege("denied"))

        with pytest.raises(StatusWriteRejected):
            upsert_station_status(db, 1, FuelType.GASOIL, Availability.OUT, SourceType.PUBLIC, now)
