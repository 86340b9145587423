"""Unit tests for station registry helpers."""

import pytest
from app.models.station import Station
from app.schemas.station import StationCreate
from app.services.station_service import extract_brand_from_name, create_station, set_station_active


class TestBrandExtraction:
    @pytest.mark.parametrize("name,brand", [
        ("Oryx Badalabougou", "Oryx"),
        ("SHELL Hippodrome", "Shell"),
        ("total Sébénicoro", "Total"),
        ("Cam Holding Kalaban", "Cam holding"),
        ("Station du Fleuve", None),
        ("Shell", None),
    ])
    def test_brand_from_name_prefix(self, name, brand):
        assert extract_brand_from_name(name) == brand

    def test_explicit_brand_wins(self):
        assert extract_brand_from_name("Shell Hippodrome", "  Independent ") == "Independent"

    def test_blank_brand_falls_back_to_name(self):
        assert extract_brand_from_name("Oryx ACI 2000", "   ") == "Oryx"


class TestStationRegistry:
    def test_create_infers_brand(self, db):
        station = create_station(db, StationCreate(
            name="  Total Sebenikoro ", municipality="Bamako", neighborhood="Sebenikoro",
            latitude=12.6, longitude=-8.05))
        stored = db.query(Station).filter(Station.id == station.id).one()
        assert stored.name == "Total Sebenikoro"
        assert stored.brand == "Total"
        assert stored.is_active is True

    def test_deactivate(self, db, make_station):
        station = set_station_active(db, make_station(), False)
        assert db.query(Station).filter(Station.id == station.id).one().is_active is False
