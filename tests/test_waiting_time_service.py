"""Unit tests for the waiting-time estimator."""

import pytest
from app.services.waiting_time_service import (
    WaitingTime, estimate_waiting_time, compute_waiting_time,
)


class TestEstimateWaitingTime:
    def test_two_pumps_medium_queue(self):
        # floor(3/2*3)=4, floor(10/2*3)=15
        assert estimate_waiting_time("Q_10_30", 2) == WaitingTime(4, 15)

    def test_unset_pumps_count_as_one(self):
        assert estimate_waiting_time("Q_0_10", None) == WaitingTime(0, 9)

    def test_zero_pumps_count_as_one(self):
        assert estimate_waiting_time("Q_60_PLUS", 0) == WaitingTime(60, 150)

    @pytest.mark.parametrize("category,expected", [
        ("Q_0_10", WaitingTime(0, 3)),
        ("Q_10_30", WaitingTime(3, 10)),
        ("Q_30_60", WaitingTime(10, 20)),
        ("Q_60_PLUS", WaitingTime(20, 50)),
    ])
    def test_three_pumps_equal_vehicle_count(self, category, expected):
        assert estimate_waiting_time(category, 3) == expected

    def test_no_category_is_unknown(self):
        result = estimate_waiting_time(None, 2)
        assert result == WaitingTime(None, None)
        assert not result.is_known

    def test_unknown_category_is_unknown(self):
        assert estimate_waiting_time("Q_FOREVER", 1) == WaitingTime(None, None)


class TestComputeWaitingTime:
    def test_no_contributions(self, db, make_station):
        station = make_station()
        assert compute_waiting_time(db, station.id) == WaitingTime(None, None)

    def test_contributions_without_queue(self, db, make_station, add_contribution):
        station = make_station()
        add_contribution(station, minutes_ago=5, fuel_status="OUT")
        add_contribution(station, minutes_ago=1, fuel_status="AVAILABLE")
        assert compute_waiting_time(db, station.id) == WaitingTime(None, None)

    def test_only_newest_queue_report_counts(self, db, make_station, add_contribution):
        station = make_station()
        add_contribution(station, minutes_ago=30, queue="Q_60_PLUS")
        add_contribution(station, minutes_ago=20, queue="Q_60_PLUS")
        add_contribution(station, minutes_ago=2, queue="Q_0_10")
        assert compute_waiting_time(db, station.id) == WaitingTime(0, 9)

    def test_newer_report_without_queue_is_skipped(self, db, make_station, add_contribution):
        station = make_station()
        add_contribution(station, minutes_ago=10, queue="Q_30_60")
        add_contribution(station, minutes_ago=1, fuel_status="OUT")
        assert compute_waiting_time(db, station.id) == WaitingTime(30, 60)

    def test_pumps_taken_from_latest_status(self, db, make_station, add_contribution, add_status):
        station = make_station()
        add_status(station, "GASOIL", minutes_ago=50, pumps_active=5)
        add_status(station, "ESSENCE", minutes_ago=5, pumps_active=2)
        add_contribution(station, minutes_ago=1, queue="Q_10_30")
        assert compute_waiting_time(db, station.id) == WaitingTime(4, 15)

    def test_other_station_reports_ignored(self, db, make_station, add_contribution):
        station = make_station()
        other = make_station("Total ACI")
        add_contribution(other, minutes_ago=1, queue="Q_60_PLUS")
        assert compute_waiting_time(db, station.id) == WaitingTime(None, None)
