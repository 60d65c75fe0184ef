"""Tests for the booking journey timeline."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import MagicMock
from datetime import datetime, timedelta
from freight_tracking.config import settings
from freight_tracking.services.journey_service import (
    build_journey, merge_events, JourneyEvent,
    VEHICLE_ASSIGNED, VEHICLE_RELEASED, ARRIVED_AT_WAREHOUSE, DEPARTED_FROM_WAREHOUSE, TOLL_CROSSED,
)
from freight_tracking.services.crossing_persister import persist_crossings
from freight_tracking.services.fastag_client import PROVIDER_GENUINE
from factories import make_record, seed_assignment, seed_consignment

T0 = datetime(2025, 11, 15, 8, 0, 0)


class TestBuildJourney:
    def test_events_sorted_by_time(self, db):
        seed_consignment(db, arrival=T0, departure=T0 + timedelta(hours=3))
        seed_assignment(db, assigned_at=T0 + timedelta(hours=1))

        journey = build_journey(db, "BK-1")

        assert [e.event_type for e in journey] == [
            ARRIVED_AT_WAREHOUSE, VEHICLE_ASSIGNED, DEPARTED_FROM_WAREHOUSE,
        ]
        assert journey[0].description == "Arrived at Bhiwandi Hub warehouse, Bhiwandi"
        assert journey[1].description == "Vehicle MH 12 AB 1234 assigned with driver Ramesh"
        assert journey[1].driver_name == "Ramesh"

    def test_release_event(self, db):
        seed_assignment(db, status="RELEASED", assigned_at=T0, released_at=T0 + timedelta(hours=5),
                        driver_name=None)
        journey = build_journey(db, "BK-1")
        assert [e.event_type for e in journey] == [VEHICLE_ASSIGNED, VEHICLE_RELEASED]
        assert journey[0].description == "Vehicle MH 12 AB 1234 assigned"

    def test_toll_crossings_interleaved(self, db):
        seed_assignment(db, assigned_at=T0)
        persist_crossings(db, "BK-1", "VA-1", "MH12AB1234",
                          [make_record("Vashi Toll Plaza", T0 + timedelta(hours=2))], PROVIDER_GENUINE)
        seed_consignment(db, arrival=T0 + timedelta(hours=4))

        journey = build_journey(db, "BK-1")

        assert [e.event_type for e in journey] == [VEHICLE_ASSIGNED, TOLL_CROSSED, ARRIVED_AT_WAREHOUSE]
        assert journey[1].toll_name == "Vashi Toll Plaza"
        assert journey[1].description == "Crossed Vashi Toll Plaza"

    def test_other_bookings_excluded(self, db):
        seed_assignment(db, booking_id="BK-2", assigned_at=T0)
        assert build_journey(db, "BK-1") == []

    def test_missing_timestamps_produce_no_events(self, db):
        seed_consignment(db, arrival=None, departure=None)
        assert build_journey(db, "BK-1") == []


class TestJourneyView:
    def test_missing_view_falls_back_to_local_merge(self, db, monkeypatch):
        monkeypatch.setattr(settings, "JOURNEY_VIEW_ENABLED", True)
        seed_assignment(db, assigned_at=T0)
        journey = build_journey(db, "BK-1")
        assert [e.event_type for e in journey] == [VEHICLE_ASSIGNED]

    def test_view_rows_are_used(self, monkeypatch):
        monkeypatch.setattr(settings, "JOURNEY_VIEW_ENABLED", True)
        db = MagicMock()
        db.execute.return_value.mappings.return_value.all.return_value = [
            {"event_time": "2025-11-15 10:00:00", "event_type": DEPARTED_FROM_WAREHOUSE,
             "description": "Departed from Bhiwandi Hub warehouse"},
            {"event_time": T0, "event_type": VEHICLE_ASSIGNED, "description": "Vehicle assigned",
             "vehicle_number": "MH12AB1234"},
        ]

        journey = build_journey(db, "BK-1")

        assert [e.event_type for e in journey] == [VEHICLE_ASSIGNED, DEPARTED_FROM_WAREHOUSE]
        assert journey[1].event_time == datetime(2025, 11, 15, 10, 0, 0)
        db.query.assert_not_called()


class TestMerge:
    def test_ties_keep_source_order(self):
        a = JourneyEvent(T0, VEHICLE_ASSIGNED, "a")
        b = JourneyEvent(T0, ARRIVED_AT_WAREHOUSE, "b")
        assert [e.description for e in merge_events([a], [b])] == ["a", "b"]
