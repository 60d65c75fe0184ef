"""Tests for the call ledger: cost rule, rate-limit lookup, usage rollup, retention."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta
from freight_tracking.models import ApiCallLog
from freight_tracking.services.call_ledger import (
    cost_for, record_call, last_call_for_booking, list_calls, usage_summary, purge_call_logs,
    STATUS_SUCCESS, STATUS_NO_DATA, STATUS_FAILURE,
)
from freight_tracking.services.fastag_client import (
    PROVIDER_GENUINE, PROVIDER_SYNTHETIC, PROVIDER_MOCK_DETECTED,
)

NOW = datetime(2025, 11, 15, 12, 0, 0)


class TestCost:
    def test_only_genuine_is_charged(self):
        assert cost_for(PROVIDER_GENUINE) == 4.0
        assert cost_for(PROVIDER_SYNTHETIC) == 0.0
        assert cost_for(PROVIDER_MOCK_DETECTED) == 0.0

    def test_vendor_only_on_genuine(self, db):
        paid = record_call(db, "MH12AB1234", "BK-1", PROVIDER_GENUINE, STATUS_SUCCESS, 3)
        free = record_call(db, "MH12AB1234", "BK-1", PROVIDER_SYNTHETIC, STATUS_SUCCESS, 3)
        assert paid.vendor == "ApiSathi"
        assert free.vendor is None


class TestLastCall:
    def test_newest_inside_window(self, db):
        record_call(db, "MH12AB1234", "BK-1", PROVIDER_GENUINE, STATUS_SUCCESS, 1,
                    request_time=NOW - timedelta(minutes=4))
        record_call(db, "MH12AB1234", "BK-1", PROVIDER_GENUINE, STATUS_NO_DATA, 0,
                    request_time=NOW - timedelta(minutes=1))
        last = last_call_for_booking(db, "BK-1", since=NOW - timedelta(minutes=5))
        assert last.status == STATUS_NO_DATA

    def test_outside_window_ignored(self, db):
        record_call(db, "MH12AB1234", "BK-1", PROVIDER_GENUINE, STATUS_SUCCESS, 1,
                    request_time=NOW - timedelta(minutes=6))
        assert last_call_for_booking(db, "BK-1", since=NOW - timedelta(minutes=5)) is None

    def test_other_booking_ignored(self, db):
        record_call(db, "MH12AB1234", "BK-2", PROVIDER_GENUINE, STATUS_SUCCESS, 1, request_time=NOW)
        assert last_call_for_booking(db, "BK-1", since=NOW - timedelta(minutes=5)) is None


class TestUsage:
    def _seed(self, db):
        record_call(db, "MH12AB1234", "BK-1", PROVIDER_GENUINE, STATUS_SUCCESS, 3,
                    request_time=NOW - timedelta(days=1, hours=2))
        record_call(db, "MH12AB1234", "BK-1", PROVIDER_GENUINE, STATUS_NO_DATA, 0,
                    request_time=NOW - timedelta(hours=1))
        record_call(db, "KA01XY9999", None, PROVIDER_SYNTHETIC, STATUS_FAILURE, 3,
                    request_time=NOW - timedelta(hours=2))
        record_call(db, "KA01XY9999", None, PROVIDER_GENUINE, STATUS_SUCCESS, 1,
                    request_time=NOW - timedelta(days=45))

    def test_summary_totals(self, db):
        self._seed(db)
        summary = usage_summary(db, days=30, now=NOW)
        assert summary["total_calls"] == 3
        assert summary["paid_calls"] == 2
        assert summary["unpaid_calls"] == 1
        assert summary["total_cost"] == 8.0

    def test_daily_breakdown_oldest_first(self, db):
        self._seed(db)
        daily = usage_summary(db, days=30, now=NOW)["daily"]
        assert [d["date"] for d in daily] == ["2025-11-14", "2025-11-15"]
        assert daily[1]["calls"] == 2
        assert daily[1]["cost"] == 4.0

    def test_list_calls_filters(self, db):
        self._seed(db)
        assert len(list_calls(db, vehicle_number="KA01XY9999")) == 2
        rows = list_calls(db, booking_id="BK-1")
        assert [r.status for r in rows] == [STATUS_NO_DATA, STATUS_SUCCESS]

    def test_purge_removes_only_old_rows(self, db):
        self._seed(db)
        removed = purge_call_logs(db, older_than_days=30, now=NOW)
        assert removed == 1
        assert db.query(ApiCallLog).count() == 3
