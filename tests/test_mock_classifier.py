"""Unit tests for the mock-data classifier."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from freight_tracking.services.mock_classifier import MockDataClassifier, MockDetectionPolicy
from factories import make_record


def genuine_batch(count, plaza="Vashi Toll Plaza"):
    return [make_record(plaza, f"2025-11-15 {8 + i // 6:02d}:{(i * 7) % 60:02d}:31") for i in range(count)]


class TestBatchFixtureDetection:
    def test_known_fixture_batch_flagged_as_mock(self):
        records = [
            make_record("Pattana", "2025-10-01 02:52:12"),
            make_record("Halaharvi TOLL PLAZA", "2025-09-30 19:52:38"),
            make_record("Some Other Plaza", "2025-09-30 15:10:00"),
        ]
        result = MockDataClassifier().classify(records)
        assert result.is_genuine is False
        assert len(result.kept) == 3    # nothing removed, the whole call is just zero-costed

    def test_fixture_names_in_wrong_order_are_genuine(self):
        records = [
            make_record("Halaharvi TOLL PLAZA"),
            make_record("Pattana"),
            make_record("Vashi Toll Plaza"),
        ]
        assert MockDataClassifier().classify(records).is_genuine is True

    def test_fixture_names_in_larger_batch_are_not_a_batch_match(self):
        records = [make_record("Pattana"), make_record("Halaharvi TOLL PLAZA"),
                   make_record("A"), make_record("B")]
        result = MockDataClassifier().classify(records)
        assert result.is_genuine is True
        assert len(result.kept) == 4


class TestSuspiciousRowStripping:
    def test_twelve_row_batch_drops_two_fixture_rows(self):
        records = genuine_batch(10) + [
            make_record("Pattana", "2025-11-15 14:15:00"),
            make_record("Kherki Daula Toll Plaza", "2025-11-15 16:58:00"),
        ]
        result = MockDataClassifier().classify(records)
        assert result.is_genuine is True
        assert len(result.kept) == 10
        assert result.dropped == 2
        assert all(r.toll_plaza_name == "Vashi Toll Plaza" for r in result.kept)

    def test_fixture_plaza_with_nonzero_seconds_is_kept(self):
        records = genuine_batch(10) + [make_record("Pattana", "2025-11-15 14:15:07")]
        assert len(MockDataClassifier().classify(records).kept) == 11

    def test_fixture_plaza_on_ordinary_minute_is_kept(self):
        records = genuine_batch(10) + [make_record("Pattana", "2025-11-15 14:16:00")]
        assert len(MockDataClassifier().classify(records).kept) == 11

    def test_non_fixture_plaza_on_suspicious_minute_is_kept(self):
        records = genuine_batch(10) + [make_record("Vashi Toll Plaza", "2025-11-15 14:50:00")]
        assert len(MockDataClassifier().classify(records).kept) == 11

    def test_batches_of_ten_or_fewer_are_not_stripped(self):
        records = genuine_batch(9) + [make_record("Pattana", "2025-11-15 14:00:00")]
        result = MockDataClassifier().classify(records)
        assert len(result.kept) == 10
        assert result.dropped == 0

    def test_day_first_timestamps_are_understood(self):
        records = genuine_batch(10) + [make_record("Pattana", "15/11/2025 14:58:00")]
        assert len(MockDataClassifier().classify(records).kept) == 10

    def test_offset_timestamps_checked_on_reader_clock(self):
        # 14:15:00 IST is 08:45:00 UTC; the fixture signature is on the printed minute
        records = genuine_batch(10) + [make_record("Pattana", "2025-11-15T14:15:00+05:30")]
        result = MockDataClassifier().classify(records)
        assert result.dropped == 1
        assert len(result.kept) == 10

    def test_offset_timestamp_with_ordinary_minute_is_kept(self):
        records = genuine_batch(10) + [make_record("Pattana", "2025-11-15T14:45:00+05:30")]
        assert len(MockDataClassifier().classify(records).kept) == 11


class TestPolicy:
    def test_policy_can_be_swapped(self):
        policy = MockDetectionPolicy(fixture_plaza_names=frozenset({"Vashi Toll Plaza"}),
                                     suspicious_minutes=frozenset({7}), strip_threshold=2)
        records = [make_record("Vashi Toll Plaza", "2025-11-15 10:07:00"),
                   make_record("Vashi Toll Plaza", "2025-11-15 10:08:00"),
                   make_record("Airoli Toll Plaza", "2025-11-15 10:07:00")]
        result = MockDataClassifier(policy).classify(records)
        assert [r.reader_read_time for r in result.kept] == ["2025-11-15 10:08:00", "2025-11-15 10:07:00"]

    def test_default_policy_matches_synthetic_dataset(self):
        policy = MockDetectionPolicy()
        assert policy.fixture_batch_names == ("Pattana", "Halaharvi TOLL PLAZA")
        assert "Kherki Daula Toll Plaza" in policy.fixture_plaza_names
        assert policy.suspicious_minutes == {0, 15, 50, 58}
