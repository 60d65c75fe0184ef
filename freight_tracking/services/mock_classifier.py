# freight_tracking/services/mock_classifier.py
"""
Separates genuine FASTag rows from vendor test fixtures.

Two heuristics, in order:
  1. Batch fixture match — exactly 3 rows whose first two plazas are the two
     known fixture plazas: the whole batch is treated as a mock response.
     Nothing is dropped, but the call is billed at zero.
  2. Suspicious-row strip — batches of more than 10 rows lose every row that
     sits on a fixture plaza at minute 0/15/50/58 with second 0.

Both are signature matches on observed vendor fixtures, not proofs.
The thresholds live in MockDetectionPolicy so they can be tuned or replaced
without touching the pipeline.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

from freight_tracking.services.fastag_client import SYNTHETIC_PLAZAS
from freight_tracking.utils.logger import get_logger

logger = get_logger(__name__)

_FIXTURE_NAMES = tuple(name for name, _, _ in SYNTHETIC_PLAZAS)


@dataclass(frozen=True)
class MockDetectionPolicy:
    fixture_batch_size: int = 3
    fixture_batch_names: Tuple[str, ...] = _FIXTURE_NAMES[:2]
    fixture_plaza_names: FrozenSet[str] = frozenset(_FIXTURE_NAMES)
    suspicious_minutes: FrozenSet[int] = frozenset({0, 15, 50, 58})
    suspicious_second: int = 0
    strip_threshold: int = 10          # only batches strictly larger than this are stripped


@dataclass
class ClassificationResult:
    kept: list = field(default_factory=list)
    is_genuine: bool = True
    dropped: int = 0


class MockDataClassifier:
    def __init__(self, policy: MockDetectionPolicy = None):
        self.policy = policy or MockDetectionPolicy()

    def is_fixture_batch(self, records: list) -> bool:
        p = self.policy
        if len(records) != p.fixture_batch_size:
            return False
        names = tuple(r.toll_plaza_name for r in records[:len(p.fixture_batch_names)])
        return names == tuple(p.fixture_batch_names)

    def is_suspicious(self, record) -> bool:
        p = self.policy
        if record.toll_plaza_name not in p.fixture_plaza_names:
            return False
        crossed = record.wall_clock_time     # fixtures are stamped in reader-local time
        if crossed is None:
            return False
        return crossed.minute in p.suspicious_minutes and crossed.second == p.suspicious_second

    def classify(self, records: list) -> ClassificationResult:
        if self.is_fixture_batch(records):
            logger.warning(f"🧪 Fixture batch detected ({len(records)} rows) — marking as mock data")
            return ClassificationResult(kept=list(records), is_genuine=False)

        if len(records) <= self.policy.strip_threshold:
            return ClassificationResult(kept=list(records), is_genuine=True)

        kept = [r for r in records if not self.is_suspicious(r)]
        dropped = len(records) - len(kept)
        if dropped:
            logger.warning(f"🧹 Stripped {dropped}/{len(records)} suspicious fixture rows from FASTag batch")
        return ClassificationResult(kept=kept, is_genuine=True, dropped=dropped)


default_classifier = MockDataClassifier()
