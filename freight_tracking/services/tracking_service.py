# freight_tracking/services/tracking_service.py
"""
Booking-scoped tracking: rate limiter / cache gate in front of the
fetch → classify → persist pipeline.

How it works:
  - The newest call ledger row for the booking inside the cooldown window
    (TRACKING_COOLDOWN_SECONDS, default 5 min) short-circuits the request:
    stored crossings are returned newest first with the seconds left.
  - Otherwise the booking's ACTIVE assignment gives the vehicle number,
    the FASTag provider is called (falling back to synthetic data), the
    batch is classified, new crossings are stored and one ledger row written.
  - Requests for the same booking are serialised in-process so two clicks
    can't both slip past the cooldown check. Across processes the identity
    unique constraint is what keeps crossings from duplicating.
"""

import asyncio
import math
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from freight_tracking.models.assignment import VehicleAssignment
from freight_tracking.services.errors import NoActiveVehicle
from freight_tracking.services.fastag_client import fastag_client, FastagClient, PROVIDER_GENUINE
from freight_tracking.services.mock_classifier import default_classifier, MockDataClassifier
from freight_tracking.services.crossing_persister import persist_crossings, resolve_provider_tag
from freight_tracking.services.crossing_store import list_for_booking, normalize_vehicle_number
from freight_tracking.services.call_ledger import last_call_for_booking, record_call, STATUS_FAILURE
from freight_tracking.config import settings
from freight_tracking.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class TrackingResult:
    cached: bool
    data: list = field(default_factory=list)
    wait_seconds: Optional[int] = None
    new_records: Optional[int] = None
    is_real_data: Optional[bool] = None
    is_mock_data: Optional[bool] = None


class _BookingLocks:
    """One asyncio.Lock per booking, dropped once nobody is waiting on it."""

    def __init__(self):
        self._locks = {}
        self._holders = defaultdict(int)

    @asynccontextmanager
    async def hold(self, booking_id: str):
        lock = self._locks.setdefault(booking_id, asyncio.Lock())
        self._holders[booking_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[booking_id] -= 1
            if self._holders[booking_id] == 0:
                del self._holders[booking_id]
                self._locks.pop(booking_id, None)


_booking_locks = _BookingLocks()


def cooldown_remaining(db: Session, booking_id: str, now: Optional[datetime] = None) -> Optional[int]:
    """Seconds until the booking may call upstream again, or None if it may call now."""
    now = now or datetime.utcnow()
    window = timedelta(seconds=settings.TRACKING_COOLDOWN_SECONDS)
    last = last_call_for_booking(db, booking_id, since=now - window)
    if last is None:
        return None
    remaining = (last.request_time + window - now).total_seconds()
    return min(settings.TRACKING_COOLDOWN_SECONDS, max(0, math.ceil(remaining)))


def get_active_assignment(db: Session, booking_id: str) -> VehicleAssignment:
    assignment = (
        db.query(VehicleAssignment)
        .filter(VehicleAssignment.booking_id == booking_id, VehicleAssignment.status == "ACTIVE")
        .order_by(VehicleAssignment.assigned_at.desc())
        .first()
    )
    if assignment is None:
        raise NoActiveVehicle(booking_id)
    if not assignment.vehicle_number:
        raise NoActiveVehicle(booking_id, "Vehicle number not found for the active assignment")
    return assignment


async def request_tracking(db: Session, booking_id: str,
                           client: FastagClient = None,
                           classifier: MockDataClassifier = None) -> TrackingResult:
    async with _booking_locks.hold(booking_id):
        wait = cooldown_remaining(db, booking_id)
        if wait is not None:
            logger.info(f"⏱  Booking {booking_id} in cooldown — {wait}s left, serving stored crossings")
            return TrackingResult(
                cached=True,
                wait_seconds=wait,
                data=list_for_booking(db, booking_id, newest_first=True),
            )

        assignment = get_active_assignment(db, booking_id)
        vehicle_number = normalize_vehicle_number(assignment.vehicle_number)
        logger.info(f"🚚 Tracking booking {booking_id} → vehicle {vehicle_number}")

        fetched = await (client or fastag_client).fetch_crossings(vehicle_number)
        try:
            classified = (classifier or default_classifier).classify(fetched.records)
            provider = resolve_provider_tag(fetched.provider_tag, classified.is_genuine)
            persisted = persist_crossings(db, booking_id, assignment.id, vehicle_number,
                                          classified.kept, provider)
        except Exception:
            # The upstream call already happened; keep it on the ledger before giving up.
            db.rollback()
            logger.error(f"❌ Tracking pipeline failed for booking {booking_id}", exc_info=True)
            record_call(db, vehicle_number, booking_id, fetched.provider_tag, STATUS_FAILURE,
                        len(fetched.records))
            raise

        is_real = provider == PROVIDER_GENUINE
        return TrackingResult(
            cached=False,
            data=list_for_booking(db, booking_id),
            new_records=persisted.new_count,
            is_real_data=is_real,
            is_mock_data=not is_real,
        )


def get_tracking_history(db: Session, booking_id: str) -> list:
    """Every stored crossing for the booking, oldest first."""
    return list_for_booking(db, booking_id)
