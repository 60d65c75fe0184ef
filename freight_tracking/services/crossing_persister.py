# freight_tracking/services/crossing_persister.py
"""
Crossing deduplicator & persister.

For every classified record: parse geocode + time, check the identity key
(vehicle, plaza, time), insert only if new. A bad row or a failed insert is
logged and skipped; it never aborts the rest of the batch. Exactly one call
ledger row summarises the batch afterwards.

The existence check is the fast path; the uq_crossing_identity constraint
catches the concurrent-request race and is treated as "already stored".
"""

from dataclasses import dataclass
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from freight_tracking.models.toll_crossing import TollCrossing
from freight_tracking.models.api_call_log import ApiCallLog
from freight_tracking.services.fastag_client import (
    PROVIDER_GENUINE, PROVIDER_SYNTHETIC, PROVIDER_MOCK_DETECTED, DEFAULT_VEHICLE_TYPE,
)
from freight_tracking.services.crossing_store import normalize_vehicle_number, crossing_exists, insert_crossing
from freight_tracking.services.call_ledger import record_call, STATUS_SUCCESS, STATUS_NO_DATA
from freight_tracking.utils.payload_parser import parse_geocode
from freight_tracking.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PersistResult:
    new_count: int = 0
    duplicates: int = 0
    failed: int = 0
    ledger_entry: Optional[ApiCallLog] = None


def resolve_provider_tag(fetch_tag: str, is_genuine: bool) -> str:
    """Fallback beats everything; otherwise a batch-level fixture match means mock-detected."""
    if fetch_tag == PROVIDER_SYNTHETIC:
        return PROVIDER_SYNTHETIC
    if not is_genuine:
        return PROVIDER_MOCK_DETECTED
    return PROVIDER_GENUINE


def build_crossing(record, booking_id, assignment_id, vehicle_number, provider_tag) -> TollCrossing:
    """Unsaved TollCrossing for a raw record. Raises ValueError if the record can't be stored."""
    if not record.toll_plaza_name:
        raise ValueError("missing tollPlazaName")
    crossing_time = record.crossing_time
    if crossing_time is None:
        raise ValueError(f"unparseable readerReadTime {record.reader_read_time!r}")
    lat, lng = parse_geocode(record.toll_plaza_geocode)

    return TollCrossing(
        booking_id=booking_id,
        vehicle_assignment_id=assignment_id,
        vehicle_number=vehicle_number,
        toll_plaza_name=record.toll_plaza_name,
        toll_plaza_geocode=record.toll_plaza_geocode,
        latitude=lat,
        longitude=lng,
        crossing_time=crossing_time,
        vehicle_type=record.vehicle_type or DEFAULT_VEHICLE_TYPE,
        provider=provider_tag,
        api_response=record.raw,
    )


def persist_crossings(db: Session, booking_id: Optional[str], assignment_id: Optional[str],
                      vehicle_number: str, records: list, provider_tag: str) -> PersistResult:
    vehicle_number = normalize_vehicle_number(vehicle_number)
    result = PersistResult()

    for i, record in enumerate(records, start=1):
        label = f"[{i}/{len(records)}] {vehicle_number} @ {record.toll_plaza_name}"
        try:
            crossing = build_crossing(record, booking_id, assignment_id, vehicle_number, provider_tag)
            if crossing_exists(db, vehicle_number, crossing.toll_plaza_name, crossing.crossing_time):
                result.duplicates += 1
                logger.debug(f"{label} — already stored")
                continue
            insert_crossing(db, crossing)
            result.new_count += 1
            logger.debug(f"{label} — saved (id={crossing.id})")
        except IntegrityError:
            db.rollback()
            result.duplicates += 1
            logger.info(f"{label} — stored concurrently by another request")
        except (SQLAlchemyError, ValueError) as e:
            db.rollback()
            result.failed += 1
            logger.error(f"{label} — not persisted: {e}", exc_info=isinstance(e, SQLAlchemyError))

    status = STATUS_SUCCESS if records else STATUS_NO_DATA
    result.ledger_entry = record_call(db, vehicle_number, booking_id, provider_tag, status, len(records))

    logger.info(f"💾 {vehicle_number}: {result.new_count} new, {result.duplicates} duplicate, "
                f"{result.failed} failed ({provider_tag})")
    return result
