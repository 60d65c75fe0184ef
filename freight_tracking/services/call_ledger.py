# freight_tracking/services/call_ledger.py
"""
Call ledger helpers.
Every upstream attempt (real, fallback or detected mock) gets exactly one row.
Cost is charged only for genuine provider calls; the booking rate limiter
reads the newest row per booking as its clock.
"""

from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from freight_tracking.models.api_call_log import ApiCallLog
from freight_tracking.services.fastag_client import PROVIDER_GENUINE
from freight_tracking.config import settings
from freight_tracking.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_SUCCESS = "SUCCESS"
STATUS_NO_DATA = "NO_DATA"
STATUS_FAILURE = "FAILURE"


def cost_for(provider: str) -> float:
    return settings.FASTAG_CALL_COST if provider == PROVIDER_GENUINE else 0.0


def record_call(db: Session, vehicle_number: str, booking_id: Optional[str], provider: str,
                status: str, records_found: int, request_time: Optional[datetime] = None) -> ApiCallLog:
    """Append one ledger row and commit."""
    entry = ApiCallLog(
        vehicle_number=vehicle_number,
        booking_id=booking_id,
        api_provider=provider,
        vendor=settings.FASTAG_PROVIDER_NAME if provider == PROVIDER_GENUINE else None,
        status=status,
        records_found=records_found,
        api_cost=cost_for(provider),
        request_time=request_time or datetime.utcnow(),
    )
    db.add(entry)
    db.commit()
    logger.info(f"[LEDGER] {vehicle_number} booking={booking_id} provider={provider} "
                f"status={status} records={records_found} cost={entry.api_cost}")
    return entry


def last_call_for_booking(db: Session, booking_id: str, since: datetime) -> Optional[ApiCallLog]:
    """Newest ledger row for the booking at or after `since`, if any."""
    return (
        db.query(ApiCallLog)
        .filter(ApiCallLog.booking_id == booking_id, ApiCallLog.request_time >= since)
        .order_by(ApiCallLog.request_time.desc())
        .first()
    )


def list_calls(db: Session, limit: int = 50, vehicle_number: str = None, booking_id: str = None) -> list:
    q = db.query(ApiCallLog)
    if vehicle_number:
        q = q.filter(ApiCallLog.vehicle_number == vehicle_number)
    if booking_id:
        q = q.filter(ApiCallLog.booking_id == booking_id)
    return q.order_by(ApiCallLog.request_time.desc()).limit(limit).all()


def usage_summary(db: Session, days: int = 30, now: Optional[datetime] = None) -> dict:
    """Calls and spend over the last `days`, with a per-day breakdown (oldest day first)."""
    since = (now or datetime.utcnow()) - timedelta(days=days)
    window = db.query(ApiCallLog).filter(ApiCallLog.request_time >= since)

    total_calls = window.count()
    paid_calls = window.filter(ApiCallLog.api_provider == PROVIDER_GENUINE).count()
    total_cost = db.query(func.coalesce(func.sum(ApiCallLog.api_cost), 0.0)).filter(
        ApiCallLog.request_time >= since
    ).scalar()

    day = func.date(ApiCallLog.request_time)
    rows = (
        db.query(day, func.count(ApiCallLog.id), func.coalesce(func.sum(ApiCallLog.api_cost), 0.0))
        .filter(ApiCallLog.request_time >= since)
        .group_by(day)
        .order_by(day)
        .all()
    )

    return {
        "days": days,
        "total_calls": total_calls,
        "paid_calls": paid_calls,
        "unpaid_calls": total_calls - paid_calls,
        "total_cost": round(float(total_cost or 0), 2),
        "daily": [
            {"date": str(d), "calls": calls, "cost": round(float(cost or 0), 2)}
            for d, calls, cost in rows
        ],
    }


def purge_call_logs(db: Session, older_than_days: int, now: Optional[datetime] = None) -> int:
    """Retention sweep. Deletes ledger rows older than the window; returns the count removed."""
    cutoff = (now or datetime.utcnow()) - timedelta(days=older_than_days)
    removed = db.query(ApiCallLog).filter(ApiCallLog.request_time < cutoff).delete(synchronize_session=False)
    db.commit()
    logger.info(f"[RETENTION] Removed {removed} call log rows older than {cutoff:%Y-%m-%d}")
    return removed
