# freight_tracking/services/search_history.py
"""
Saved search history for the random vehicle search.
Every search (found or not) leaves a row with a snapshot of what it
returned and the last known position, kept until expires_at.
"""

from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from freight_tracking.models.random_search import RandomSearch
from freight_tracking.services.crossing_store import normalize_vehicle_number
from freight_tracking.config import settings
from freight_tracking.utils.logger import get_logger

logger = get_logger(__name__)


def _snapshot(crossing) -> dict:
    return {
        "toll_plaza_name": crossing.toll_plaza_name,
        "latitude": crossing.latitude,
        "longitude": crossing.longitude,
        "crossing_time": crossing.crossing_time.isoformat() if crossing.crossing_time else None,
        "vehicle_type": crossing.vehicle_type,
        "provider": crossing.provider,
    }


def save_search(db: Session, vehicle_number: str, search_type: str, crossings: list,
                days_range: Optional[int] = None, source: Optional[str] = None,
                is_mock_data: bool = False, now: Optional[datetime] = None) -> Optional[RandomSearch]:
    """
    Record one search. `crossings` is the list handed back to the caller,
    oldest first. A failed write is logged and does not fail the search.
    """
    now = now or datetime.utcnow()
    last = crossings[-1] if crossings else None
    entry = RandomSearch(
        vehicle_number=vehicle_number,
        search_type=search_type,
        days_range=days_range,
        source=source,
        is_mock_data=is_mock_data,
        toll_crossings=[_snapshot(c) for c in crossings],
        crossing_count=len(crossings),
        last_toll_name=last.toll_plaza_name if last else None,
        last_latitude=last.latitude if last else None,
        last_longitude=last.longitude if last else None,
        last_crossing_time=last.crossing_time if last else None,
        searched_at=now,
        expires_at=now + timedelta(days=settings.SAVED_SEARCH_TTL_DAYS),
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not save search history for {vehicle_number}: {e}", exc_info=True)
        return None
    return entry


def list_searches(db: Session, limit: int = 50, vehicle_number: Optional[str] = None,
                  now: Optional[datetime] = None) -> list:
    """Unexpired searches, newest first."""
    q = db.query(RandomSearch).filter(RandomSearch.expires_at > (now or datetime.utcnow()))
    if vehicle_number:
        q = q.filter(RandomSearch.vehicle_number == normalize_vehicle_number(vehicle_number))
    return q.order_by(RandomSearch.searched_at.desc(), RandomSearch.id.desc()).limit(limit).all()


def delete_search(db: Session, search_id: int) -> bool:
    removed = db.query(RandomSearch).filter(RandomSearch.id == search_id).delete(synchronize_session=False)
    db.commit()
    return removed > 0


def purge_expired_searches(db: Session, now: Optional[datetime] = None) -> int:
    removed = (
        db.query(RandomSearch)
        .filter(RandomSearch.expires_at <= (now or datetime.utcnow()))
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info(f"[RETENTION] Removed {removed} expired saved searches")
    return removed
