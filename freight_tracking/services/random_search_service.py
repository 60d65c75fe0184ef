# freight_tracking/services/random_search_service.py
"""
Random vehicle search — look up any vehicle number, with or without a booking.

Order of attempts:
  1. Crossing store, within a lookback window (24h for "current",
     7 days for "all_history", or days_range when given). Stored data is
     already history, so a hit returns the whole matched set in both modes.
  2. Live FASTag call (no booking cooldown applies), same classifier,
     results persisted without a booking so the next search hits the store.
     "current" keeps only the most recent crossing, "all_history" keeps
     everything, oldest first.
  3. Nothing anywhere → SearchNotFound.
Every outcome is saved to the search history.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from freight_tracking.services.errors import SearchNotFound
from freight_tracking.services.fastag_client import fastag_client, FastagClient, PROVIDER_GENUINE
from freight_tracking.services.mock_classifier import default_classifier, MockDataClassifier
from freight_tracking.services.crossing_persister import persist_crossings, resolve_provider_tag, build_crossing
from freight_tracking.services.crossing_store import list_for_vehicle, normalize_vehicle_number
from freight_tracking.services.search_history import save_search
from freight_tracking.config import settings
from freight_tracking.utils.logger import get_logger

logger = get_logger(__name__)

MODE_CURRENT = "current"
MODE_ALL_HISTORY = "all_history"
SEARCH_MODES = (MODE_CURRENT, MODE_ALL_HISTORY)

SOURCE_STORE = "store"
SOURCE_LIVE = "live"


@dataclass
class SearchResult:
    vehicle_number: str
    mode: str
    source: str
    data: list = field(default_factory=list)
    is_mock_data: bool = False


def lookback_start(mode: str, days_range: Optional[int] = None, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.utcnow()
    if days_range:
        return now - timedelta(days=days_range)
    if mode == MODE_CURRENT:
        return now - timedelta(hours=settings.SEARCH_CURRENT_LOOKBACK_HOURS)
    return now - timedelta(days=settings.SEARCH_HISTORY_LOOKBACK_DAYS)


def shape_live_result(crossings: list, mode: str) -> list:
    """Sort oldest first; 'current' keeps only the latest crossing."""
    ordered = sorted(crossings, key=lambda c: c.crossing_time)
    if mode == MODE_CURRENT:
        return ordered[-1:]
    return ordered


def _remember(db: Session, result: SearchResult, days_range: Optional[int]):
    save_search(db, result.vehicle_number, result.mode, result.data, days_range=days_range,
                source=result.source, is_mock_data=result.is_mock_data)


async def search_vehicle(db: Session, vehicle_number: str, mode: str = MODE_CURRENT,
                         days_range: Optional[int] = None,
                         client: FastagClient = None,
                         classifier: MockDataClassifier = None) -> SearchResult:
    if mode not in SEARCH_MODES:
        raise ValueError(f"Unknown search mode {mode!r}; expected one of {SEARCH_MODES}")

    vehicle = normalize_vehicle_number(vehicle_number)
    since = lookback_start(mode, days_range)

    stored = list_for_vehicle(db, vehicle, since=since)
    if stored:
        logger.info(f"🔍 {vehicle}: {len(stored)} stored crossings since {since:%Y-%m-%d %H:%M}")
        result = SearchResult(
            vehicle_number=vehicle, mode=mode, source=SOURCE_STORE, data=stored,
            is_mock_data=any(c.provider != PROVIDER_GENUINE for c in stored),
        )
        _remember(db, result, days_range)
        return result

    logger.info(f"🔍 {vehicle}: nothing stored — asking FASTag")
    fetched = await (client or fastag_client).fetch_crossings(vehicle)
    classified = (classifier or default_classifier).classify(fetched.records)
    provider = resolve_provider_tag(fetched.provider_tag, classified.is_genuine)
    persist_crossings(db, None, None, vehicle, classified.kept, provider)

    live = []
    for record in classified.kept:
        try:
            live.append(build_crossing(record, None, None, vehicle, provider))
        except ValueError as e:
            logger.warning(f"Dropping unusable live crossing for {vehicle}: {e}")

    if days_range and mode == MODE_ALL_HISTORY:
        live = [c for c in live if c.crossing_time >= since]

    if not live:
        logger.info(f"📭 {vehicle}: no crossings found")
        save_search(db, vehicle, mode, [], days_range=days_range)
        raise SearchNotFound(vehicle)

    result = SearchResult(
        vehicle_number=vehicle, mode=mode, source=SOURCE_LIVE,
        data=shape_live_result(live, mode),
        is_mock_data=provider != PROVIDER_GENUINE,
    )
    _remember(db, result, days_range)
    return result
