# freight_tracking/services/journey_service.py
"""
Journey aggregator — read-only timeline for one booking.

Sources (one producer each):
  - vehicle_assignments: assigned_at → VEHICLE_ASSIGNED, released_at → VEHICLE_RELEASED
  - consignments:        arrival_date → ARRIVED_AT_WAREHOUSE, departure_date → DEPARTED_FROM_WAREHOUSE
  - fastag_crossings:    crossing_time → TOLL_CROSSED

When JOURNEY_VIEW_ENABLED is set, the database function get_booking_journey()
is tried first; if it is missing or errors, the producers are merged here.
Events are sorted ascending by time; ties keep source order.
"""

from dataclasses import dataclass
from datetime import datetime
from itertools import chain
from typing import Optional
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from freight_tracking.models.assignment import VehicleAssignment
from freight_tracking.models.consignment import Consignment
from freight_tracking.services.crossing_store import list_for_booking
from freight_tracking.utils.payload_parser import parse_reader_time
from freight_tracking.config import settings
from freight_tracking.utils.logger import get_logger

logger = get_logger(__name__)

VEHICLE_ASSIGNED = "VEHICLE_ASSIGNED"
VEHICLE_RELEASED = "VEHICLE_RELEASED"
ARRIVED_AT_WAREHOUSE = "ARRIVED_AT_WAREHOUSE"
DEPARTED_FROM_WAREHOUSE = "DEPARTED_FROM_WAREHOUSE"
TOLL_CROSSED = "TOLL_CROSSED"

_VIEW_QUERY = text("SELECT * FROM get_booking_journey(:booking_id)")


@dataclass
class JourneyEvent:
    event_time: datetime
    event_type: str
    description: str
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None
    warehouse_name: Optional[str] = None
    warehouse_city: Optional[str] = None
    toll_name: Optional[str] = None


def assignment_events(db: Session, booking_id: str) -> list:
    events = []
    assignments = (
        db.query(VehicleAssignment)
        .filter(VehicleAssignment.booking_id == booking_id)
        .order_by(VehicleAssignment.assigned_at)
        .all()
    )
    for a in assignments:
        vehicle = a.vehicle_number or "(unknown)"
        driver = a.driver.name if a.driver else None
        if a.assigned_at:
            desc = f"Vehicle {vehicle} assigned" + (f" with driver {driver}" if driver else "")
            events.append(JourneyEvent(a.assigned_at, VEHICLE_ASSIGNED, desc,
                                       vehicle_number=a.vehicle_number, driver_name=driver))
        if a.released_at:
            events.append(JourneyEvent(a.released_at, VEHICLE_RELEASED, f"Vehicle {vehicle} released",
                                       vehicle_number=a.vehicle_number, driver_name=driver))
    return events


def consignment_events(db: Session, booking_id: str) -> list:
    events = []
    consignments = (
        db.query(Consignment)
        .filter(Consignment.booking_id == booking_id)
        .order_by(Consignment.arrival_date)
        .all()
    )
    for c in consignments:
        name = c.warehouse.name if c.warehouse else None
        city = c.warehouse.city if c.warehouse else None
        label = f"{name} warehouse" if name else "warehouse"
        if city:
            label += f", {city}"
        if c.arrival_date:
            events.append(JourneyEvent(c.arrival_date, ARRIVED_AT_WAREHOUSE, f"Arrived at {label}",
                                       warehouse_name=name, warehouse_city=city))
        if c.departure_date:
            events.append(JourneyEvent(c.departure_date, DEPARTED_FROM_WAREHOUSE, f"Departed from {label}",
                                       warehouse_name=name, warehouse_city=city))
    return events


def crossing_events(db: Session, booking_id: str) -> list:
    return [
        JourneyEvent(c.crossing_time, TOLL_CROSSED, f"Crossed {c.toll_plaza_name}",
                     vehicle_number=c.vehicle_number, toll_name=c.toll_plaza_name)
        for c in list_for_booking(db, booking_id)
    ]


def merge_events(*streams) -> list:
    """Concatenate event streams and stable-sort them by time."""
    return sorted(chain.from_iterable(streams), key=lambda e: e.event_time)


def _journey_from_view(db: Session, booking_id: str) -> Optional[list]:
    try:
        rows = db.execute(_VIEW_QUERY, {"booking_id": booking_id}).mappings().all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"get_booking_journey unavailable ({type(e).__name__}) — merging locally")
        return None

    events = []
    for row in rows:
        event_time = row.get("event_time")
        if isinstance(event_time, str):
            event_time = parse_reader_time(event_time)
        if event_time is None:
            continue
        events.append(JourneyEvent(
            event_time=event_time,
            event_type=row.get("event_type"),
            description=row.get("description") or "",
            vehicle_number=row.get("vehicle_number"),
            driver_name=row.get("driver_name"),
            warehouse_name=row.get("warehouse_name"),
            warehouse_city=row.get("warehouse_city"),
            toll_name=row.get("toll_name"),
        ))
    return events


def build_journey(db: Session, booking_id: str) -> list:
    if settings.JOURNEY_VIEW_ENABLED:
        from_view = _journey_from_view(db, booking_id)
        if from_view is not None:
            return merge_events(from_view)

    journey = merge_events(
        assignment_events(db, booking_id),
        consignment_events(db, booking_id),
        crossing_events(db, booking_id),
    )
    logger.debug(f"Journey for booking {booking_id}: {len(journey)} events")
    return journey
