# freight_tracking/services/crossing_store.py
"""Crossing store access helpers. Used by the persister, tracking, search and journey services."""

from datetime import datetime
from typing import Optional
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from freight_tracking.models.toll_crossing import TollCrossing
from freight_tracking.models.assignment import VehicleAssignment


def normalize_vehicle_number(raw: str) -> str:
    """'mh 12 ab 1234' → 'MH12AB1234'. Crossings are keyed on this form."""
    return "".join(str(raw or "").split()).upper()


def crossing_exists(db: Session, vehicle_number: str, toll_plaza_name: str, crossing_time: datetime) -> bool:
    """Existence check on the identity key (vehicle, plaza, time)."""
    return db.query(TollCrossing.id).filter(
        TollCrossing.vehicle_number == vehicle_number,
        TollCrossing.toll_plaza_name == toll_plaza_name,
        TollCrossing.crossing_time == crossing_time,
    ).first() is not None


def insert_crossing(db: Session, crossing: TollCrossing) -> TollCrossing:
    """Insert and commit a single crossing so one bad row can't take the batch down with it."""
    if crossing.created_at is None:
        crossing.created_at = datetime.utcnow()
    db.add(crossing)
    db.commit()
    return crossing


def _assignment_windows(db: Session, booking_id: str, now: datetime) -> list:
    """One filter per assignment: its vehicle, between assigned_at and released_at (or now)."""
    clauses = []
    assignments = db.query(VehicleAssignment).filter(VehicleAssignment.booking_id == booking_id).all()
    for a in assignments:
        if not a.vehicle_number or a.assigned_at is None:
            continue
        clauses.append(and_(
            TollCrossing.vehicle_number == normalize_vehicle_number(a.vehicle_number),
            TollCrossing.crossing_time >= a.assigned_at,
            TollCrossing.crossing_time <= (a.released_at or now),
        ))
    return clauses


def list_for_booking(db: Session, booking_id: str, newest_first: bool = False,
                     now: Optional[datetime] = None) -> list:
    """
    Crossings stored for the booking, plus crossings of its assigned vehicles
    inside each assignment window. The second part picks up rows first stored
    by a vehicle search, which carry no booking.
    """
    clauses = [TollCrossing.booking_id == booking_id]
    clauses.extend(_assignment_windows(db, booking_id, now or datetime.utcnow()))
    order = TollCrossing.crossing_time.desc() if newest_first else TollCrossing.crossing_time.asc()
    return db.query(TollCrossing).filter(or_(*clauses)).order_by(order).all()


def list_for_vehicle(db: Session, vehicle_number: str, since: Optional[datetime] = None) -> list:
    """All stored crossings for a vehicle, oldest first, regardless of booking."""
    q = db.query(TollCrossing).filter(TollCrossing.vehicle_number == normalize_vehicle_number(vehicle_number))
    if since is not None:
        q = q.filter(TollCrossing.crossing_time >= since)
    return q.order_by(TollCrossing.crossing_time.asc()).all()
