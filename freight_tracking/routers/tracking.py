# freight_tracking/routers/tracking.py
"""
Booking-scoped tracking endpoints.
POST /bookings/{id}/track            — fresh FASTag lookup, or cached crossings inside the cooldown
GET  /bookings/{id}/tracking-history — stored crossings, oldest first
GET  /bookings/{id}/journey          — assignment, warehouse and toll events as one timeline
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from freight_tracking.database import get_db
from freight_tracking.schemas.toll_crossing import TollCrossingOut, TrackingResponse
from freight_tracking.schemas.journey import JourneyEventOut
from freight_tracking.services.errors import NoActiveVehicle
from freight_tracking.services.tracking_service import request_tracking, get_tracking_history
from freight_tracking.services.journey_service import build_journey
from freight_tracking.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/bookings/{booking_id}/track", response_model=TrackingResponse, summary="Track booking vehicle")
async def track_vehicle(booking_id: str, db: Session = Depends(get_db)):
    """
    At most one upstream call per booking per cooldown window.
    is_mock_data is set when the provider was unreachable or answered with fixture data.
    """
    try:
        result = await request_tracking(db, booking_id)
    except NoActiveVehicle as e:
        logger.warning(f"Tracking refused for booking {booking_id}: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    return TrackingResponse.model_validate(result, from_attributes=True)


@router.get("/bookings/{booking_id}/tracking-history", response_model=list[TollCrossingOut],
            summary="Stored toll crossings for a booking")
def tracking_history(booking_id: str, db: Session = Depends(get_db)):
    return get_tracking_history(db, booking_id)


@router.get("/bookings/{booking_id}/journey", response_model=list[JourneyEventOut],
            summary="Chronological journey timeline")
def journey(booking_id: str, db: Session = Depends(get_db)):
    return [JourneyEventOut.model_validate(e, from_attributes=True) for e in build_journey(db, booking_id)]
