# freight_tracking/routers/usage.py
"""FASTag API usage and spend, read from the call ledger."""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from freight_tracking.database import get_db
from freight_tracking.schemas.api_call_log import ApiCallLogOut, UsageSummaryOut
from freight_tracking.services.call_ledger import usage_summary, list_calls

router = APIRouter()


@router.get("/usage/summary", response_model=UsageSummaryOut, summary="API calls and cost")
def get_usage_summary(days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    return usage_summary(db, days)


@router.get("/usage/calls", response_model=list[ApiCallLogOut], summary="Raw call ledger")
def get_calls(limit: int = 50, vehicle_number: Optional[str] = None, booking_id: Optional[str] = None,
              db: Session = Depends(get_db)):
    return list_calls(db, limit, vehicle_number=vehicle_number, booking_id=booking_id)
