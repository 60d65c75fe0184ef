# freight_tracking/schemas/api_call_log.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ApiCallLogOut(BaseModel):
    id: int
    vehicle_number: str
    booking_id: Optional[str]
    api_provider: str
    vendor: Optional[str]
    status: str
    records_found: int
    api_cost: float
    request_time: datetime

    class Config:
        from_attributes = True


class DailyUsageOut(BaseModel):
    date: str
    calls: int
    cost: float


class UsageSummaryOut(BaseModel):
    days: int
    total_calls: int
    paid_calls: int
    unpaid_calls: int
    total_cost: float
    daily: list[DailyUsageOut]
