# freight_tracking/schemas/journey.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class JourneyEventOut(BaseModel):
    event_time: datetime
    event_type: str     # VEHICLE_ASSIGNED | VEHICLE_RELEASED | ARRIVED_AT_WAREHOUSE | DEPARTED_FROM_WAREHOUSE | TOLL_CROSSED
    description: str
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None
    warehouse_name: Optional[str] = None
    warehouse_city: Optional[str] = None
    toll_name: Optional[str] = None

    class Config:
        from_attributes = True
