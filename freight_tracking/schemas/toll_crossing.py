# freight_tracking/schemas/toll_crossing.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class TollCrossingOut(BaseModel):
    id: Optional[int] = None          # None for live search rows not read back from the store
    booking_id: Optional[str] = None
    vehicle_assignment_id: Optional[str] = None
    vehicle_number: str
    toll_plaza_name: str
    toll_plaza_geocode: Optional[str] = None
    latitude: float
    longitude: float
    crossing_time: datetime
    vehicle_type: Optional[str] = None
    provider: str

    class Config:
        from_attributes = True


class TrackingResponse(BaseModel):
    cached: bool
    wait_seconds: Optional[int] = None
    data: list[TollCrossingOut]
    new_records: Optional[int] = None
    is_real_data: Optional[bool] = None
    is_mock_data: Optional[bool] = None

    class Config:
        from_attributes = True


class SearchResponse(BaseModel):
    vehicle_number: str
    mode: str                         # current | all_history
    status: str                       # found | no_data
    source: Optional[str] = None      # store | live
    is_mock_data: bool = False
    message: Optional[str] = None
    data: list[TollCrossingOut] = []
