from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SavedCrossingOut(BaseModel):
    toll_plaza_name: str
    latitude: float
    longitude: float
    crossing_time: Optional[datetime] = None
    vehicle_type: Optional[str] = None
    provider: Optional[str] = None


class RandomSearchOut(BaseModel):
    id: int
    vehicle_number: str
    search_type: str
    days_range: Optional[int] = None
    source: Optional[str] = None
    is_mock_data: bool
    toll_crossings: list[SavedCrossingOut] = []
    crossing_count: int
    last_toll_name: Optional[str] = None
    last_latitude: Optional[float] = None
    last_longitude: Optional[float] = None
    last_crossing_time: Optional[datetime] = None
    searched_at: datetime
    expires_at: datetime

    class Config:
        from_attributes = True
