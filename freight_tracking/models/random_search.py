# freight_tracking/models/random_search.py
"""
Saved vehicle searches — one row per random search, shown as the search
history panel. Rows expire after SAVED_SEARCH_TTL_DAYS and are removed by
the maintenance sweep.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Boolean, JSON
from freight_tracking.database import Base


class RandomSearch(Base):
    __tablename__ = "random_searches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_number = Column(String(20), nullable=False, index=True)
    search_type = Column(String(20), nullable=False)        # current | all_history
    days_range = Column(Integer)
    source = Column(String(10))                             # store | live, null when nothing found
    is_mock_data = Column(Boolean, default=False, nullable=False)
    toll_crossings = Column(JSON)                           # snapshot of the crossings returned
    crossing_count = Column(Integer, default=0, nullable=False)
    last_toll_name = Column(String(200))
    last_latitude = Column(Float)
    last_longitude = Column(Float)
    last_crossing_time = Column(DateTime)
    searched_at = Column(DateTime, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<RandomSearch {self.id} {self.vehicle_number} {self.search_type} crossings={self.crossing_count}>"
