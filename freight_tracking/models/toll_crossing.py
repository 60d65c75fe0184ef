# freight_tracking/models/toll_crossing.py
"""
Crossing store — one row per observed toll-plaza transit.
Written only by crossing_persister after the mock classifier has run.
Rows are never updated; (vehicle_number, toll_plaza_name, crossing_time)
identifies a crossing and is enforced by a unique constraint.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, JSON, UniqueConstraint, Index
from freight_tracking.database import Base


class TollCrossing(Base):
    __tablename__ = "fastag_crossings"
    __table_args__ = (
        UniqueConstraint("vehicle_number", "toll_plaza_name", "crossing_time", name="uq_crossing_identity"),
        Index("ix_crossing_vehicle_time", "vehicle_number", "crossing_time"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(String(64), index=True)                # null for random searches
    vehicle_assignment_id = Column(String(64))
    vehicle_number = Column(String(20), nullable=False)        # normalized: upper-case, no spaces
    toll_plaza_name = Column(String(200), nullable=False)
    toll_plaza_geocode = Column(String(100))                   # raw "lat, lng" from provider
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    crossing_time = Column(DateTime, nullable=False)           # UTC
    vehicle_type = Column(String(20))                          # VC4 | VC10 | ...
    provider = Column(String(30), nullable=False)              # genuine | synthetic-fallback | mock-detected
    api_response = Column(JSON)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<TollCrossing {self.id} {self.vehicle_number} @ {self.toll_plaza_name} {self.crossing_time}>"
