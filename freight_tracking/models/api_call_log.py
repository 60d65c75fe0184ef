# freight_tracking/models/api_call_log.py
"""
Call ledger — append-only log of every upstream FASTag call attempt,
including synthetic fallbacks. Drives billing visibility and doubles as the
per-booking rate-limit clock.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float
from freight_tracking.database import Base


class ApiCallLog(Base):
    __tablename__ = "fastag_api_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_number = Column(String(20), nullable=False, index=True)
    booking_id = Column(String(64), index=True)             # null for random searches
    api_provider = Column(String(30), nullable=False)       # genuine | synthetic-fallback | mock-detected
    vendor = Column(String(50))                             # e.g. ApiSathi
    status = Column(String(20), nullable=False)             # SUCCESS | NO_DATA | FAILURE
    records_found = Column(Integer, default=0, nullable=False)
    api_cost = Column(Float, default=0.0, nullable=False)
    request_time = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<ApiCallLog {self.id} {self.vehicle_number} {self.api_provider} {self.status} cost={self.api_cost}>"
