# freight_tracking/models/consignment.py
"""
Read-only mappings of the warehouse service's consignment tables.
Only arrival/departure timestamps and the warehouse label are consumed,
for journey reconstruction.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from freight_tracking.database import Base


class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)
    city = Column(String(100))


class Consignment(Base):
    __tablename__ = "consignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    consignment_id = Column(String(50))          # CNS-<timestamp>
    booking_id = Column(String(64), nullable=False, index=True)
    warehouse_id = Column(String(64), ForeignKey("warehouses.id"))
    arrival_date = Column(DateTime)
    departure_date = Column(DateTime)

    warehouse = relationship(Warehouse, lazy="joined")

    def __repr__(self):
        return f"<Consignment {self.consignment_id} booking={self.booking_id}>"
