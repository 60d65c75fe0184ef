# freight_tracking/models/assignment.py
"""
Read-only mappings of the booking service's vehicle-assignment tables.
The tracking core never creates or writes these; it only resolves the
active vehicle for a booking and reads assignment lifecycle timestamps.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from freight_tracking.database import Base


class OwnedVehicle(Base):
    __tablename__ = "owned_vehicles"

    id = Column(String(64), primary_key=True)
    vehicle_number = Column(String(20), nullable=False)


class HiredVehicle(Base):
    __tablename__ = "hired_vehicles"

    id = Column(String(64), primary_key=True)
    vehicle_number = Column(String(20), nullable=False)


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(String(64), primary_key=True)
    name = Column(String(200))
    phone = Column(String(20))


class VehicleAssignment(Base):
    __tablename__ = "vehicle_assignments"

    id = Column(String(64), primary_key=True)
    booking_id = Column(String(64), nullable=False, index=True)
    status = Column(String(20), nullable=False)               # ACTIVE | COMPLETED | RELEASED
    vehicle_type = Column(String(10), nullable=False)         # OWNED | HIRED
    owned_vehicle_id = Column(String(64), ForeignKey("owned_vehicles.id"))
    hired_vehicle_id = Column(String(64), ForeignKey("hired_vehicles.id"))
    driver_id = Column(String(64), ForeignKey("drivers.id"))
    assigned_at = Column(DateTime)
    released_at = Column(DateTime)

    owned_vehicle = relationship(OwnedVehicle, lazy="joined")
    hired_vehicle = relationship(HiredVehicle, lazy="joined")
    driver = relationship(Driver, lazy="joined")

    @property
    def vehicle_number(self):
        """Number of whichever vehicle (owned or hired) this assignment points at."""
        vehicle = self.owned_vehicle if self.vehicle_type == "OWNED" else self.hired_vehicle
        return vehicle.vehicle_number if vehicle else None

    def __repr__(self):
        return f"<VehicleAssignment {self.id} booking={self.booking_id} status={self.status}>"
