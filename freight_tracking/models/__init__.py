# Freight tracking core — Database Models
# Import all models here for SQLAlchemy discovery

from freight_tracking.models.toll_crossing import TollCrossing                  # noqa
from freight_tracking.models.api_call_log import ApiCallLog                      # noqa
from freight_tracking.models.random_search import RandomSearch                  # noqa
# Read-only: owned by the booking and warehouse services
from freight_tracking.models.assignment import (                                 # noqa
    OwnedVehicle, HiredVehicle, Driver, VehicleAssignment,
)
from freight_tracking.models.consignment import Warehouse, Consignment           # noqa
