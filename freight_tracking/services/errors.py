# freight_tracking/services/errors.py
"""
Conditions that reach the caller as explicit messages.
Upstream outages and detected mock data are recovered inside the pipeline
and only show up as is_mock_data / is_real_data flags.
"""


class TrackingError(Exception):
    """Base class for tracking failures surfaced to the user."""


class NoActiveVehicle(TrackingError):
    def __init__(self, booking_id: str, reason: str = "No active vehicle assignment found"):
        self.booking_id = booking_id
        super().__init__(reason)


class SearchNotFound(TrackingError):
    def __init__(self, vehicle_number: str):
        self.vehicle_number = vehicle_number
        super().__init__(f"No data found for vehicle {vehicle_number}")
