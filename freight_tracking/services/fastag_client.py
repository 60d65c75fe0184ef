# freight_tracking/services/fastag_client.py
"""
FASTag telemetry fetcher — asks the provider for a vehicle's recent toll crossings.

Endpoint: POST {FASTAG_API_URL}  body {"vehiclenumber": "..."}  header x-api-key
Response: JSON array of
    {"readerReadTime": "...", "tollPlazaName": "...",
     "tollPlazaGeocode": "lat, lng", "vehicleType": "VC10"}

Any transport error, timeout, non-2xx status or malformed body is NOT raised:
the fetcher answers with a fixed three-record synthetic dataset tagged
"synthetic-fallback" so the booking screen always has something to draw.
Callers tell the two apart by FetchResult.provider_tag.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

import httpx

from freight_tracking.config import settings
from freight_tracking.utils.payload_parser import safe_parse_json, first_present, parse_reader_time
from freight_tracking.utils.logger import get_logger

logger = get_logger(__name__)

PROVIDER_GENUINE = "genuine"
PROVIDER_SYNTHETIC = "synthetic-fallback"
PROVIDER_MOCK_DETECTED = "mock-detected"

DEFAULT_VEHICLE_TYPE = "VC10"

# (plaza name, geocode, hours before now): served when the provider is unreachable.
# The mock classifier's fixture signatures are derived from this table.
SYNTHETIC_PLAZAS = (
    ("Pattana", "17.3970162,76.7061871", 0),
    ("Halaharvi TOLL PLAZA", "15.819781,77.454008", 2),
    ("Kherki Daula Toll Plaza", "28.4820, 77.0214", 5),
)


@dataclass
class RawCrossing:
    toll_plaza_name: Optional[str]
    toll_plaza_geocode: Optional[str]
    reader_read_time: Optional[str]
    vehicle_type: Optional[str] = None
    raw: dict = field(default_factory=dict)

    @property
    def crossing_time(self) -> Optional[datetime]:
        return parse_reader_time(self.reader_read_time)

    @property
    def wall_clock_time(self) -> Optional[datetime]:
        """readerReadTime as printed by the reader, any UTC offset ignored."""
        return parse_reader_time(self.reader_read_time, to_utc=False)

    @classmethod
    def from_payload(cls, item: dict) -> "RawCrossing":
        return cls(
            toll_plaza_name=first_present(item, "tollPlazaName", "tollplazaname", "toll_plaza_name"),
            toll_plaza_geocode=first_present(item, "tollPlazaGeocode", "tollplazageocode", "toll_plaza_geocode"),
            reader_read_time=first_present(item, "readerReadTime", "readerreadtime", "reader_read_time"),
            vehicle_type=first_present(item, "vehicleType", "vehicletype", "vehicle_type"),
            raw=item,
        )


@dataclass
class FetchResult:
    records: list
    provider_tag: str
    error: Optional[str] = None     # why the fallback was used, if it was

    @property
    def is_fallback(self) -> bool:
        return self.provider_tag == PROVIDER_SYNTHETIC


def synthetic_crossings(vehicle_number: str, now: Optional[datetime] = None) -> list:
    """The fixed fallback dataset: three plazas at now, now-2h, now-5h."""
    now = (now or datetime.utcnow()).replace(microsecond=0)
    records = []
    for name, geocode, hours_ago in SYNTHETIC_PLAZAS:
        item = {
            "readerReadTime": (now - timedelta(hours=hours_ago)).strftime("%Y-%m-%d %H:%M:%S"),
            "tollPlazaName": name,
            "tollPlazaGeocode": geocode,
            "vehicleType": DEFAULT_VEHICLE_TYPE,
            "vehicleRegNo": vehicle_number,
        }
        records.append(RawCrossing.from_payload(item))
    return records


class FastagClient:
    """
    Thin async wrapper around the provider endpoint.
    Pass an httpx.AsyncClient to reuse a connection pool (or a MockTransport in tests);
    otherwise a short-lived client is opened per call.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    async def _post(self, vehicle_number: str) -> httpx.Response:
        body = {settings.FASTAG_VEHICLE_FIELD: vehicle_number}
        headers = {
            "Content-Type": "application/json",
            settings.FASTAG_API_KEY_HEADER: settings.FASTAG_API_KEY,
        }
        if self._client is not None:
            return await self._client.post(
                settings.FASTAG_API_URL, json=body, headers=headers,
                timeout=settings.FASTAG_TIMEOUT_SECONDS,
            )
        async with httpx.AsyncClient(timeout=settings.FASTAG_TIMEOUT_SECONDS) as client:
            return await client.post(settings.FASTAG_API_URL, json=body, headers=headers)

    def _fallback(self, vehicle_number: str, reason: str) -> FetchResult:
        logger.warning(f"⚠️  FASTag unavailable for {vehicle_number} ({reason}) — serving synthetic crossings")
        return FetchResult(records=synthetic_crossings(vehicle_number),
                           provider_tag=PROVIDER_SYNTHETIC, error=reason)

    async def fetch_crossings(self, vehicle_number: str) -> FetchResult:
        if settings.USE_MOCK_DATA:
            return self._fallback(vehicle_number, "USE_MOCK_DATA enabled")

        logger.info(f"📡 FASTag lookup: {vehicle_number}")
        try:
            response = await self._post(vehicle_number)
            response.raise_for_status()
        except httpx.TimeoutException:
            return self._fallback(vehicle_number, "timeout")
        except httpx.HTTPStatusError as e:
            return self._fallback(vehicle_number, f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            return self._fallback(vehicle_number, f"{type(e).__name__}: {e}")

        payload = safe_parse_json(response.content)
        if not isinstance(payload, list):
            return self._fallback(vehicle_number, "malformed payload")

        records = []
        for item in payload:
            if not isinstance(item, dict):
                logger.warning(f"Skipping non-object crossing in FASTag response: {item!r}")
                continue
            records.append(RawCrossing.from_payload(item))

        logger.info(f"✅ FASTag returned {len(records)} crossings for {vehicle_number}")
        return FetchResult(records=records, provider_tag=PROVIDER_GENUINE)


fastag_client = FastagClient()
