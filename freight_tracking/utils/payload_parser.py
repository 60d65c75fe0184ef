# freight_tracking/utils/payload_parser.py
"""
Helpers for reading FASTag provider payloads.
The provider is loose about formats: readerReadTime arrives as
"DD/MM/YYYY HH:MM:SS", "YYYY-MM-DD HH:MM:SS[.fff]" or ISO-8601, and
tollPlazaGeocode as a "lat, lng" string.
"""

import json
import math
from datetime import datetime, timezone
from typing import Optional, Any, Tuple

_READER_TIME_FORMATS = (
    "%d/%m/%Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%d-%m-%Y %H:%M:%S",
)


def safe_parse_json(raw_body: bytes) -> Optional[Any]:
    """Parse JSON bytes safely. Returns None on error."""
    try:
        return json.loads(raw_body.decode("utf-8", errors="replace"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def first_present(data: dict, *keys: str, default: Any = None) -> Any:
    """Value of the first key that is present and not None (field casing varies by deployment)."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def parse_reader_time(raw: Optional[str], to_utc: bool = True) -> Optional[datetime]:
    """
    Parse a provider readerReadTime into a naive datetime.
    Times without an offset are taken as UTC. With to_utc=False an offset is
    dropped instead of applied, leaving the wall-clock time the reader printed.
    Returns None if unparseable.
    """
    if not raw or not isinstance(raw, str):
        return None
    value = raw.strip()

    for fmt in _READER_TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed
    if to_utc:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(tzinfo=None)


def parse_geocode(raw: Optional[str]) -> Tuple[float, float]:
    """Split a "lat, lng" geocode string. Raises ValueError if it is not two numbers."""
    if not raw:
        raise ValueError("empty geocode")
    parts = [p.strip() for p in str(raw).split(",")]
    if len(parts) != 2:
        raise ValueError(f"geocode must be 'lat, lng', got {raw!r}")
    lat, lng = float(parts[0]), float(parts[1])
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise ValueError(f"geocode is not a finite number pair: {raw!r}")
    return lat, lng
