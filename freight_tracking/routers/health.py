# freight_tracking/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + FASTag provider reachability.
"""

import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from freight_tracking.database import get_db
from freight_tracking.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - FASTag provider reachability (any HTTP answer counts as reachable;
      the endpoint only accepts authenticated POSTs)
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "fastag_provider": "unknown",
        "mock_mode": settings.USE_MOCK_DATA,
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    if settings.USE_MOCK_DATA:
        result["fastag_provider"] = "skipped"
        return result

    try:
        resp = requests.head(settings.FASTAG_API_URL, timeout=3, allow_redirects=True)
        result["fastag_provider"] = "ok" if resp.status_code < 500 else f"http_{resp.status_code}"
    except requests.exceptions.ConnectionError:
        result["fastag_provider"] = "unreachable"
        result["status"] = "degraded"
    except requests.exceptions.RequestException as e:
        result["fastag_provider"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
