"""
Random vehicle search — any vehicle number, no booking needed.
GET    /vehicles/{vehicle_number}/search — store first, then a live FASTag call
GET    /vehicles/searches                — saved search history, newest first
DELETE /vehicles/searches/{search_id}    — remove one history entry
"""

from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from freight_tracking.database import get_db
from freight_tracking.schemas.toll_crossing import SearchResponse, TollCrossingOut
from freight_tracking.schemas.random_search import RandomSearchOut
from freight_tracking.services.errors import SearchNotFound
from freight_tracking.services.random_search_service import search_vehicle
from freight_tracking.services.search_history import list_searches, delete_search

router = APIRouter()


@router.get("/vehicles/{vehicle_number}/search", response_model=SearchResponse, summary="Search a vehicle by number")
async def search(
    vehicle_number: str,
    mode: Literal["current", "all_history"] = "current",
    days_range: Optional[int] = Query(None, ge=1, le=30),
    db: Session = Depends(get_db),
):
    """Store first, then a live FASTag call. 'No data' is a normal answer, not an error."""
    try:
        result = await search_vehicle(db, vehicle_number, mode, days_range=days_range)
    except SearchNotFound as e:
        return SearchResponse(vehicle_number=e.vehicle_number, mode=mode, status="no_data", message=str(e))

    return SearchResponse(
        vehicle_number=result.vehicle_number,
        mode=result.mode,
        status="found",
        source=result.source,
        is_mock_data=result.is_mock_data,
        data=[TollCrossingOut.model_validate(c) for c in result.data],
    )


@router.get("/vehicles/searches", response_model=list[RandomSearchOut], summary="Saved search history")
def get_searches(limit: int = Query(50, ge=1, le=200), vehicle_number: Optional[str] = None,
                 db: Session = Depends(get_db)):
    return list_searches(db, limit, vehicle_number=vehicle_number)


@router.delete("/vehicles/searches/{search_id}", summary="Delete a saved search")
def remove_search(search_id: int, db: Session = Depends(get_db)):
    if not delete_search(db, search_id):
        raise HTTPException(status_code=404, detail="Saved search not found")
    return {"deleted": search_id}
