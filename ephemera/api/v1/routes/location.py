from fastapi import APIRouter, Depends, Query
from typing import List, Dict, Any

from ephemera.api.dependencies import get_location_service
from ephemera.services.location_service import LocationService

router = APIRouter()

@router.get(
    "/locations/search",
    response_model=List[Dict[str, Any]],
    summary="Search for cities and get their coordinates"
)
async def search_locations(
    q: str = Query(..., min_length=2, description="Search query for city name (e.g., 'lon', 'new york')"),
    service: LocationService = Depends(get_location_service),
):
    """
    Search for a city by name. Returns a list of matching locations
    with their display name, latitude, longitude, and timezone name.

    A client uses the returned latitude, longitude and timezone to
    fill the place fields of a chart request, which otherwise comes
    back as `needs_geocoding`.
    """
    return await service.search_cities(query=q)
