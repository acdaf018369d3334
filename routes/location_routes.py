"""
===========================================================================
routes/location_routes.py — Location & Geocoding Routes
===========================================================================

PURPOSE:
    Everything about WHERE the user is asking about:

    - POST /api/locations          — save a picked/detected location
    - GET  /api/locations/{id}     — fetch one location
    - POST /api/geocode            — turn a typed address into coordinates

    A location is chosen in one of three ways (its "type"):
        auto   → the browser's geolocation API
        map    → the user clicked on the map
        manual → the user typed an address (goes through /api/geocode first)

USED BY:
    main.py (included via the router)
===========================================================================
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from database import RecordStore, get_storage
from geocoding import geocode
from schemas import GeocodeRequest, GeocodeResult, Location, LocationCreate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/locations", response_model=Location)
async def create_location(location: LocationCreate,
                          storage: RecordStore = Depends(get_storage)):
    """
    Save a new location.

    Example JSON body:
        {"name": "London", "latitude": "51.5074", "longitude": "-0.1278", "type": "manual"}

    Invalid bodies (missing name, unknown type, ...) never get here —
    FastAPI rejects them with a 422.
    """
    created = storage.create_location(location)
    logger.info("Created location %d (%s, %s)", created.id, created.name, created.type)
    return created


@router.get("/api/locations/{location_id}", response_model=Location)
async def get_location(location_id: int, storage: RecordStore = Depends(get_storage)):
    location = storage.get_location(location_id)
    if location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


@router.post("/api/geocode", response_model=GeocodeResult)
async def geocode_address(request: GeocodeRequest):
    """
    Look up an address in the built-in table of known places.

    Returns {"name": ..., "lat": ..., "lng": ...}. Unknown addresses
    fall back to default coordinates rather than failing.
    """
    try:
        return geocode(request.address)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
