"""
===========================================================================
geocoding.py — Mock Geocoder
===========================================================================

PURPOSE:
    Turn a typed address ("London, UK") into a name and coordinates.

    This is a STATIC lookup table, not a real geocoding service. A real
    app would call Google Maps, Nominatim or similar here. Anything we
    don't recognise gets San Francisco's coordinates so the demo keeps
    working.

USED BY:
    routes/location_routes.py (POST /api/geocode)
===========================================================================
"""

from schemas import GeocodeResult

KNOWN_PLACES = {
    "San Francisco": {"lat": "37.7749", "lng": "-122.4194"},
    "New York": {"lat": "40.7128", "lng": "-74.0060"},
    "London": {"lat": "51.5074", "lng": "-0.1278"},
}

DEFAULT_PLACE = "San Francisco"


def geocode(address: str) -> GeocodeResult:
    """
    Look up an address in KNOWN_PLACES.

    The first known city whose name appears anywhere in the address
    (case-insensitive) wins, e.g. "downtown new york" → New York.
    Otherwise the address itself is returned as the name, with the
    default coordinates.

    Raises:
        ValueError: if the address is empty.
    """
    if not address:
        raise ValueError("Address is required")

    lowered = address.lower()
    for city, coords in KNOWN_PLACES.items():
        if city.lower() in lowered:
            return GeocodeResult(name=city, **coords)

    return GeocodeResult(name=address, **KNOWN_PLACES[DEFAULT_PLACE])
