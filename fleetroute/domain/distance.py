"""
Distance calculation using the Haversine formula.

Used directly for booking quotes and as the fallback whenever the
routing service cannot produce a road distance.  No range checks happen
here; callers validate ``GeoPoint`` first.

Complexity: O(1) per call.
"""

import math

from .entities import GeoPoint

EARTH_RADIUS_KM = 6_371.0


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(a.latitude), math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # rounding can push h a hair past 1 for antipodal points
    if h > 1.0:
        h = 1.0
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))
