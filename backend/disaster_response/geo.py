# disaster_response/geo.py
# ------------------------------------------------------------
# Small geo helpers (great-circle distance for team lookups).
# ------------------------------------------------------------

import math

from .models import Coordinates

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(a: Coordinates, b: Coordinates) -> float:
    """
    Great-circle distance between two points, in meters.
    """
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.lng - a.lng)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))
