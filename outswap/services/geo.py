"""
Great-circle distance helpers for radius filters and proximity ordering.
"""

import math

EARTH_RADIUS_METERS = 6371008.8
METERS_PER_DEGREE_LATITUDE = 111320.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two (latitude, longitude) points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def bounding_box(latitude: float, longitude: float, radius_meters: float) -> tuple[float, float, float, float]:
    """
    Latitude/longitude box that contains the circle around a point.

    Used as a cheap SQL prefilter before exact distance checks. Near the
    poles the longitude span covers the whole globe.

    Returns:
        Tuple of (min_lat, max_lat, min_lon, max_lon)
    """
    lat_delta = radius_meters / METERS_PER_DEGREE_LATITUDE
    cos_lat = math.cos(math.radians(latitude))
    if cos_lat < 1e-6:
        lon_delta = 180.0
    else:
        lon_delta = min(180.0, radius_meters / (METERS_PER_DEGREE_LATITUDE * cos_lat))
    return (
        max(-90.0, latitude - lat_delta),
        min(90.0, latitude + lat_delta),
        longitude - lon_delta,
        longitude + lon_delta,
    )
