"""Great-circle distance and bearing between two stations."""

import math


EARTH_RADIUS_KM = 6371.0

COMPASS_POINTS = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
                  "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]


def calc_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2.

    Args:
        lat1, lon1: Home station latitude and longitude
        lat2, lon2: Contacted station latitude and longitude

    Returns:
        Bearing in degrees (0-360)
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dlon = math.radians(lon2 - lon1)
    x = math.sin(dlon) * math.cos(phi2)
    y = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlon)
    return (math.degrees(math.atan2(x, y)) + 360) % 360


def calc_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two points.

    Args:
        lat1, lon1: Home station latitude and longitude
        lat2, lon2: Contacted station latitude and longitude

    Returns:
        Distance in kilometers
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = phi2 - phi1
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def bearing_to_direction(bearing: float) -> str:
    """Convert bearing to a sixteen-point compass direction.

    Args:
        bearing: Bearing in degrees (0-360)

    Returns:
        Direction name (N, NNE, NE, ...)
    """
    return COMPASS_POINTS[round(bearing / 22.5) % 16]
