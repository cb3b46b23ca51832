"""
Geodesy utilities.

Great-circle distance and initial bearing from a fixed receiving station to
a reported position, on a spherical Earth.
"""

import math


EARTH_RADIUS_KM = 6371.0         # Earth's mean radius
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000.0
KM_PER_NM = 1.852                # Kilometres per nautical mile

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def distance_nm(station_lat: float, station_lon: float, lat: float, lon: float) -> float:
    """
    Calculate haversine great-circle distance from the station to a point.

    Args:
        station_lat, station_lon: Station coordinates in degrees
        lat, lon: Target coordinates in degrees

    Returns:
        Distance in nautical miles
    """
    lat1_rad = math.radians(station_lat)
    lat2_rad = math.radians(lat)
    dlat = math.radians(lat - station_lat)
    dlon = math.radians(lon - station_lon)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    # Rounding can push a just past 1 near antipodal points
    a = min(1.0, max(0.0, a))
    c =2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return (EARTH_RADIUS_KM * c) / KM_PER_NM


def bearing_deg(station_lat: float, station_lon: float, lat: float, lon: float) -> float:
    """
    Calculate initial bearing from the station to a point.

    Args:
        station_lat, station_lon: Station coordinates in degrees
        lat, lon: Target coordinates in degrees

    Returns:
        Bearing in degrees clockwise from true north, in [0, 360).
        Coincident points give 0.0.
    """
    lat1_rad = math.radians(station_lat)
    lat2_rad = math.radians(lat)
    dlon = math.radians(lon - station_lon)

    y = math.sin(dlon) * math.cos(lat2_rad)
    x = math.cos(lat1_rad) * math.sin(lat2_rad) - math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(dlon)

    # atan2(0, 0) is 0 in Python, but -0.0 inputs can yield +/-180
    if x == 0.0 and y == 0.0:
        return 0.0

    bearing = (math.degrees(math.atan2(y, x)) + 360.0) % 360.0
    # (-tiny + 360) % 360 can round to exactly 360.0
    return 0.0 if bearing >= 360.0 else bearing


def is_valid_position(lat: float, lon: float) -> bool:
    """Latitude within +/-90 and longitude within +/-180."""
    return abs(lat) <= 90 and abs(lon) <= 180


def compass_direction(bearing: float) -> str:
    """Name of the 16-point compass direction closest to a bearing."""
    # Halves round up
    return COMPASS_POINTS[math.floor(bearing / 22.5 + 0.5) % 16]


def destination_point(
    lat: float,
    lon: float,
    distance_m: float,
    bearing: float,
) -> tuple[float, float]:
    """
    Point reached travelling a great-circle distance along a bearing.

    Used to place synthetic receptions around the station.

    Args:
        lat, lon: Start coordinates in degrees
        distance_m: Distance in meters
        bearing: Initial bearing in degrees

    Returns:
        Tuple of (lat, lon) in degrees
    """
    brng = math.radians(bearing)
    lat1 = math.radians(lat)
    lon1 = math.radians(lon)
    angular = distance_m / EARTH_RADIUS_M

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(brng)
    )
    lon2 = lon1 + math.atan2(
        math.sin(brng) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    return math.degrees(lat2), math.degrees(lon2)
