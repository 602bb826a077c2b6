from typing import Sequence

import numpy as np

EARTH_RADIUS_KM = 6371.0


def haversine_km(coord1: Sequence[float], coord2: Sequence[float]) -> float:
    """Great-circle distance in kilometres between two (lng, lat) points.

    Args:
        coord1: (longitude, latitude) in degrees
        coord2: (longitude, latitude) in degrees

    Returns:
        Distance in kilometres
    """
    lng1, lat1 = np.radians(coord1[0]), np.radians(coord1[1])
    lng2, lat2 = np.radians(coord2[0]), np.radians(coord2[1])

    d_lat = lat2 - lat1
    d_lng = lng2 - lng1

    a = (
        np.sin(d_lat / 2) ** 2 +
        np.cos(lat1) * np.cos(lat2) * np.sin(d_lng / 2) ** 2
    )
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(EARTH_RADIUS_KM * c)


def distance_band_score(distance_km: float, radius_km: float) -> float:
    """Map a distance to a score using bands relative to the search radius."""
    if distance_km <= radius_km * 0.5:
        return 1.0
    if distance_km <= radius_km:
        return 0.8
    if distance_km <= radius_km * 1.5:
        return 0.6
    if distance_km <= radius_km * 2:
        return 0.4
    return 0.2
