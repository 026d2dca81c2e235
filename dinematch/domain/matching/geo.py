import math

EARTH_RADIUS_METERS = 6378137


def distance_meters(origin: tuple[float, float], destination: tuple[float, float]) -> float:
    """Great-circle (haversine) distance between two (latitude, longitude) points"""
    lat1, lon1 = map(math.radians, origin)
    lat2, lon2 = map(math.radians, destination)

    a = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))
