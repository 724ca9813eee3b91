"""
Calcul de distance pour le géorepérage des points de contrôle.
"""

import math

EARTH_RADIUS_METERS = 6371e3


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance orthodromique en mètres entre deux positions en degrés
    (formule de haversine, Terre sphérique de rayon moyen 6 371 km).
    """
    d_lat = _deg2rad(lat2 - lat1)
    d_lon = _deg2rad(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(_deg2rad(lat1)) * math.cos(_deg2rad(lat2))
        * math.sin(d_lon / 2) * math.sin(d_lon / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def _deg2rad(deg: float) -> float:
    return deg * (math.pi / 180)
