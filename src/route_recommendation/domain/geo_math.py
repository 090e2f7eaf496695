# ============================================================
# 📦 src/route_recommendation/domain/geo_math.py
# ============================================================

import math
from typing import Sequence

import numpy as np

from route_recommendation.domain.entities import GeoPoint


EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0
MIN_AREA_KM2 = 0.1


# ============================================================
# 🌍 Distância Haversine
# ============================================================
def haversine_km(lat1, lon1, lat2, lon2) -> float:
    """
    Distância de grande círculo em km.
    Retorna +inf se alguma coordenada não for finita (par descartado nas comparações).
    """
    if not all(math.isfinite(v) for v in (lat1, lon1, lat2, lon2)):
        return math.inf

    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


# ============================================================
# 📍 Centroide (média aritmética)
# ============================================================
def centroid(points: Sequence[GeoPoint]) -> GeoPoint:
    if not points:
        raise ValueError("Centroide indefinido para lista vazia.")
    lat = float(np.mean([p.latitude for p in points]))
    lon = float(np.mean([p.longitude for p in points]))
    return GeoPoint(lat, lon)


# ============================================================
# 📦 Bounding box e área aproximada
# ============================================================
def bounding_box(points: Sequence[GeoPoint]):
    """Retorna (min_lat, max_lat, min_lon, max_lon)."""
    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    return min(lats), max(lats), min(lons), max(lons)


def bounding_box_area_km2(points: Sequence[GeoPoint], center: GeoPoint = None) -> float:
    """
    Área do retângulo min/max em km², com 111 km/grau de latitude e
    111*cos(lat_centroide) km/grau de longitude. Nunca menor que 0.1 km².
    """
    min_lat, max_lat, min_lon, max_lon = bounding_box(points)
    center = center or centroid(points)

    lat_km = (max_lat - min_lat) * KM_PER_DEGREE
    lon_km = (max_lon - min_lon) * KM_PER_DEGREE * math.cos(math.radians(center.latitude))
    return max(lat_km * lon_km, MIN_AREA_KM2)
