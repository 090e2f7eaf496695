# ============================================================
# 📦 src/route_recommendation/domain/efficiency_scorer.py
# ============================================================

import math
from collections import Counter
from datetime import date
from typing import Sequence

from loguru import logger

from route_recommendation.domain.due_dates import is_overdue
from route_recommendation.domain.entities import Cluster, CustomerLocation, GeoPoint
from route_recommendation.domain.geo_math import bounding_box_area_km2, centroid, distance_km


# ============================================================
# 📐 Constantes do modelo (alterar muda o ranking!)
# ============================================================
ROUND_TRIP_SPEED_KMH = 50.0
INTRA_AREA_SPEED_KMH = 30.0
DETOUR_FACTOR = 1.5

SCORE_DENSITY_WEIGHT = 10.0
SCORE_DEPOT_PENALTY = 0.05
SCORE_SPREAD_PENALTY = 0.3
SCORE_SCALE = 10.0

MIN_SCORABLE_SIZE = 2


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def clamp(lo, hi, value):
    return max(lo, min(hi, value))


def efficiency_score(density: float, n: int, distance_from_depot_km: float, avg_radius_km: float) -> int:
    """Score 0-100: premia grupos densos, numerosos e próximos; pune dispersão e distância."""
    raw = (density * n * SCORE_DENSITY_WEIGHT) / (
        1 + distance_from_depot_km * SCORE_DEPOT_PENALTY + avg_radius_km * SCORE_SPREAD_PENALTY
    )
    return clamp(0, 100, round_half_up(raw * SCORE_SCALE))


def primary_area(members: Sequence[CustomerLocation]) -> str:
    # empate: área que aparece primeiro
    return Counter(c.area_key for c in members).most_common(1)[0][0]


def distinct_categories(members: Sequence[CustomerLocation]) -> list:
    return list(dict.fromkeys(c.category for c in members if c.category))


class EfficiencyScorer:
    """
    Estima tempo/distância de um grupo de clientes a partir do depósito
    e calcula o score de eficiência.
    """

    def __init__(self, depot: GeoPoint, service_time_minutes_per_stop: int = 30, today: date = None):
        self.depot = depot
        self.service_time_minutes_per_stop = service_time_minutes_per_stop
        self.today = today or date.today()

    def score(self, members: Sequence[CustomerLocation], is_area_fallback: bool = False) -> Cluster:
        n = len(members)
        if n < MIN_SCORABLE_SIZE:
            raise ValueError(f"Cluster precisa de ao menos {MIN_SCORABLE_SIZE} membros (recebido {n}).")

        points = [c.location for c in members]
        center = centroid(points)

        dist_depot = distance_km(self.depot, center)
        avg_radius = sum(distance_km(p, center) for p in points) / n
        density = n / bounding_box_area_km2(points, center)

        travel_to_area = (dist_depot * 2 / ROUND_TRIP_SPEED_KMH) * 60
        intra_area = (avg_radius * n * DETOUR_FACTOR / INTRA_AREA_SPEED_KMH) * 60
        service = n * self.service_time_minutes_per_stop

        overdue = sum(1 for c in members if is_overdue(c, self.today))

        cluster = Cluster(
            members=list(members),
            centroid=center,
            primary_area_name=primary_area(members),
            categories=distinct_categories(members),
            overdue_count=overdue,
            upcoming_count=n - overdue,
            efficiency_score=efficiency_score(density, n, dist_depot, avg_radius),
            estimated_travel_minutes=round_half_up(travel_to_area + intra_area + service),
            estimated_km=round_half_up(dist_depot * 2 + avg_radius * n * DETOUR_FACTOR),
            density=density,
            avg_radius_from_centroid_km=avg_radius,
            distance_from_depot_km=dist_depot,
            is_area_fallback=is_area_fallback,
        )

        logger.debug(
            f"📊 Cluster {cluster.primary_area_name} | n={n} | score={cluster.efficiency_score} "
            f"| {cluster.estimated_travel_minutes} min | {cluster.estimated_km} km"
        )
        return cluster
