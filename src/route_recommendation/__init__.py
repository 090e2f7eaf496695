# ============================================================
# 📦 src/route_recommendation/__init__.py
# ============================================================

from route_recommendation.domain.entities import (
    GeoPoint,
    ServiceRecord,
    CustomerLocation,
    ClusterParameters,
    Cluster,
    RecommendationResult,
)
from route_recommendation.application.recommendation_use_case import RecommendationEngine
from route_recommendation.domain.convex_hull import convex_hull, cluster_boundary

__all__ = [
    "GeoPoint",
    "ServiceRecord",
    "CustomerLocation",
    "ClusterParameters",
    "Cluster",
    "RecommendationResult",
    "RecommendationEngine",
    "convex_hull",
    "cluster_boundary",
]
