# ============================================================
# 📦 src/route_recommendation/api/schemas.py
# ============================================================

from datetime import date
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float
    lng: float


class ServiceRecordSchema(BaseModel):
    service_type: Optional[str] = None
    next_due: Optional[date] = None
    last_done: Optional[date] = None
    interval_months: int = Field(12, ge=1)


class CustomerSchema(BaseModel):
    id: Union[int, str]
    lat: Optional[float] = None
    lng: Optional[float] = None
    display_name: str = ""
    area_name: Optional[str] = None
    category: Optional[str] = None
    next_due_date: Optional[date] = None
    services: List[ServiceRecordSchema] = Field(default_factory=list)


class ParametersSchema(BaseModel):
    days_ahead_horizon: Optional[int] = Field(None, ge=0)
    max_customers_per_cluster: Optional[int] = Field(None, ge=2)
    max_travel_minutes: Optional[int] = Field(None, ge=0)
    min_cluster_size: Optional[int] = Field(None, ge=1)
    cluster_radius_km: Optional[float] = Field(None, gt=0)
    service_time_minutes_per_stop: Optional[int] = Field(None, ge=0)


class RecommendationRequest(BaseModel):
    customers: List[CustomerSchema]
    parameters: ParametersSchema = Field(default_factory=ParametersSchema)
    depot: Optional[GeoPointSchema] = None
    today: Optional[date] = None


class ClusterSchema(BaseModel):
    id: int
    customerIds: List[Union[int, str]]
    customerCount: int
    centroid: GeoPointSchema
    primaryAreaName: str
    categories: List[str]
    overdueCount: int
    upcomingCount: int
    efficiencyScore: int
    estimatedTravelMinutes: int
    estimatedKm: int
    density: float
    avgRadiusFromCentroidKm: float
    distanceFromDepotKm: float
    isAreaFallback: bool
    isTrimmed: bool


class RecommendationResponse(BaseModel):
    strategy: str
    eligibleCount: int
    noiseIds: List[Union[int, str]]
    clusters: List[ClusterSchema]
    diagnostics: Optional[Dict[str, Any]] = None


class HullRequest(BaseModel):
    points: List[GeoPointSchema]


class HullResponse(BaseModel):
    hull: List[GeoPointSchema]
