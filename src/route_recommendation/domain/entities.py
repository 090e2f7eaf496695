# ============================================================
# 📦 src/route_recommendation/domain/entities.py
# ============================================================

import math
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Optional, List, Dict, Any

from route_recommendation.config.settings import env_parameter_defaults


UNKNOWN_AREA = "Unknown"


# ============================================================
# 🌍 Ponto geográfico
# ============================================================
@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        """Coordenadas finitas e dentro de [-90, 90] x [-180, 180]."""
        try:
            lat = float(self.latitude)
            lon = float(self.longitude)
        except (TypeError, ValueError):
            return False
        if not (math.isfinite(lat) and math.isfinite(lon)):
            return False
        return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0

    def as_tuple(self):
        return (self.latitude, self.longitude)


# ============================================================
# 🔧 Registro de serviço periódico
# ============================================================
@dataclass(frozen=True)
class ServiceRecord:
    """Um serviço contratado pelo cliente (ex.: controle elétrico anual)."""
    service_type: Optional[str] = None
    next_due: Optional[date] = None
    last_done: Optional[date] = None
    interval_months: int = 12


# ============================================================
# 👤 Cliente com localização
# ============================================================
@dataclass(frozen=True)
class CustomerLocation:
    """
    Cópia pontual de um cliente vinda do cadastro externo.
    O motor só lê estes registros, nunca os altera.
    """
    id: Any
    location: GeoPoint
    display_name: str = ""
    area_name: Optional[str] = None
    category: Optional[str] = None
    next_due_date: Optional[date] = None
    services: tuple = ()

    @property
    def area_key(self) -> str:
        return self.area_name if self.area_name else UNKNOWN_AREA


# ============================================================
# ⚙️ Parâmetros de clusterização
# ============================================================
@dataclass(frozen=True)
class ClusterParameters:
    days_ahead_horizon: int = 60
    max_customers_per_cluster: int = 15
    max_travel_minutes: int = 480
    min_cluster_size: int = 3
    cluster_radius_km: float = 5.0
    service_time_minutes_per_stop: int = 30

    def __post_init__(self):
        if not math.isfinite(self.cluster_radius_km) or self.cluster_radius_km <= 0:
            raise ValueError(f"cluster_radius_km deve ser > 0 (recebido {self.cluster_radius_km})")
        if self.min_cluster_size < 1:
            raise ValueError(f"min_cluster_size deve ser >= 1 (recebido {self.min_cluster_size})")
        if self.max_customers_per_cluster < 2:
            raise ValueError(
                f"max_customers_per_cluster deve ser >= 2 (recebido {self.max_customers_per_cluster})"
            )
        if self.days_ahead_horizon < 0:
            raise ValueError(f"days_ahead_horizon não pode ser negativo (recebido {self.days_ahead_horizon})")
        if self.max_travel_minutes < 0:
            raise ValueError(f"max_travel_minutes não pode ser negativo (recebido {self.max_travel_minutes})")
        if self.service_time_minutes_per_stop < 0:
            raise ValueError(
                f"service_time_minutes_per_stop não pode ser negativo (recebido {self.service_time_minutes_per_stop})"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClusterParameters":
        """Ignora chaves desconhecidas e valores None (mantém o default)."""
        known = {f for f in cls.__dataclass_fields__}
        kwargs = {k: v for k, v in (data or {}).items() if k in known and v is not None}
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides) -> "ClusterParameters":
        values = env_parameter_defaults()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


# ============================================================
# 🗺️ Cluster recomendado
# ============================================================
@dataclass
class Cluster:
    """
    Agrupamento pontuado de clientes. Criado a cada execução do motor,
    nunca persistido.
    """
    members: List[CustomerLocation]
    centroid: GeoPoint
    primary_area_name: str
    categories: List[str]
    overdue_count: int
    upcoming_count: int
    efficiency_score: int
    estimated_travel_minutes: int
    estimated_km: int
    density: float
    avg_radius_from_centroid_km: float
    distance_from_depot_km: float
    is_area_fallback: bool = False
    is_trimmed: bool = False
    id: Optional[int] = None

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def customer_ids(self) -> list:
        return [c.id for c in self.members]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customerIds": self.customer_ids,
            "customerCount": self.member_count,
            "centroid": {"lat": self.centroid.latitude, "lng": self.centroid.longitude},
            "primaryAreaName": self.primary_area_name,
            "categories": list(self.categories),
            "overdueCount": self.overdue_count,
            "upcomingCount": self.upcoming_count,
            "efficiencyScore": self.efficiency_score,
            "estimatedTravelMinutes": self.estimated_travel_minutes,
            "estimatedKm": self.estimated_km,
            "density": round(self.density, 1),
            "avgRadiusFromCentroidKm": round(self.avg_radius_from_centroid_km, 1),
            "distanceFromDepotKm": round(self.distance_from_depot_km),
            "isAreaFallback": self.is_area_fallback,
            "isTrimmed": self.is_trimmed,
        }


# ============================================================
# 📋 Resultado completo de uma execução
# ============================================================
@dataclass
class RecommendationResult:
    clusters: List[Cluster]
    strategy: str
    eligible_count: int
    noise_ids: list = field(default_factory=list)
    diagnostics: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "eligibleCount": self.eligible_count,
            "noiseIds": list(self.noise_ids),
            "clusters": [c.to_dict() for c in self.clusters],
            "diagnostics": self.diagnostics,
        }
