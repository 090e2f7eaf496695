# ============================================================
# 📦 src/route_recommendation/config/settings.py
# ============================================================

import os
from typing import Dict, Any


# =====================================================
# ⚙️ Defaults dos parâmetros (sobrescritos via ambiente)
# =====================================================
PARAMETER_ENV = {
    "days_ahead_horizon": ("ROUTE_DAYS_AHEAD", int, 60),
    "max_customers_per_cluster": ("ROUTE_MAX_CUSTOMERS", int, 15),
    "max_travel_minutes": ("ROUTE_MAX_TRAVEL_MIN", int, 480),
    "min_cluster_size": ("ROUTE_MIN_CLUSTER_SIZE", int, 3),
    "cluster_radius_km": ("ROUTE_CLUSTER_RADIUS_KM", float, 5.0),
    "service_time_minutes_per_stop": ("ROUTE_SERVICE_MIN", int, 30),
}

# Depósito padrão (centro de Oslo)
DEFAULT_DEPOT_LAT = 59.9139
DEFAULT_DEPOT_LON = 10.7522

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def env_parameter_defaults() -> Dict[str, Any]:
    """
    Lê os defaults de ClusterParameters das variáveis de ambiente.
    Valores vazios caem no default; valores não numéricos levantam ValueError.
    """
    values = {}
    for field_name, (env_name, cast, default) in PARAMETER_ENV.items():
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            values[field_name] = default
            continue
        try:
            values[field_name] = cast(raw.strip())
        except ValueError:
            raise ValueError(f"Variável {env_name} inválida: '{raw}'")
    return values


def default_depot():
    """Depósito configurado em ROUTE_DEPOT_LAT / ROUTE_DEPOT_LON."""
    from route_recommendation.domain.entities import GeoPoint

    lat = float(os.getenv("ROUTE_DEPOT_LAT", DEFAULT_DEPOT_LAT))
    lon = float(os.getenv("ROUTE_DEPOT_LON", DEFAULT_DEPOT_LON))
    return GeoPoint(lat, lon)
