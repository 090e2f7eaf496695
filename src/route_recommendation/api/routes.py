# ============================================================
# 📦 src/route_recommendation/api/routes.py
# ============================================================

import math

from fastapi import APIRouter, HTTPException
from loguru import logger

from route_recommendation.api.schemas import (
    CustomerSchema,
    HullRequest,
    HullResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from route_recommendation.application.recommendation_use_case import RecommendationEngine
from route_recommendation.config.settings import default_depot
from route_recommendation.domain.convex_hull import convex_hull
from route_recommendation.domain.entities import (
    ClusterParameters,
    CustomerLocation,
    GeoPoint,
    ServiceRecord,
)

router = APIRouter()


def _to_customer(c: CustomerSchema) -> CustomerLocation:
    lat = c.lat if c.lat is not None else math.nan
    lng = c.lng if c.lng is not None else math.nan
    return CustomerLocation(
        id=c.id,
        location=GeoPoint(lat, lng),
        display_name=c.display_name,
        area_name=c.area_name,
        category=c.category,
        next_due_date=c.next_due_date,
        services=tuple(
            ServiceRecord(
                service_type=s.service_type,
                next_due=s.next_due,
                last_done=s.last_done,
                interval_months=s.interval_months,
            )
            for s in c.services
        ),
    )


# ============================================================
# 🧠 Health
# ============================================================
@router.get("/health", tags=["Status"])
def health():
    return {"status": "ok", "message": "Route recommendation API saudável 🧩"}


# ============================================================
# 🚀 Recomendações
# ============================================================
@router.post("/recommendations", response_model=RecommendationResponse, tags=["Recomendação"])
def recommendations(body: RecommendationRequest):
    try:
        params = ClusterParameters.from_env(**body.parameters.model_dump())
    except ValueError as e:
        raise HTTPException(422, str(e))

    depot = GeoPoint(body.depot.lat, body.depot.lng) if body.depot else default_depot()
    if not depot.is_valid:
        raise HTTPException(422, "Depósito com coordenadas inválidas.")

    customers = [_to_customer(c) for c in body.customers]
    logger.info(f"📥 /recommendations | clientes={len(customers)}")

    result = RecommendationEngine(params=params, depot=depot).generate_report(customers, today=body.today)
    return result.to_dict()


# ============================================================
# 🔷 Envoltória convexa
# ============================================================
@router.post("/hull", response_model=HullResponse, tags=["Recomendação"])
def hull(body: HullRequest):
    points = [GeoPoint(p.lat, p.lng) for p in body.points]
    invalid = [i for i, p in enumerate(points) if not p.is_valid]
    if invalid:
        raise HTTPException(422, f"Pontos com coordenadas inválidas: {invalid}")
    return {"hull": [{"lat": p.latitude, "lng": p.longitude} for p in convex_hull(points)]}
