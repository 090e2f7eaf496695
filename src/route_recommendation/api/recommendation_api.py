# ============================================================
# 📦 src/route_recommendation/api/recommendation_api.py
# ============================================================

import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from route_recommendation.api.routes import router as recommendation_router

# ============================================================
# 🚀 App
# ============================================================

app = FastAPI(
    title="Route Recommendation API",
    description="Agrupamento geográfico de clientes com visita periódica",
    version="1.0.0",
    openapi_url="/openapi.json",
    docs_url="/docs",
)

# ============================================================
# 🌍 CORS
# ============================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================
# 🔗 Rotas
# ============================================================

app.include_router(recommendation_router, prefix="/route-recommendation")


def main():
    uvicorn.run(
        "route_recommendation.api.recommendation_api:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
