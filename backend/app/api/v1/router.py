"""API v1 router."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    assets,
    snapshots,
    dashboard,
    projections,
    hypotheses,
    prices,
    dividends,
    objectives,
    cron,
    system,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(assets.router, prefix="/assets", tags=["Assets"])
api_router.include_router(snapshots.router, prefix="/snapshots", tags=["Snapshots"])
api_router.include_router(projections.router, prefix="/projections", tags=["Projections"])
api_router.include_router(hypotheses.router, prefix="/hypotheses", tags=["Hypotheses"])
api_router.include_router(prices.router, prefix="/prices", tags=["Prices"])
api_router.include_router(dividends.router, prefix="/dividends", tags=["Dividends"])
api_router.include_router(objectives.router, prefix="/objectives", tags=["Objectives"])
api_router.include_router(cron.router, prefix="/cron", tags=["Cron"])
api_router.include_router(system.router, prefix="/system", tags=["System"])
