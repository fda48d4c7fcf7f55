"""Projection endpoints."""

from typing import Dict, List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.config import settings
from app.core.database import get_db
from app.schemas.hypothesis import HypothesisResponse
from app.services.projection_service import projection_service

router = APIRouter(dependencies=[Depends(require_auth)])


class ScenarioValuesResponse(BaseModel):
    pessimistic: float
    average: float
    optimistic: float


class ProjectionYearResponse(BaseModel):
    year: int
    pessimistic: float
    average: float
    optimistic: float
    breakdown: Dict[str, ScenarioValuesResponse]


class ProjectionResponse(BaseModel):
    projections: List[ProjectionYearResponse]
    current_total: float
    hypotheses: List[HypothesisResponse]


@router.get("/", response_model=ProjectionResponse)
async def get_projections(
    years: int = Query(settings.DEFAULT_PROJECTION_YEARS, ge=0, le=settings.MAX_PROJECTION_YEARS),
    db: AsyncSession = Depends(get_db),
) -> ProjectionResponse:
    """Pessimistic, average and optimistic portfolio value for each future year."""
    result = await projection_service.project_portfolio(db, years)
    projections = [
        ProjectionYearResponse(
            year=p.year,
            pessimistic=p.pessimistic,
            average=p.average,
            optimistic=p.optimistic,
            breakdown={
                asset_type.value: ScenarioValuesResponse(
                    pessimistic=v.pessimistic, average=v.average, optimistic=v.optimistic
                )
                for asset_type, v in p.breakdown.items()
            },
        )
        for p in result["projections"]
    ]
    return ProjectionResponse(
        projections=projections,
        current_total=result["current_total"],
        hypotheses=[HypothesisResponse.model_validate(h) for h in result["hypotheses"]],
    )
