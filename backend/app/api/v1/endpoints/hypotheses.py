"""Growth hypothesis endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.database import get_db
from app.models.hypothesis import Hypothesis
from app.schemas.hypothesis import HypothesisResponse, HypothesisUpdate

router = APIRouter(dependencies=[Depends(require_auth)])


@router.get("/", response_model=List[HypothesisResponse])
async def list_hypotheses(db: AsyncSession = Depends(get_db)) -> List[HypothesisResponse]:
    """All hypotheses, ordered by asset type."""
    result = await db.execute(select(Hypothesis).order_by(Hypothesis.asset_type))
    return result.scalars().all()


@router.put("/{hypothesis_id}", response_model=HypothesisResponse)
async def update_hypothesis(
    hypothesis_id: int,
    hypothesis_in: HypothesisUpdate,
    db: AsyncSession = Depends(get_db),
) -> HypothesisResponse:
    """Update rates or monthly contributions of one hypothesis."""
    update_data = hypothesis_in.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )

    result = await db.execute(select(Hypothesis).where(Hypothesis.id == hypothesis_id))
    hypothesis = result.scalar_one_or_none()
    if not hypothesis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Hypothesis not found",
        )

    for field, value in update_data.items():
        setattr(hypothesis, field, value)

    await db.commit()
    await db.refresh(hypothesis)
    return hypothesis
