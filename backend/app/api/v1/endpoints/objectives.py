"""Allocation objective endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.database import get_db
from app.models.allocation_objective import AllocationCategory, AllocationObjective

router = APIRouter(dependencies=[Depends(require_auth)])

# Allowed drift when checking that a category adds up to 100%
SUM_TOLERANCE = 0.01


class ObjectiveResponse(BaseModel):
    id: int
    category: AllocationCategory
    key: str
    target_percent: float

    class Config:
        from_attributes = True


class ObjectiveUpdate(BaseModel):
    target_percent: float = Field(..., ge=0, le=100)


class ObjectiveTarget(BaseModel):
    key: str = Field(..., min_length=1, max_length=50)
    target_percent: float = Field(..., ge=0, le=100)


class ObjectiveBulkUpdate(BaseModel):
    category: AllocationCategory
    objectives: List[ObjectiveTarget]


@router.get("/", response_model=List[ObjectiveResponse])
async def list_objectives(
    category: Optional[AllocationCategory] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[ObjectiveResponse]:
    """Target allocations, optionally for one category."""
    query = select(AllocationObjective)
    if category is not None:
        query = query.where(AllocationObjective.category == category)
    result = await db.execute(
        query.order_by(AllocationObjective.category, AllocationObjective.key)
    )
    return result.scalars().all()


# Declared before /{objective_id} so "bulk" is not parsed as an id
@router.put("/bulk", response_model=List[ObjectiveResponse])
async def bulk_update_objectives(
    data: ObjectiveBulkUpdate,
    db: AsyncSession = Depends(get_db),
) -> List[ObjectiveResponse]:
    """Replace the targets of a whole category. Percentages must add up to 100."""
    keys = [o.key for o in data.objectives]
    if len(set(keys)) != len(keys):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Each objective key may appear only once",
        )

    total = sum(o.target_percent for o in data.objectives)
    if abs(total - 100) > SUM_TOLERANCE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Objectives must sum to 100% (got {total:.2f}%)",
        )

    result = await db.execute(
        select(AllocationObjective).where(AllocationObjective.category == data.category)
    )
    existing = {o.key: o for o in result.scalars().all()}

    for target in data.objectives:
        objective = existing.get(target.key)
        if objective:
            objective.target_percent = target.target_percent
        else:
            db.add(
                AllocationObjective(
                    category=data.category,
                    key=target.key,
                    target_percent=target.target_percent,
                )
            )

    await db.commit()

    result = await db.execute(
        select(AllocationObjective)
        .where(AllocationObjective.category == data.category)
        .order_by(AllocationObjective.key)
    )
    return result.scalars().all()


@router.put("/{objective_id}", response_model=ObjectiveResponse)
async def update_objective(
    objective_id: int,
    data: ObjectiveUpdate,
    db: AsyncSession = Depends(get_db),
) -> ObjectiveResponse:
    """Set a single target percentage."""
    result = await db.execute(
        select(AllocationObjective).where(AllocationObjective.id == objective_id)
    )
    objective = result.scalar_one_or_none()
    if not objective:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Objective not found",
        )

    objective.target_percent = data.target_percent
    await db.commit()
    await db.refresh(objective)
    return objective
