"""Hypothesis schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.models.asset import AssetType


class HypothesisUpdate(BaseModel):
    """Schema for updating a hypothesis. Rates are annual percentages."""

    pessimistic_rate: Optional[float] = None
    avg_rate: Optional[float] = None
    optimistic_rate: Optional[float] = None
    monthly_contribution_owner_1: Optional[float] = None
    monthly_contribution_owner_2: Optional[float] = None


class HypothesisResponse(BaseModel):
    """Schema for hypothesis response."""

    id: int
    asset_type: AssetType
    pessimistic_rate: float
    avg_rate: float
    optimistic_rate: float
    monthly_contribution_owner_1: float
    monthly_contribution_owner_2: float
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
