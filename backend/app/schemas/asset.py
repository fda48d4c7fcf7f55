"""Asset schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.models.asset import AssetType, Geography


class AssetBase(BaseModel):
    """Base asset schema."""

    name: str = Field(..., min_length=1, max_length=200)
    ticker: Optional[str] = Field(None, max_length=32)
    isin: Optional[str] = Field(None, max_length=12)
    who: str = Field(..., min_length=1, max_length=100)
    asset_type: AssetType
    geo: Optional[Geography] = None
    auto_refresh: bool = False
    dividend_per_share: Optional[float] = Field(default=0.0, ge=0)
    notes: Optional[str] = None
    startup_rating: Optional[str] = Field(None, max_length=100)
    ir_reduction: Optional[str] = Field(None, max_length=100)
    alert_high: Optional[float] = Field(None, ge=0)
    alert_low: Optional[float] = Field(None, ge=0)


class AssetCreate(AssetBase):
    """Schema for creating an asset.

    Totals may be given explicitly; when omitted they are derived from the
    quantity and the unit values.
    """

    quantity: float = Field(default=0.0, ge=0)
    buying_value: float = Field(default=0.0, ge=0)
    buying_amount: Optional[float] = Field(None, ge=0)
    current_value: float = Field(default=0.0, ge=0)
    current_amount: Optional[float] = Field(None, ge=0)


class AssetUpdate(BaseModel):
    """Schema for updating an asset."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    ticker: Optional[str] = Field(None, max_length=32)
    isin: Optional[str] = Field(None, max_length=12)
    who: Optional[str] = Field(None, min_length=1, max_length=100)
    asset_type: Optional[AssetType] = None
    geo: Optional[Geography] = None
    quantity: Optional[float] = Field(None, ge=0)
    buying_value: Optional[float] = Field(None, ge=0)
    buying_amount: Optional[float] = Field(None, ge=0)
    current_value: Optional[float] = Field(None, ge=0)
    current_amount: Optional[float] = Field(None, ge=0)
    auto_refresh: Optional[bool] = None
    dividend_per_share: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    startup_rating: Optional[str] = Field(None, max_length=100)
    ir_reduction: Optional[str] = Field(None, max_length=100)
    alert_high: Optional[float] = Field(None, ge=0)
    alert_low: Optional[float] = Field(None, ge=0)

    @field_validator(
        "name",
        "who",
        "asset_type",
        "quantity",
        "buying_value",
        "buying_amount",
        "current_value",
        "current_amount",
        "auto_refresh",
    )
    @classmethod
    def reject_null(cls, v):
        """Required columns may be left out but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class AssetResponse(AssetBase):
    """Schema for asset response."""

    id: int
    quantity: float
    buying_value: float
    buying_amount: float
    current_value: float
    current_amount: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AssetHistoryPoint(BaseModel):
    """One asset as it stood in one snapshot."""

    date: str
    unit_value: float
    quantity: float
    amount: float
