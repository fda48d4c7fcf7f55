"""Dividend endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.database import get_db
from app.models.asset import Asset, AssetType
from app.models.dividend import Dividend

router = APIRouter(dependencies=[Depends(require_auth)])


class DividendUpsert(BaseModel):
    asset_id: int
    year: int = Field(..., ge=1900, le=2200)
    amount: float = Field(..., ge=0)


class DividendResponse(BaseModel):
    id: int
    asset_id: int
    year: int
    amount: float
    asset_name: str
    ticker: Optional[str] = None
    asset_type: AssetType


def _to_response(dividend: Dividend, asset: Asset) -> DividendResponse:
    return DividendResponse(
        id=dividend.id,
        asset_id=dividend.asset_id,
        year=dividend.year,
        amount=dividend.amount,
        asset_name=asset.name,
        ticker=asset.ticker,
        asset_type=asset.asset_type,
    )


@router.get("/", response_model=List[DividendResponse])
async def list_dividends(
    year: Optional[int] = Query(None),
    asset_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[DividendResponse]:
    """Received dividends, most recent year first."""
    query = select(Dividend, Asset).join(Asset, Dividend.asset_id == Asset.id)
    if year is not None:
        query = query.where(Dividend.year == year)
    if asset_id is not None:
        query = query.where(Dividend.asset_id == asset_id)

    result = await db.execute(query.order_by(Dividend.year.desc(), Asset.name))
    return [_to_response(dividend, asset) for dividend, asset in result.all()]


@router.post("/", response_model=DividendResponse)
async def upsert_dividend(
    dividend_in: DividendUpsert,
    db: AsyncSession = Depends(get_db),
) -> DividendResponse:
    """Record the dividends of an asset for a year, replacing a previous amount."""
    asset = (
        await db.execute(select(Asset).where(Asset.id == dividend_in.asset_id))
    ).scalar_one_or_none()
    if not asset:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Asset not found",
        )

    result = await db.execute(
        select(Dividend).where(
            Dividend.asset_id == dividend_in.asset_id,
            Dividend.year == dividend_in.year,
        )
    )
    dividend = result.scalar_one_or_none()
    if dividend:
        dividend.amount = dividend_in.amount
    else:
        dividend = Dividend(**dividend_in.model_dump())
        db.add(dividend)

    await db.commit()
    await db.refresh(dividend)
    return _to_response(dividend, asset)


@router.delete("/{dividend_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dividend(
    dividend_id: int,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a dividend entry."""
    result = await db.execute(select(Dividend).where(Dividend.id == dividend_id))
    dividend = result.scalar_one_or_none()
    if not dividend:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dividend not found",
        )
    await db.delete(dividend)
    await db.commit()
