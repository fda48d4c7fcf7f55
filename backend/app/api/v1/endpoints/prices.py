"""Price refresh endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.database import get_db
from app.core.rate_limit import limiter, RATE_LIMITS
from app.models.asset import Asset
from app.services.price_service import price_service

router = APIRouter(dependencies=[Depends(require_auth)])


@router.post("/refresh")
@limiter.limit(RATE_LIMITS["price_fetch"])
async def refresh_all_prices(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Refresh every asset that has a ticker."""
    return await price_service.refresh_prices(db)


@router.post("/refresh/{asset_id}")
@limiter.limit(RATE_LIMITS["price_fetch"])
async def refresh_asset_price(
    request: Request,
    asset_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Refresh one asset from its ticker."""
    result = await db.execute(select(Asset).where(Asset.id == asset_id))
    asset = result.scalar_one_or_none()
    if not asset:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Asset not found",
        )
    if not asset.ticker:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Asset has no ticker",
        )

    quote = await price_service.get_quote(asset.ticker)
    if quote is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"No quote available for {asset.ticker}",
        )

    change = await price_service.apply_quote(asset, quote)
    await db.commit()
    return {"success": True, **change}
