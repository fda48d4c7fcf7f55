"""Asset endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.database import get_db
from app.models.asset import Asset
from app.models.dividend import Dividend
from app.schemas.asset import AssetCreate, AssetHistoryPoint, AssetResponse, AssetUpdate
from app.services.snapshot_service import snapshot_service

router = APIRouter(dependencies=[Depends(require_auth)])


async def _get_asset_or_404(db: AsyncSession, asset_id: int) -> Asset:
    result = await db.execute(select(Asset).where(Asset.id == asset_id))
    asset = result.scalar_one_or_none()
    if not asset:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Asset not found",
        )
    return asset


@router.get("/", response_model=List[AssetResponse])
async def list_assets(db: AsyncSession = Depends(get_db)) -> List[AssetResponse]:
    """List all assets, largest holdings first."""
    result = await db.execute(select(Asset).order_by(Asset.current_amount.desc(), Asset.id))
    return result.scalars().all()


@router.post("/", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    asset_in: AssetCreate,
    db: AsyncSession = Depends(get_db),
) -> AssetResponse:
    """Create a new asset."""
    data = asset_in.model_dump()
    if data["buying_amount"] is None:
        data["buying_amount"] = data["quantity"] * data["buying_value"]
    if data["current_amount"] is None:
        data["current_amount"] = data["quantity"] * data["current_value"]

    asset = Asset(**data)
    db.add(asset)
    await db.commit()
    await db.refresh(asset)
    return asset


@router.get("/{asset_id}", response_model=AssetResponse)
async def get_asset(
    asset_id: int,
    db: AsyncSession = Depends(get_db),
) -> AssetResponse:
    """Get a specific asset."""
    return await _get_asset_or_404(db, asset_id)


@router.put("/{asset_id}", response_model=AssetResponse)
async def update_asset(
    asset_id: int,
    asset_in: AssetUpdate,
    db: AsyncSession = Depends(get_db),
) -> AssetResponse:
    """Update an asset with the fields that were sent."""
    update_data = asset_in.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )

    asset = await _get_asset_or_404(db, asset_id)
    for field, value in update_data.items():
        setattr(asset, field, value)

    # Keep totals in step with quantity and unit values unless they were sent
    if "current_amount" not in update_data and (
        "quantity" in update_data or "current_value" in update_data
    ):
        asset.current_amount = (asset.quantity or 0.0) * (asset.current_value or 0.0)
    if "buying_amount" not in update_data and (
        "quantity" in update_data or "buying_value" in update_data
    ):
        asset.buying_amount = (asset.quantity or 0.0) * (asset.buying_value or 0.0)

    await db.commit()
    await db.refresh(asset)
    return asset


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_asset(
    asset_id: int,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete an asset and its dividends. Snapshots keep their copy."""
    asset = await _get_asset_or_404(db, asset_id)
    await db.execute(delete(Dividend).where(Dividend.asset_id == asset.id))
    await db.delete(asset)
    await db.commit()


@router.get("/{asset_id}/history", response_model=List[AssetHistoryPoint])
async def get_asset_history(
    asset_id: int,
    db: AsyncSession = Depends(get_db),
) -> List[AssetHistoryPoint]:
    """Value of an asset across all snapshots, oldest first."""
    asset = await _get_asset_or_404(db, asset_id)
    return await snapshot_service.get_asset_history(db, asset.id, asset.name)
