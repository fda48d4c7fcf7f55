"""Snapshot endpoints."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.database import get_db
from app.schemas.snapshot import SnapshotCaptureResponse, SnapshotResponse, SnapshotSummary
from app.services.snapshot_service import SUMMARY_RANGES, snapshot_service

router = APIRouter(dependencies=[Depends(require_auth)])


@router.get("/", response_model=List[SnapshotResponse])
async def list_snapshots(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> List[SnapshotResponse]:
    """Stored snapshots, newest first."""
    return await snapshot_service.list_snapshots(db, limit=limit, offset=offset)


@router.post("/", response_model=SnapshotCaptureResponse)
async def capture_snapshot(db: AsyncSession = Depends(get_db)) -> SnapshotCaptureResponse:
    """Capture today's snapshot, replacing one already taken today."""
    snapshot = await snapshot_service.capture(db, date.today())
    return SnapshotCaptureResponse(
        success=True,
        date=snapshot.snapshot_date,
        total_value=snapshot.total_value,
        message="Snapshot enregistré",
    )


@router.get("/summary", response_model=SnapshotSummary)
async def get_snapshot_summary(
    range: str = Query("all", description="One of 3m, 6m, 1y, all"),
    db: AsyncSession = Depends(get_db),
) -> SnapshotSummary:
    """Chart series for the range and the change across it."""
    if range not in SUMMARY_RANGES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid range. Expected one of: {', '.join(SUMMARY_RANGES)}",
        )
    return await snapshot_service.get_summary(db, range)
