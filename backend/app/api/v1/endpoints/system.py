"""System administration endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_auth
from app.core.database import get_db
from app.models import Base
from app.services.bootstrap_service import seed_defaults

router = APIRouter(dependencies=[Depends(require_auth)])


class InitResponse(BaseModel):
    """Rows added by the initialisation."""
    success: bool
    hypotheses_added: int
    objectives_added: int


@router.post("/init", response_model=InitResponse)
async def init_database(db: AsyncSession = Depends(get_db)) -> InitResponse:
    """Create missing tables and seed default rows. Safe to call repeatedly."""
    conn = await db.connection()
    await conn.run_sync(Base.metadata.create_all)
    added = await seed_defaults(db)
    return InitResponse(
        success=True,
        hypotheses_added=added["hypotheses"],
        objectives_added=added["objectives"],
    )
