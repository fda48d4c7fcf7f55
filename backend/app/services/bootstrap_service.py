"""Schema creation and default rows (hypotheses, allocation objectives)."""

import logging
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.models import Base
from app.models.allocation_objective import AllocationCategory, AllocationObjective
from app.models.asset import AssetType, Geography
from app.models.hypothesis import Hypothesis

logger = logging.getLogger(__name__)

# pessimistic / average / optimistic annual rates (%), monthly contributions per owner
DEFAULT_HYPOTHESES: Dict[AssetType, Dict[str, float]] = {
    AssetType.STOCK: {
        "pessimistic_rate": 3, "avg_rate": 7, "optimistic_rate": 12,
        "monthly_contribution_owner_1": 500, "monthly_contribution_owner_2": 200,
    },
    AssetType.CRYPTO: {
        "pessimistic_rate": -10, "avg_rate": 10, "optimistic_rate": 30,
        "monthly_contribution_owner_1": 500, "monthly_contribution_owner_2": 0,
    },
    AssetType.STARTUP: {
        "pessimistic_rate": 0, "avg_rate": 5, "optimistic_rate": 20,
        "monthly_contribution_owner_1": 0, "monthly_contribution_owner_2": 0,
    },
    AssetType.SAVINGS_ACCOUNT: {
        "pessimistic_rate": 2, "avg_rate": 3, "optimistic_rate": 4,
        "monthly_contribution_owner_1": 0, "monthly_contribution_owner_2": 0,
    },
    AssetType.ACTIVE_CASH: {
        "pessimistic_rate": 0, "avg_rate": 5, "optimistic_rate": 20,
        "monthly_contribution_owner_1": 0, "monthly_contribution_owner_2": 0,
    },
}


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_defaults(db: AsyncSession) -> Dict[str, int]:
    """Insert missing default rows. Existing rows are left untouched."""
    existing_types = set(
        (await db.execute(select(Hypothesis.asset_type))).scalars().all()
    )
    hypotheses_added = 0
    for asset_type, values in DEFAULT_HYPOTHESES.items():
        if asset_type in existing_types:
            continue
        db.add(Hypothesis(asset_type=asset_type, **values))
        hypotheses_added += 1

    rows = (
        await db.execute(select(AllocationObjective.category, AllocationObjective.key))
    ).all()
    existing_objectives = {(AllocationCategory(category), key) for category, key in rows}
    wanted = [(AllocationCategory.TYPE, t.value) for t in AssetType] + [
        (AllocationCategory.GEO, g.value) for g in Geography
    ]
    objectives_added = 0
    for category, key in wanted:
        if (category, key) in existing_objectives:
            continue
        db.add(AllocationObjective(category=category, key=key, target_percent=0.0))
        objectives_added += 1

    await db.commit()
    if hypotheses_added or objectives_added:
        logger.info(
            f"Seeded {hypotheses_added} hypotheses and {objectives_added} allocation objectives"
        )
    return {"hypotheses": hypotheses_added, "objectives": objectives_added}
