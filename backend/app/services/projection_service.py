"""Multi-year portfolio projections under three growth scenarios."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.asset import Asset, AssetType
from app.models.hypothesis import Hypothesis

logger = logging.getLogger(__name__)


# ── Data classes ────────────────────────────────────────────────────

@dataclass
class ScenarioValues:
    pessimistic: float
    average: float
    optimistic: float

    def copy(self) -> "ScenarioValues":
        return ScenarioValues(self.pessimistic, self.average, self.optimistic)


@dataclass
class ProjectionYear:
    year: int
    pessimistic: float
    average: float
    optimistic: float
    breakdown: Dict[AssetType, ScenarioValues] = field(default_factory=dict)


# ── Helpers ─────────────────────────────────────────────────────────

def totals_by_type(assets: Iterable[Asset]) -> Dict[AssetType, float]:
    """Sum current_amount per asset type."""
    totals: Dict[AssetType, float] = {}
    for asset in assets:
        asset_type = AssetType(asset.asset_type)
        totals[asset_type] = totals.get(asset_type, 0.0) + (asset.current_amount or 0.0)
    return totals


def contribution_factor(year: int, growth_rate: Optional[float] = None) -> float:
    """Scale applied to the year-``year`` contribution.

    Contributions grow geometrically: (1 + rate/100) ** year, so with the
    default 1% the first simulated year contributes 1.01x the base amount.
    """
    rate = settings.CONTRIBUTION_GROWTH_RATE if growth_rate is None else growth_rate
    return (1 + rate / 100) ** year


def annual_contribution(hypothesis, year: int, growth_rate: Optional[float] = None) -> float:
    monthly = (hypothesis.monthly_contribution_owner_1 or 0.0) + (
        hypothesis.monthly_contribution_owner_2 or 0.0
    )
    return monthly * 12 * contribution_factor(year, growth_rate)


# ── Engine ──────────────────────────────────────────────────────────

class ProjectionService:
    """Year-by-year compounding simulation with periodic contributions."""

    def simulate(
        self,
        current_totals: Mapping[AssetType, float],
        hypotheses: Mapping[AssetType, Hypothesis],
        years: int,
        contribution_growth_rate: Optional[float] = None,
    ) -> List[ProjectionYear]:
        """Project ``current_totals`` over ``years`` years.

        Returns ``years + 1`` entries. Year 0 is the current state with no
        growth applied. Each later year, for every type that has a hypothesis::

            value = value * (1 + rate / 100) + annual_contribution

        Types without a hypothesis keep their previous value. Values are
        rounded to cents every year and the rounded value is carried forward.
        Negative rates are allowed and values are not floored at zero.
        """
        if years < 0:
            raise ValueError("years must be >= 0")

        running: Dict[AssetType, ScenarioValues] = {
            asset_type: ScenarioValues(amount, amount, amount)
            for asset_type, amount in current_totals.items()
        }

        initial_total = sum(current_totals.values())
        results = [
            ProjectionYear(
                year=0,
                pessimistic=initial_total,
                average=initial_total,
                optimistic=initial_total,
                breakdown={t: v.copy() for t, v in running.items()},
            )
        ]

        for year in range(1, years + 1):
            for asset_type, values in running.items():
                hypothesis = hypotheses.get(asset_type)
                if hypothesis is None:
                    continue

                contribution = annual_contribution(
                    hypothesis, year, contribution_growth_rate
                )
                values.pessimistic = round(
                    values.pessimistic * (1 + hypothesis.pessimistic_rate / 100) + contribution, 2
                )
                values.average = round(
                    values.average * (1 + hypothesis.avg_rate / 100) + contribution, 2
                )
                values.optimistic = round(
                    values.optimistic * (1 + hypothesis.optimistic_rate / 100) + contribution, 2
                )

            results.append(
                ProjectionYear(
                    year=year,
                    pessimistic=round(sum(v.pessimistic for v in running.values()), 2),
                    average=round(sum(v.average for v in running.values()), 2),
                    optimistic=round(sum(v.optimistic for v in running.values()), 2),
                    breakdown={t: v.copy() for t, v in running.items()},
                )
            )

        return results

    async def project_portfolio(self, db: AsyncSession, years: int) -> Dict:
        """Load the ledger and hypotheses and run the simulation."""
        assets = (await db.execute(select(Asset))).scalars().all()
        hypotheses = (
            await db.execute(select(Hypothesis).order_by(Hypothesis.asset_type))
        ).scalars().all()

        current = totals_by_type(assets)
        by_type = {AssetType(h.asset_type): h for h in hypotheses}
        missing = [t.value for t in current if t not in by_type]
        if missing:
            logger.warning(f"No hypothesis for asset types {missing}; values held flat")

        projections = self.simulate(current, by_type, years)
        return {
            "projections": projections,
            "current_total": sum(a.current_amount or 0.0 for a in assets),
            "hypotheses": hypotheses,
        }


# Singleton instance
projection_service = ProjectionService()
