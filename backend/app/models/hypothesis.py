"""Growth hypothesis model (one row per asset type)."""

from sqlalchemy import Column, DateTime, Integer, Numeric
from sqlalchemy.sql import func

from app.models import Base
from app.models.asset import asset_type_enum


class Hypothesis(Base):
    __tablename__ = "hypotheses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    asset_type = Column(asset_type_enum, nullable=False, unique=True)
    pessimistic_rate = Column(Numeric(precision=8, scale=4, asdecimal=False), default=0.0, nullable=False)
    avg_rate = Column(Numeric(precision=8, scale=4, asdecimal=False), default=0.0, nullable=False)
    optimistic_rate = Column(Numeric(precision=8, scale=4, asdecimal=False), default=0.0, nullable=False)
    monthly_contribution_owner_1 = Column(Numeric(precision=18, scale=2, asdecimal=False), default=0.0, nullable=False)
    monthly_contribution_owner_2 = Column(Numeric(precision=18, scale=2, asdecimal=False), default=0.0, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
