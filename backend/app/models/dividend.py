"""Received dividends, one row per asset and year."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, UniqueConstraint
from sqlalchemy.sql import func

from app.models import Base


class Dividend(Base):
    __tablename__ = "dividends"
    __table_args__ = (UniqueConstraint("asset_id", "year", name="uq_dividends_asset_year"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    asset_id = Column(Integer, ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    amount = Column(Numeric(precision=18, scale=2, asdecimal=False), default=0.0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
