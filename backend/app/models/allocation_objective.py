"""Target allocation per asset type or geography."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.sql import func

from app.models import Base
from app.models.asset import _enum_values


class AllocationCategory(str, enum.Enum):
    TYPE = "type"
    GEO = "geo"


class AllocationObjective(Base):
    __tablename__ = "allocation_objectives"
    __table_args__ = (UniqueConstraint("category", "key", name="uq_objectives_category_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(
        Enum(AllocationCategory, name="allocation_category", values_callable=_enum_values),
        nullable=False,
    )
    key = Column(String(50), nullable=False)
    target_percent = Column(Numeric(precision=8, scale=4, asdecimal=False), default=0.0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
