"""Daily portfolio snapshot model."""

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, Text
from sqlalchemy.sql import func

from app.models import Base


class Snapshot(Base):
    __tablename__ = "snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    snapshot_date = Column(Date, nullable=False, unique=True, index=True)
    total_value = Column(Numeric(precision=18, scale=2, asdecimal=False), nullable=False)
    data_json = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
