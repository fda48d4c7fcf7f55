"""Asset model."""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from app.models import Base


class AssetType(str, enum.Enum):
    STOCK = "Stock"
    CRYPTO = "Crypto"
    STARTUP = "Start-up"
    SAVINGS_ACCOUNT = "Livret"
    ACTIVE_CASH = "Active Cash"


class Geography(str, enum.Enum):
    FR = "FR"
    US = "US"
    EU = "EU"
    OTHER = "OTHER"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# Shared by assets and hypotheses so PostgreSQL only creates one enum type
asset_type_enum = Enum(AssetType, name="asset_type", values_callable=_enum_values)


class Asset(Base):
    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    ticker = Column(String(32), nullable=True, index=True)
    isin = Column(String(12), nullable=True)
    who = Column(String(100), nullable=False)
    asset_type = Column(asset_type_enum, nullable=False)
    geo = Column(Enum(Geography, name="geography", values_callable=_enum_values), nullable=True)
    quantity = Column(Numeric(precision=24, scale=8, asdecimal=False), default=0.0, nullable=False)
    buying_value = Column(Numeric(precision=18, scale=8, asdecimal=False), default=0.0, nullable=False)
    buying_amount = Column(Numeric(precision=18, scale=2, asdecimal=False), default=0.0, nullable=False)
    current_value = Column(Numeric(precision=18, scale=8, asdecimal=False), default=0.0, nullable=False)
    current_amount = Column(Numeric(precision=18, scale=2, asdecimal=False), default=0.0, nullable=False)
    auto_refresh = Column(Boolean, default=False, nullable=False)
    dividend_per_share = Column(Numeric(precision=18, scale=8, asdecimal=False), default=0.0, nullable=True)
    notes = Column(Text, nullable=True)
    startup_rating = Column(String(100), nullable=True)
    ir_reduction = Column(String(100), nullable=True)
    alert_high = Column(Numeric(precision=18, scale=8, asdecimal=False), nullable=True)
    alert_low = Column(Numeric(precision=18, scale=8, asdecimal=False), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
