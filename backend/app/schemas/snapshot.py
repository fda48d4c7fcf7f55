"""Snapshot schemas and the stored payload format.

A snapshot row keeps a JSON document with a copy of every asset as it stood
at capture time plus pre-aggregated totals::

    {
        "version": 1,
        "assets": [...],
        "by_type": {"Stock": 5000.0, ...},
        "by_who": {"Person 1": 4000.0, ...},
        "by_geo": {"FR": 2000.0, ...}
    }

Payloads written before the ``version`` key existed are read as version 1.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ValidationError, field_validator

from app.models.asset import AssetType, Geography

logger = logging.getLogger(__name__)

PAYLOAD_VERSION = 1


class SnapshotPayloadError(ValueError):
    """A stored snapshot payload could not be decoded."""


class SnapshotAsset(BaseModel):
    """Frozen copy of an asset inside a snapshot payload."""

    id: int
    name: str
    ticker: Optional[str] = None
    isin: Optional[str] = None
    who: str
    asset_type: AssetType
    geo: Optional[Geography] = None
    quantity: float = 0.0
    buying_value: float = 0.0
    buying_amount: float = 0.0
    current_value: float = 0.0
    current_amount: float = 0.0
    auto_refresh: bool = False
    dividend_per_share: Optional[float] = 0.0
    notes: Optional[str] = None
    startup_rating: Optional[str] = None
    ir_reduction: Optional[str] = None
    alert_high: Optional[float] = None
    alert_low: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def stringify_timestamps(cls, v):
        if isinstance(v, datetime):
            return v.isoformat()
        return v

    @field_validator("geo", mode="before")
    @classmethod
    def blank_geo_is_none(cls, v):
        return v or None

    class Config:
        from_attributes = True


def _known_keys(values: dict, enum_cls, field: str) -> dict:
    """Drop category keys that are not members of ``enum_cls``."""
    known = {member.value for member in enum_cls}
    kept = {}
    for key, amount in values.items():
        raw = key.value if isinstance(key, enum_cls) else key
        if raw in known:
            kept[raw] = amount
        else:
            logger.warning(f"Ignoring unknown {field} key in snapshot payload: {key!r}")
    return kept


class SnapshotPayload(BaseModel):
    """Schema of the ``data_json`` column."""

    version: int = PAYLOAD_VERSION
    assets: List[SnapshotAsset] = []
    by_type: Dict[AssetType, float] = {}
    by_who: Dict[str, float] = {}
    by_geo: Dict[Geography, float] = {}

    @field_validator("by_type", mode="before")
    @classmethod
    def ignore_unknown_types(cls, v):
        if isinstance(v, dict):
            return _known_keys(v, AssetType, "by_type")
        return v

    @field_validator("by_geo", mode="before")
    @classmethod
    def ignore_unknown_geos(cls, v):
        if isinstance(v, dict):
            return _known_keys(v, Geography, "by_geo")
        return v


def encode_payload(payload: SnapshotPayload) -> str:
    return payload.model_dump_json()


def decode_payload(raw: Optional[str]) -> SnapshotPayload:
    """Parse a stored payload, raising SnapshotPayloadError on any failure."""
    if not raw:
        raise SnapshotPayloadError("empty snapshot payload")
    try:
        payload = SnapshotPayload.model_validate_json(raw)
    except ValidationError as e:
        raise SnapshotPayloadError(str(e)) from e
    if payload.version > PAYLOAD_VERSION:
        raise SnapshotPayloadError(f"unsupported snapshot payload version {payload.version}")
    return payload


class SnapshotResponse(BaseModel):
    """Snapshot row as returned by the listing endpoint."""

    id: int
    snapshot_date: date
    total_value: float
    data_json: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SnapshotCaptureResponse(BaseModel):
    success: bool
    date: date
    total_value: float
    message: Optional[str] = None


class SnapshotSeriesPoint(BaseModel):
    date: date
    total: float
    by_type: Dict[str, float]


class SnapshotSummary(BaseModel):
    """Snapshot series for a time range with the change over that range."""

    range: str
    points: List[SnapshotSeriesPoint]
    latest_value: float
    change_value: float
    change_percent: float
