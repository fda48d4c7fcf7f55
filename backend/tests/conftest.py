"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator

# Set test env vars before any app import
os.environ.setdefault("SECRET_KEY", "testsecretkey_for_unit_tests_only_1234567890")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")
os.environ.setdefault("AUTH_PASSWORD", "test-password")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.rate_limit import limiter
from app.core.security import create_access_token
from app.main import app
from app.models import Base
from app.models.asset import Asset, AssetType, Geography
from app.models.snapshot import Snapshot
from app.schemas.snapshot import encode_payload
from app.services.bootstrap_service import seed_defaults
from app.services.snapshot_service import build_payload

# In-memory SQLite; StaticPool keeps the single connection so tables survive
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database for each test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestSessionLocal = sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with TestSessionLocal() as session:
        yield session

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {create_access_token()}"}


@pytest_asyncio.fixture
async def seeded(db_session: AsyncSession) -> AsyncSession:
    """Default hypotheses and objectives."""
    await seed_defaults(db_session)
    return db_session


@pytest_asyncio.fixture
async def sample_assets(db_session: AsyncSession) -> list:
    """A small ledger: two stocks, a savings account and a crypto holding."""
    assets = [
        Asset(
            name="Air Liquide", ticker="AI.PA", who="Person 1",
            asset_type=AssetType.STOCK, geo=Geography.FR,
            quantity=10, buying_value=150, buying_amount=1500,
            current_value=170, current_amount=1700, auto_refresh=True,
            dividend_per_share=3.2,
        ),
        Asset(
            name="Apple", ticker="AAPL", who="Person 2",
            asset_type=AssetType.STOCK, geo=Geography.US,
            quantity=5, buying_value=200, buying_amount=1000,
            current_value=180, current_amount=900,
        ),
        Asset(
            name="Livret A", who="Person 1",
            asset_type=AssetType.SAVINGS_ACCOUNT, geo=Geography.FR,
            quantity=1, buying_value=5000, buying_amount=5000,
            current_value=5000, current_amount=5000,
        ),
        Asset(
            name="Bitcoin", ticker="BTC-EUR", who="Person 1",
            asset_type=AssetType.CRYPTO,
            quantity=0.01, buying_value=30000, buying_amount=300,
            current_value=60000, current_amount=600,
        ),
    ]
    db_session.add_all(assets)
    await db_session.commit()
    for asset in assets:
        await db_session.refresh(asset)
    return assets


@pytest.fixture
def make_snapshot(db_session: AsyncSession):
    """Insert a snapshot row directly. ``data_json`` may be any string."""

    async def _make(snapshot_date, total_value, data_json):
        snapshot = Snapshot(
            snapshot_date=snapshot_date, total_value=total_value, data_json=data_json
        )
        db_session.add(snapshot)
        await db_session.commit()
        return snapshot

    return _make


@pytest.fixture
def payload_for():
    """Encoded payload of some assets, optionally overriding current amounts by asset id."""

    def _encode(assets, amounts=None) -> str:
        _, payload = build_payload(assets)
        for frozen in payload.assets:
            if amounts and frozen.id in amounts:
                frozen.current_amount = amounts[frozen.id]
        return encode_payload(payload)

    return _encode
