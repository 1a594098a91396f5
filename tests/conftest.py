from datetime import datetime
from typing import Annotated, Optional

import pytest
from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from bindash.dashboard.aggregator import DashboardConfig
from bindash.db.models import Admin, Bin, Collection
from bindash.db.repos.admin_repo import AdminRepo
from bindash.db.session import Base
from bindash.report.paths import StorageConfig
from bindash.report.producer import DelimitedTextProducer
import bindash.db.models  # noqa: F401 — register all models

ADMIN_KEY = "test-admin-key"
ADMIN_HEADERS = {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
async def engine(tmp_path):
    # File-backed: the stats runner opens its own connections.
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest.fixture()
async def session(engine) -> AsyncSession:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as sess:
        yield sess


@pytest.fixture()
def storage(tmp_path) -> StorageConfig:
    root = tmp_path / "storage"
    root.mkdir()
    return StorageConfig(root=root, chunk_size=16)


@pytest.fixture()
async def admin(session) -> Admin:
    admin = await AdminRepo(session).create("ops", "Operations Desk")
    await session.commit()
    return admin


async def seed_bins_and_collections(session: AsyncSession, when: datetime) -> list[Collection]:
    """Two bins and three collections, all created at ``when``."""
    north = Bin(code="B-001", location="North Gate", status="full", fill_level=95)
    south = Bin(code="B-002", location="South Yard", status="empty", fill_level=0)
    session.add_all([north, south])
    await session.flush()

    collections = [
        Collection(bin_id=north.id, collected_by="crew-a", status="completed",
                   collection_date=when, created_at=when, notes="lid\nbroken"),
        Collection(bin_id=north.id, collected_by="crew-b", status="scheduled", created_at=when),
        Collection(bin_id=south.id, collected_by=None, status="missed", created_at=when),
    ]
    session.add_all(collections)
    await session.commit()
    return collections


def admin_override(admin_id: int):
    """Stand-in for get_current_admin that accepts ADMIN_KEY only."""

    async def current_admin(
        x_admin_key: Annotated[Optional[str], Header(alias="X-Admin-Key")] = None,
    ):
        from bindash.api.auth import AdminIdentity

        return AdminIdentity(admin_id=admin_id) if x_admin_key == ADMIN_KEY else None

    return current_admin


def override_dependencies(app, session, engine, storage, admin_id: int, config: Optional[DashboardConfig] = None):
    from bindash.api.auth import get_current_admin
    from bindash.api.deps import get_dashboard_config, get_db, get_engine, get_producer, get_storage

    producer = DelimitedTextProducer()
    app.dependency_overrides[get_db] = lambda: session
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_producer] = lambda: producer
    app.dependency_overrides[get_dashboard_config] = lambda: config or DashboardConfig()
    app.dependency_overrides[get_current_admin] = admin_override(admin_id)
