from typing import AsyncGenerator

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from bindash.container import Container
from bindash.dashboard.aggregator import DashboardConfig
from bindash.report.paths import StorageConfig
from bindash.report.producer import ContentProducer


@inject
async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(Provide[Container.session_factory]),
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@inject
def get_engine(engine: AsyncEngine = Depends(Provide[Container.engine])) -> AsyncEngine:
    return engine


@inject
def get_storage(storage: StorageConfig = Depends(Provide[Container.storage])) -> StorageConfig:
    return storage


@inject
def get_producer(producer: ContentProducer = Depends(Provide[Container.producer])) -> ContentProducer:
    return producer


@inject
def get_dashboard_config(
    config: DashboardConfig = Depends(Provide[Container.dashboard_config]),
) -> DashboardConfig:
    return config
