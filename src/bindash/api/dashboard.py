"""Dashboard API — stat cards and recent reports for the reports page.

Read-only. Every metric degrades to 0 instead of failing the request.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from bindash.api.auth import RequiredAdmin
from bindash.api.deps import get_dashboard_config, get_db, get_engine
from bindash.api.schemas.dashboard import DashboardResponse
from bindash.dashboard.aggregator import DashboardAggregator, DashboardConfig
from bindash.db.repos.report_repo import ReportRepo
from bindash.db.repos.stats_repo import FallbackCountRunner

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

DbDep = Annotated[AsyncSession, Depends(get_db)]
EngineDep = Annotated[AsyncEngine, Depends(get_engine)]
ConfigDep = Annotated[DashboardConfig, Depends(get_dashboard_config)]


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    db: DbDep,
    engine: EngineDep,
    config: ConfigDep,
    admin: RequiredAdmin,
) -> DashboardResponse:
    aggregator = DashboardAggregator(FallbackCountRunner(engine), ReportRepo(db), config)
    snapshot = await aggregator.snapshot()
    return DashboardResponse.from_snapshot(snapshot)
