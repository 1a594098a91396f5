"""DashboardAggregator — stat cards for the reports page.

Each metric has an ordered list of candidate COUNT queries, one per known
schema shape. The first candidate that runs wins. A metric whose candidates
all fail shows 0: the page must render even when the schema does not match.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from bindash.db.repos.report_repo import ReportRepo
from bindash.db.repos.stats_repo import CountQuery, FallbackCountRunner
from bindash.domain.models.report import Report

logger = logging.getLogger(__name__)

# Schema variants seen in deployments:
#   standard: collections.created_at, bins.status_updated_at
#   legacy:   collections.collection_date, bins.updated_at, bins.fill_level
STANDARD = "standard"
LEGACY = "legacy"

METRIC_QUERIES: dict[str, list[CountQuery]] = {
    "collections_this_month": [
        CountQuery(
            "collections_by_created_at",
            "SELECT COUNT(*) AS cnt FROM collections WHERE created_at BETWEEN :start AND :end",
            variant=STANDARD,
        ),
        CountQuery(
            "collections_by_collection_date",
            "SELECT COUNT(*) AS cnt FROM collections WHERE collection_date BETWEEN :start AND :end",
            variant=LEGACY,
        ),
    ],
    "pending_count": [
        CountQuery(
            "bins_full",
            "SELECT COUNT(*) AS cnt FROM bins WHERE status = 'full'",
        ),
        CountQuery(
            "bins_full_or_over_threshold",
            "SELECT COUNT(*) AS cnt FROM bins "
            "WHERE status = 'full' OR (fill_level IS NOT NULL AND fill_level >= :threshold)",
            variant=LEGACY,
        ),
    ],
    "completed_this_month": [
        CountQuery(
            "bins_emptied_by_status_updated_at",
            "SELECT COUNT(*) AS cnt FROM bins WHERE status = 'empty' "
            "AND (status_updated_at BETWEEN :start AND :end OR updated_at BETWEEN :start AND :end)",
            variant=STANDARD,
        ),
        CountQuery(
            "bins_emptied_by_updated_at",
            "SELECT COUNT(*) AS cnt FROM bins WHERE status = 'empty' AND updated_at BETWEEN :start AND :end",
            variant=LEGACY,
        ),
        CountQuery(
            "collections_completed",
            "SELECT COUNT(*) AS cnt FROM collections WHERE status = 'completed' AND created_at BETWEEN :start AND :end",
            variant=LEGACY,
        ),
    ],
    "reports_count": [
        CountQuery("reports_total", "SELECT COUNT(*) AS cnt FROM reports"),
    ],
}


@dataclass(frozen=True)
class DashboardConfig:
    fill_threshold: int = 90
    # None walks every candidate; a name restricts the chain to that variant (plus untagged queries).
    schema_variant: Optional[str] = None
    recent_limit: int = 50


class DashboardSnapshot(BaseModel):
    collections_this_month: int = 0
    pending_count: int = 0
    completed_this_month: int = 0
    reports_count: int = 0
    recent_reports: list[Report] = []


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """First second and last second of ``now``'s month."""
    last_day = calendar.monthrange(now.year, now.month)[1]
    start = datetime(now.year, now.month, 1, 0, 0, 0)
    end = datetime(now.year, now.month, last_day, 23, 59, 59)
    return start, end


class DashboardAggregator:
    def __init__(
        self,
        runner: FallbackCountRunner,
        reports: ReportRepo,
        config: DashboardConfig,
        clock: Callable[[], datetime] = datetime.now,
        metric_queries: Optional[dict[str, list[CountQuery]]] = None,
    ) -> None:
        self._runner = runner
        self._reports = reports
        self._config = config
        self._clock = clock
        self._metric_queries = metric_queries if metric_queries is not None else METRIC_QUERIES

    def candidates(self, metric: str) -> list[CountQuery]:
        queries = self._metric_queries.get(metric, [])
        variant = self._config.schema_variant
        if variant is None:
            return list(queries)
        return [q for q in queries if q.variant is None or q.variant == variant]

    async def metric(self, metric: str) -> int:
        """First successful candidate's value, or 0 when every candidate fails."""
        start, end = month_bounds(self._clock())
        for query in self.candidates(metric):
            value = await self._runner.run(
                query.with_params(start=start, end=end, threshold=self._config.fill_threshold)
            )
            if value is not None:
                return value
            logger.info("Metric %s: candidate %s unavailable, trying next", metric, query.name)
        logger.warning("Metric %s: no candidate query succeeded, showing 0", metric)
        return 0

    async def snapshot(self) -> DashboardSnapshot:
        values = {name: await self.metric(name) for name in self._metric_queries}
        return DashboardSnapshot(**values, recent_reports=await self._recent_reports())

    async def _recent_reports(self) -> list[Report]:
        try:
            return await self._reports.list_recent(self._config.recent_limit)
        except SQLAlchemyError:
            logger.exception("Failed to load recent reports")
            return []
