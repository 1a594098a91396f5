from pydantic import BaseModel

from bindash.api.schemas.reports import ClientReport
from bindash.dashboard.aggregator import DashboardSnapshot


class DashboardResponse(BaseModel):
    collections_this_month: int
    pending_count: int
    completed_this_month: int
    reports_count: int
    recent_reports: list[ClientReport]

    @classmethod
    def from_snapshot(cls, snapshot: DashboardSnapshot) -> "DashboardResponse":
        return cls(
            collections_this_month=snapshot.collections_this_month,
            pending_count=snapshot.pending_count,
            completed_this_month=snapshot.completed_this_month,
            reports_count=snapshot.reports_count,
            recent_reports=[ClientReport.from_report(r) for r in snapshot.recent_reports],
        )
