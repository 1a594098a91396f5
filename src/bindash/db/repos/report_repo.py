from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bindash.db.models.report import ReportRecord
from bindash.domain.enums import ReportFormat, ReportStatus
from bindash.domain.models.report import NewReport, Report
from bindash.errors import StoreFault, ValidationError


def validate_new_report(new: NewReport) -> None:
    if not (new.name or "").strip() or not (new.report_type or "").strip():
        raise ValidationError("Report name and type are required.")


class ReportRepo:
    """Report rows in, typed Report records out."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert_generating(self, new: NewReport) -> int:
        """Insert a row in GENERATING state and return its id. Validates before touching the session."""
        validate_new_report(new)

        record = ReportRecord(
            name=new.name.strip(),
            report_type=new.report_type.strip(),
            generated_by=new.generated_by,
            date_from=new.date_from,
            date_to=new.date_to,
            report_data=new.metadata.to_json(),
            format=ReportFormat.coerce(new.format).value,
            status=ReportStatus.GENERATING.value,
            file_path=None,
        )
        self._session.add(record)
        await self._session.flush()
        return record.id

    async def mark_completed(self, report_id: int, file_path: str) -> None:
        if not file_path:
            raise ValueError("A completed report needs a file path")
        await self._finish(report_id, ReportStatus.COMPLETED, file_path)

    async def mark_failed(self, report_id: int) -> None:
        await self._finish(report_id, ReportStatus.FAILED, None)

    async def _finish(self, report_id: int, status: ReportStatus, file_path: Optional[str]) -> None:
        # Only GENERATING rows move; terminal states never change.
        result = await self._session.execute(
            update(ReportRecord)
            .where(
                ReportRecord.id == report_id,
                ReportRecord.status == ReportStatus.GENERATING.value,
            )
            .values(status=status.value, file_path=file_path)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StoreFault(f"Report {report_id} is not in generating state")

    async def get_by_id(self, report_id: int) -> Optional[Report]:
        result = await self._session.execute(
            select(ReportRecord)
            .where(ReportRecord.id == report_id)
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()
        return Report.from_record(record) if record else None

    async def list_recent(self, limit: int = 50) -> list[Report]:
        """Newest first; id breaks ties between rows created in the same second."""
        result = await self._session.execute(
            select(ReportRecord)
            .order_by(ReportRecord.created_at.desc(), ReportRecord.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [Report.from_record(r) for r in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(ReportRecord.id)))
        return result.scalar() or 0
