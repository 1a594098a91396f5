"""ReportService — creates a report row and its file as one auditable unit."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bindash.db.repos.admin_repo import AdminRepo
from bindash.db.repos.report_repo import ReportRepo, validate_new_report
from bindash.domain.enums import ReportStatus
from bindash.domain.models.report import NewReport, Report
from bindash.errors import CreationFailed, GenerationFault
from bindash.report.paths import StorageConfig, relative_to_root
from bindash.report.producer import ContentProducer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreationOutcome:
    report: Report

    @property
    def succeeded(self) -> bool:
        return self.report.status == ReportStatus.COMPLETED.value


def report_filename(report_id: int, extension: str) -> str:
    return f"report_{report_id}.{extension}"


class ReportService:
    """Validate → insert(generating) → produce → write → completed | failed.

    The insert and the terminal status update share the session's transaction.
    A GenerationFault (from the producer or the file write) is committed as a
    FAILED row; any other fault rolls the whole transaction back and leaves
    neither row nor file behind.
    """

    def __init__(self, session: AsyncSession, producer: ContentProducer, storage: StorageConfig) -> None:
        self._session = session
        self._producer = producer
        self._storage = storage
        self._reports = ReportRepo(session)

    async def create(self, new: NewReport) -> CreationOutcome:
        validate_new_report(new)

        dest: Optional[Path] = None
        try:
            new = new.model_copy(update={"generated_by": await self._existing_admin_id(new.generated_by)})
            report_id = await self._reports.insert_generating(new)
            report = await self._reports.get_by_id(report_id)

            try:
                content = self._producer.produce(report)
                dest = self._storage.reports_dir / report_filename(report_id, content.extension)
                _write_file(dest, content.data)
            except GenerationFault as e:
                logger.exception("Report %d: %s", report_id, e.message)
                dest = None
                await self._reports.mark_failed(report_id)
                report = await self._reports.get_by_id(report_id)
                await self._session.commit()
                return CreationOutcome(report=report)

            await self._reports.mark_completed(report_id, relative_to_root(self._storage.root, dest))
            report = await self._reports.get_by_id(report_id)
            await self._session.commit()
        except Exception as e:
            await self._session.rollback()
            if dest is not None:
                _discard(dest)
            logger.exception("Report creation failed for %r", new.name)
            raise CreationFailed() from e

        logger.info("Report %d generated: %s", report.id, report.file_path)
        return CreationOutcome(report=report)

    async def _existing_admin_id(self, admin_id: Optional[int]) -> Optional[int]:
        """generated_by must name a real admin; anything else is stored as NULL."""
        if admin_id is None:
            return None
        admin = await AdminRepo(self._session).get_active(admin_id)
        if admin is None:
            logger.warning("Admin %s not found, storing report without generated_by", admin_id)
            return None
        return admin.id


def _write_file(dest: Path, data: bytes) -> None:
    """Write via a temp file so the final name only ever holds a complete file."""
    tmp = dest.with_name(dest.name + ".part")
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(data)
        os.replace(tmp, dest)
    except OSError as e:
        _discard(tmp)
        raise GenerationFault(f"Could not write {dest.name}") from e


def _discard(path: Path) -> None:
    try:
        if path.exists():
            path.unlink()
    except OSError:
        logger.exception("Could not remove orphaned report file %s", path)
