"""Reports API — create, list, download reports and export collections."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from bindash.api.auth import CurrentAdmin, RequiredAdmin
from bindash.api.deps import get_db, get_producer, get_storage
from bindash.api.schemas.reports import ClientReport, CreateReportResponse, parse_optional_date
from bindash.db.repos.collection_repo import CollectionRepo
from bindash.db.repos.report_repo import ReportRepo
from bindash.domain.models.report import NewReport, ReportMetadata
from bindash.errors import BindashError, CreationFailed, ValidationError
from bindash.report.download import ReportDownloader, parse_report_id
from bindash.report.export import CollectionExporter, export_filename
from bindash.report.paths import StorageConfig
from bindash.report.producer import ContentProducer
from bindash.report.service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])

DbDep = Annotated[AsyncSession, Depends(get_db)]
StorageDep = Annotated[StorageConfig, Depends(get_storage)]
ProducerDep = Annotated[ContentProducer, Depends(get_producer)]


def _http_error(e: BindashError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=CreateReportResponse)
async def create_report(
    request: Request,
    db: DbDep,
    storage: StorageDep,
    producer: ProducerDep,
    admin: RequiredAdmin,
    name: str = Form(""),
    report_type: str = Form("", alias="type"),
    from_date: Optional[str] = Form(None),
    to_date: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    report_format: str = Form("pdf", alias="format"),
) -> CreateReportResponse:
    """Create a report and generate its file synchronously.

    Always answers 200; callers check ``success``.
    """
    try:
        new = NewReport(
            name=name.strip(),
            report_type=report_type.strip(),
            format=report_format,
            date_from=parse_optional_date(from_date, "from_date"),
            date_to=parse_optional_date(to_date, "to_date"),
            generated_by=admin.admin_id,
            metadata=ReportMetadata(
                description=(description or "").strip() or None,
                requested_by_ip=request.client.host if request.client else None,
            ),
        )
        outcome = await ReportService(db, producer, storage).create(new)
    except ValidationError as e:
        return CreateReportResponse(success=False, message=e.message)
    except CreationFailed as e:
        return CreateReportResponse(success=False, message=e.message, error=e.__class__.__name__)

    report = ClientReport.from_report(outcome.report)
    if not outcome.succeeded:
        return CreateReportResponse(success=False, report=report, message="Failed to generate report file.")
    return CreateReportResponse(success=True, report=report)


@router.get("", response_model=list[ClientReport])
async def list_reports(
    db: DbDep,
    admin: RequiredAdmin,
    limit: int = Query(50, ge=1, le=200),
) -> list[ClientReport]:
    """Most recent reports, newest first."""
    reports = await ReportRepo(db).list_recent(limit)
    return [ClientReport.from_report(r) for r in reports]


async def _export(db: AsyncSession, from_date: Optional[str], to_date: Optional[str], report_type: Optional[str]):
    try:
        date_from = parse_optional_date(from_date, "from_date")
        date_to = parse_optional_date(to_date, "to_date")
    except ValidationError as e:
        raise _http_error(e)
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=400, detail="from_date must not be after to_date")

    exporter = CollectionExporter(CollectionRepo(db))
    rows = await exporter.rows(date_from, date_to)
    filename = export_filename(date_from, date_to, report_type)
    logger.info("Exporting %d collections as %s", len(rows), filename)

    return StreamingResponse(
        exporter.to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/export")
async def export_collections_form(
    db: DbDep,
    admin: RequiredAdmin,
    report_type: Optional[str] = Form(None, alias="type"),
    from_date: Optional[str] = Form(None),
    to_date: Optional[str] = Form(None),
):
    """Export collections in the date range as CSV (form post from the dashboard)."""
    return await _export(db, from_date, to_date, report_type)


@router.get("/export")
async def export_collections(
    db: DbDep,
    admin: RequiredAdmin,
    report_type: Optional[str] = Query(None, alias="type"),
    from_date: Optional[str] = Query(None),
    to_date: Optional[str] = Query(None),
):
    return await _export(db, from_date, to_date, report_type)


@router.get("/{report_id}", response_model=ClientReport)
async def get_report(report_id: str, db: DbDep, admin: RequiredAdmin) -> ClientReport:
    try:
        rid = parse_report_id(report_id)
    except BindashError as e:
        raise _http_error(e)

    report = await ReportRepo(db).get_by_id(rid)
    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return ClientReport.from_report(report)


@router.get("/{report_id}/download")
async def download_report(report_id: str, db: DbDep, storage: StorageDep, admin: CurrentAdmin):
    """Stream a completed report's file as an attachment."""
    downloader = ReportDownloader(ReportRepo(db), storage)
    try:
        file = await downloader.prepare(report_id, is_admin=admin is not None)
    except BindashError as e:
        raise _http_error(e)

    return StreamingResponse(
        downloader.stream(file),
        media_type=file.media_type,
        headers=file.headers(),
    )
