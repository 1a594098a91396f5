"""Schemas for /api/reports endpoints."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel

from bindash.domain.models.report import Report
from bindash.errors import ValidationError


class ClientReport(BaseModel):
    """Report shape the dashboard's JS expects."""

    report_id: int
    name: str
    type: str
    description: Optional[str] = None
    format: Optional[str] = None
    created_at: datetime
    status: str
    file_path: Optional[str] = None
    raw: dict[str, Any]

    @classmethod
    def from_report(cls, report: Report) -> "ClientReport":
        return cls(
            report_id=report.id,
            name=report.name,
            type=report.report_type,
            description=report.metadata.description,
            format=report.format,
            created_at=report.created_at,
            status=report.status,
            file_path=report.file_path,
            raw={
                "report_id": report.id,
                "report_name": report.name,
                "report_type": report.report_type,
                "generated_by": report.generated_by,
                "date_from": report.date_from.isoformat() if report.date_from else None,
                "date_to": report.date_to.isoformat() if report.date_to else None,
                "report_data": report.metadata.model_dump(mode="json"),
                "format": report.format,
                "status": report.status,
                "file_path": report.file_path,
                "created_at": report.created_at.isoformat(),
            },
        )


class CreateReportResponse(BaseModel):
    success: bool
    report: Optional[ClientReport] = None
    message: Optional[str] = None
    error: Optional[str] = None


def parse_optional_date(value: Optional[str], field: str) -> Optional[date]:
    """'' or None -> None; YYYY-MM-DD -> date; anything else is a ValidationError."""
    text = (value or "").strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field}, expected YYYY-MM-DD")
