"""Typed report records handed out by the repository."""

import json
import logging
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from bindash.domain.enums import ReportStatus

logger = logging.getLogger(__name__)


class ReportMetadata(BaseModel):
    """Structured blob stored in reports.report_data."""

    description: Optional[str] = None
    requested_by_ip: Optional[str] = None

    model_config = {"extra": "allow"}

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"))

    @classmethod
    def from_json(cls, raw: Optional[str]) -> "ReportMetadata":
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Unreadable report_data, ignoring: %r", raw[:200])
            return cls()
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            # Keep what still validates; drop only the mistyped keys.
            bad = {err["loc"][0] for err in e.errors() if err["loc"]}
            logger.warning("report_data fields %s have unexpected types, ignoring them", sorted(map(str, bad)))
        try:
            return cls.model_validate({k: v for k, v in data.items() if k not in bad})
        except ValidationError:
            return cls()


class NewReport(BaseModel):
    """Fields supplied by the requester for a report about to be inserted."""

    name: str
    report_type: str
    format: str
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    generated_by: Optional[int] = None
    metadata: ReportMetadata = Field(default_factory=ReportMetadata)


class Report(BaseModel):
    """A persisted report row."""

    id: int
    name: str
    report_type: str
    generated_by: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    metadata: ReportMetadata
    format: str
    status: str
    file_path: Optional[str] = None
    created_at: datetime

    @property
    def is_completed(self) -> bool:
        return (self.status or "").lower() == ReportStatus.COMPLETED.value

    @classmethod
    def from_record(cls, record: Any) -> "Report":
        return cls(
            id=record.id,
            name=record.name,
            report_type=record.report_type,
            generated_by=record.generated_by,
            date_from=record.date_from,
            date_to=record.date_to,
            metadata=ReportMetadata.from_json(record.report_data),
            format=record.format,
            status=record.status,
            file_path=record.file_path,
            created_at=record.created_at,
        )
