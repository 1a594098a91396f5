"""Report metadata — one row per requested report, plus the generated file reference."""

from datetime import date
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bindash.db.session import Base, CreatedAtMixin
from bindash.domain.enums import ReportFormat, ReportStatus


class ReportRecord(CreatedAtMixin, Base):
    """A report request and, once completed, the root-relative path of its file."""

    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint("(status = 'completed') = (file_path IS NOT NULL)", name="file_path_iff_completed"),
    )

    id: Mapped[int] = mapped_column("report_id", Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("report_name", String(255))
    report_type: Mapped[str] = mapped_column(String(50))
    generated_by: Mapped[Optional[int]] = mapped_column(ForeignKey("admins.admin_id"), default=None)
    date_from: Mapped[Optional[date]] = mapped_column(default=None)
    date_to: Mapped[Optional[date]] = mapped_column(default=None)
    report_data: Mapped[Optional[str]] = mapped_column(Text, default=None)  # JSON
    format: Mapped[str] = mapped_column(String(10), default=ReportFormat.PDF.value)
    status: Mapped[str] = mapped_column(String(20), default=ReportStatus.GENERATING.value)
    # generating -> completed | failed
    file_path: Mapped[Optional[str]] = mapped_column(String(500), default=None)
