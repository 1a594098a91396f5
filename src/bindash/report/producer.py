"""Report content producers — turn a report row into file bytes.

DelimitedTextProducer is the reference implementation: a one-record text
table regardless of the requested format. WorkbookProducer swaps in a real
openpyxl workbook for the ``excel`` format.
"""

import csv
import io
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from bindash.domain.enums import ReportFormat
from bindash.domain.models.report import Report

HEADERS = ["Report ID", "Report Name", "Report Type", "Requested By", "Date From", "Date To", "Created At"]

# format -> file extension for the text producer
TEXT_EXTENSIONS: dict[ReportFormat, str] = {
    ReportFormat.PDF: "pdf",
    ReportFormat.EXCEL: "csv",
    ReportFormat.CSV: "csv",
}

HEADER_FONT = Font(bold=True)

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class ProducedContent:
    data: bytes
    extension: str


class ContentProducer(ABC):
    """Synthesizes the file for a report."""

    @abstractmethod
    def produce(self, report: Report) -> ProducedContent: ...


def _row_values(report: Report) -> list[str]:
    return [
        str(report.id),
        report.name,
        report.report_type,
        "" if report.generated_by is None else str(report.generated_by),
        report.date_from.isoformat() if report.date_from else "-",
        report.date_to.isoformat() if report.date_to else "-",
        report.created_at.strftime("%Y-%m-%d %H:%M:%S"),
    ]


def _single_line(text: str) -> str:
    return _LINE_BREAKS.sub(" ", text)


class DelimitedTextProducer(ContentProducer):
    """Header row + one data row, then the description (if any) on its own line."""

    def produce(self, report: Report) -> ProducedContent:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(HEADERS)
        writer.writerow(_row_values(report))

        description = report.metadata.description
        if description:
            buf.write("\n")
            buf.write("Description:\n")
            buf.write(_single_line(description))

        ext = TEXT_EXTENSIONS[ReportFormat.coerce(report.format)]
        return ProducedContent(data=buf.getvalue().encode("utf-8"), extension=ext)


class WorkbookProducer(ContentProducer):
    """Writes ``excel`` reports as a real .xlsx; other formats go to ``fallback``."""

    def __init__(self, fallback: ContentProducer | None = None) -> None:
        self._fallback = fallback or DelimitedTextProducer()

    def produce(self, report: Report) -> ProducedContent:
        if ReportFormat.coerce(report.format) is not ReportFormat.EXCEL:
            return self._fallback.produce(report)

        wb = Workbook()
        ws = wb.active
        ws.title = "report"

        for col_idx, header in enumerate(HEADERS, start=1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = HEADER_FONT
        for col_idx, value in enumerate(_row_values(report), start=1):
            ws.cell(row=2, column=col_idx, value=value)

        description = report.metadata.description
        if description:
            ws.cell(row=4, column=1, value="Description:").font = HEADER_FONT
            ws.cell(row=5, column=1, value=_single_line(description))

        _auto_fit_columns(ws)

        buf = BytesIO()
        wb.save(buf)
        return ProducedContent(data=buf.getvalue(), extension="xlsx")


def _auto_fit_columns(ws) -> None:
    """Set column widths based on content (approximate)."""
    for col_cells in ws.columns:
        max_len = 0
        col_letter = get_column_letter(col_cells[0].column)
        for cell in col_cells:
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = min(max_len + 3, 50)


def build_producer(engine: str) -> ContentProducer:
    """Pick the producer named by settings.excel_engine."""
    if engine == "xlsx":
        return WorkbookProducer()
    return DelimitedTextProducer()
