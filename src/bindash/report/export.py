"""Collections export — CSV dump of collections in a date range."""

import csv
import io
from datetime import date, datetime, time
from typing import Iterator, Optional

from bindash.db.models.bin import Collection
from bindash.db.repos.collection_repo import CollectionRepo
from bindash.domain.enums import ReportType

EXPORT_HEADERS = [
    "Collection ID",
    "Bin ID",
    "Bin Code",
    "Location",
    "Collected By",
    "Status",
    "Collection Date",
    "Created At",
    "Notes",
]


def _fmt(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


def export_filename(date_from: Optional[date], date_to: Optional[date], report_type: Optional[str] = None) -> str:
    parts = ["collections"]
    if report_type and report_type != ReportType.COLLECTIONS.value:
        parts.append("".join(c for c in report_type if c.isalnum() or c in "-_")[:30] or "custom")
    parts.append(date_from.isoformat() if date_from else "start")
    parts.append(date_to.isoformat() if date_to else "now")
    return "_".join(parts) + ".csv"


class CollectionExporter:
    def __init__(self, collections: CollectionRepo) -> None:
        self._collections = collections

    async def rows(self, date_from: Optional[date], date_to: Optional[date]) -> list[Collection]:
        start = datetime.combine(date_from, time.min) if date_from else None
        end = datetime.combine(date_to, time(23, 59, 59)) if date_to else None
        return await self._collections.list_between(start, end)

    @staticmethod
    def to_csv(rows: list[Collection]) -> Iterator[str]:
        """Yield the CSV one line at a time, header first."""
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")

        def flush() -> str:
            line = buf.getvalue()
            buf.seek(0)
            buf.truncate(0)
            return line

        writer.writerow(EXPORT_HEADERS)
        yield flush()
        for c in rows:
            writer.writerow([
                c.id,
                c.bin_id,
                c.bin.code if c.bin else "",
                (c.bin.location or "") if c.bin else "",
                c.collected_by or "",
                c.status,
                _fmt(c.collection_date),
                _fmt(c.created_at),
                (c.notes or "").replace("\r\n", " ").replace("\n", " ").replace("\r", " "),
            ])
            yield flush()
