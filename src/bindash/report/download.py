"""ReportDownloader — every gate a report file passes before a single byte is sent."""

import logging
import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator
from urllib.parse import quote

from sqlalchemy.exc import SQLAlchemyError

from bindash.db.repos.report_repo import ReportRepo
from bindash.errors import AuthorizationError, BadRequest, NotFoundError, PathRejected
from bindash.report.paths import StorageConfig, resolve_within

logger = logging.getLogger(__name__)

FALLBACK_MEDIA_TYPE = "application/octet-stream"
SNIFF_BYTES = 2048


@dataclass(frozen=True)
class DownloadableFile:
    path: Path
    media_type: str
    size: int

    @property
    def filename(self) -> str:
        return self.path.name

    def headers(self) -> dict[str, str]:
        return {
            "Content-Description": "File Transfer",
            "Content-Disposition": f'attachment; filename="{quote(self.filename)}"',
            "Content-Length": str(self.size),
            "Cache-Control": "no-store, no-cache, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        }


def parse_report_id(raw: Any) -> int:
    """Positive integer or BadRequest."""
    text = str(raw).strip() if raw is not None else ""
    if not (text.isascii() and text.isdigit()):
        raise BadRequest("Invalid report id")
    report_id = int(text)
    if report_id <= 0:
        raise BadRequest("Invalid report id")
    return report_id


def _looks_like_text(head: bytes) -> bool:
    if not head or b"\x00" in head:
        return False
    try:
        head.decode("utf-8")
    except UnicodeDecodeError as e:
        # A multi-byte character cut off by the read window is still text.
        return e.start >= len(head) - 3 and e.reason == "unexpected end of data"
    return True


def sniff_media_type(path: Path) -> str:
    """Media type from the file's leading bytes; the extension only refines it.

    Text producers may write a CSV table under a ``.pdf`` name, so the name
    alone is not trusted.
    """
    guessed, _ = mimetypes.guess_type(path.name)
    with path.open("rb") as fh:
        head = fh.read(SNIFF_BYTES)

    if head.startswith(b"%PDF-"):
        return "application/pdf"
    if head.startswith(b"PK\x03\x04"):
        # zip container (xlsx and friends)
        if guessed and not guessed.startswith("text/"):
            return guessed
        return "application/zip"
    if _looks_like_text(head):
        if guessed and guessed.startswith("text/"):
            return guessed
        return "text/plain"
    return FALLBACK_MEDIA_TYPE


def iter_file(path: Path, chunk_size: int = 8192) -> Iterator[bytes]:
    with path.open("rb") as fh:
        while chunk := fh.read(chunk_size):
            yield chunk


class ReportDownloader:
    def __init__(self, reports: ReportRepo, storage: StorageConfig) -> None:
        self._reports = reports
        self._storage = storage

    async def prepare(self, raw_id: Any, is_admin: bool) -> DownloadableFile:
        """Run the gates in order; the first failing gate raises its own error."""
        if not is_admin:
            raise AuthorizationError()

        report_id = parse_report_id(raw_id)

        try:
            report = await self._reports.get_by_id(report_id)
        except SQLAlchemyError:
            logger.exception("Loading report %d for download failed", report_id)
            report = None
        if report is None:
            raise NotFoundError("Report not found")

        if not report.is_completed:
            raise AuthorizationError("Report not ready for download")

        if not report.file_path:
            raise NotFoundError("No file available for this report")

        try:
            path = resolve_within(self._storage.root, report.file_path)
        except PathRejected:
            logger.warning("Invalid file path for report %d: %r", report_id, report.file_path)
            raise

        if not path.is_file() or not os.access(path, os.R_OK):
            raise NotFoundError("File not found")

        return DownloadableFile(path=path, media_type=sniff_media_type(path), size=path.stat().st_size)

    def stream(self, file: DownloadableFile) -> Iterator[bytes]:
        return iter_file(file.path, self._storage.chunk_size)
