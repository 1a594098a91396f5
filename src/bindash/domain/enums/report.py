from enum import Enum


class ReportStatus(str, Enum):
    """Report lifecycle: GENERATING is the only non-terminal state."""

    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ReportStatus.GENERATING


class ReportFormat(str, Enum):
    PDF = "pdf"
    EXCEL = "excel"
    CSV = "csv"

    @classmethod
    def coerce(cls, value: str | None) -> "ReportFormat":
        """Map free-form input to a known format; anything unrecognized becomes PDF."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.PDF


class ReportType(str, Enum):
    """Known report types. The column is open: unknown types are stored as given."""

    COLLECTIONS = "collections"
    PERFORMANCE = "performance"
    STATUS = "status"
    REVENUE = "revenue"
    CUSTOM = "custom"
