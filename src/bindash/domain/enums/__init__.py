from bindash.domain.enums.bin import BinStatus, CollectionStatus
from bindash.domain.enums.report import ReportFormat, ReportStatus, ReportType

__all__ = [
    "BinStatus",
    "CollectionStatus",
    "ReportFormat",
    "ReportStatus",
    "ReportType",
]
