from bindash.db.models.admin import Admin
from bindash.db.models.bin import Bin, Collection
from bindash.db.models.report import ReportRecord

__all__ = [
    "Admin",
    "Bin",
    "Collection",
    "ReportRecord",
]
