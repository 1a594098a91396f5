from bindash.db.repos.admin_repo import AdminRepo
from bindash.db.repos.collection_repo import CollectionRepo
from bindash.db.repos.report_repo import ReportRepo
from bindash.db.repos.stats_repo import CountQuery, FallbackCountRunner

__all__ = ["AdminRepo", "CollectionRepo", "CountQuery", "FallbackCountRunner", "ReportRepo"]
