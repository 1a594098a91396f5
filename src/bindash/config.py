from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

from bindash.dashboard.aggregator import DashboardConfig
from bindash.report.paths import StorageConfig


class Settings(BaseSettings):
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "trashbin"
    debug: bool = True

    # Generated files live under storage_root / reports_subdir
    storage_root: Path = Path(".")
    reports_subdir: str = "generated/reports"
    download_chunk_size: int = 8192
    excel_engine: str = "csv"  # csv | xlsx

    # Dashboard
    fill_threshold: int = 90  # fill_level percentage that counts a bin as pending
    stats_schema_variant: Optional[str] = None  # None = walk the whole fallback chain
    recent_reports_limit: int = 50

    # API key -> admins.admin_id
    admin_api_keys: dict[str, int] = {}

    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    def storage_config(self) -> StorageConfig:
        return StorageConfig(
            root=self.storage_root,
            reports_subdir=self.reports_subdir,
            chunk_size=self.download_chunk_size,
        )

    def dashboard_config(self) -> DashboardConfig:
        return DashboardConfig(
            fill_threshold=self.fill_threshold,
            schema_variant=self.stats_schema_variant,
            recent_limit=self.recent_reports_limit,
        )

    class Config:
        env_file = ".env"


settings = Settings()
