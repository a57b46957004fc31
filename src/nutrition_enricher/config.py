"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    dataset_dir: Path = Path("data/openfoodfacts")
    dataset_filename: str = "products.csv"
    dataset_url: str = (
        "https://static.openfoodfacts.org/data/en.openfoodfacts.org.products.csv.gz"
    )
    # The Open Food Facts export is tab-separated despite its .csv name.
    dataset_delimiter: str = "\t"
    dataset_max_age_hours: float = 24.0
    download_timeout_seconds: float = 600.0
    refresh_cron: str = "0 1 * * *"
    refresh_on_startup: bool = True
    scheduler_enabled: bool = True
    max_scan_rows: int = 50_000
    enrichment_concurrency: int = 4
    external_search_enabled: bool = True
    external_search_timeout_seconds: float = 10.0
    fdc_api_key: str = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def dataset_path(self) -> Path:
        """Location of the installed dataset file."""
        return self.dataset_dir / self.dataset_filename
