"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_enricher.adapters.download_client import HttpxDownloadClient
from nutrition_enricher.adapters.fdc_client import HttpxFdcClient
from nutrition_enricher.config import Settings
from nutrition_enricher.services.cache import InMemoryCache
from nutrition_enricher.services.dataset_search import DatasetSearchService
from nutrition_enricher.services.enrichment import (
    DatasetStrategy,
    DefaultStrategy,
    EnrichmentService,
    ExternalSearchStrategy,
    StaticFallbackStrategy,
)
from nutrition_enricher.services.external_search import ExternalSearchService
from nutrition_enricher.services.fallback_table import FallbackTable
from nutrition_enricher.services.normalizer import TermNormalizer
from nutrition_enricher.services.refresh import DatasetRefreshService
from nutrition_enricher.services.scheduler import DatasetRefreshScheduler


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    normalizer: TermNormalizer
    dataset_search: DatasetSearchService
    external_search: ExternalSearchService
    enrichment_service: EnrichmentService
    refresh_service: DatasetRefreshService
    scheduler: DatasetRefreshScheduler | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    normalizer = TermNormalizer()
    dataset_search = DatasetSearchService(
        dataset_path=resolved_settings.dataset_path,
        normalizer=normalizer,
        max_scan_rows=resolved_settings.max_scan_rows,
        delimiter=resolved_settings.dataset_delimiter,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    external_search = ExternalSearchService(
        fdc_client=fdc_client,
        normalizer=normalizer,
        cache=InMemoryCache(),
        timeout_seconds=resolved_settings.external_search_timeout_seconds,
        enabled=resolved_settings.external_search_enabled,
    )
    enrichment_service = EnrichmentService(
        strategies=[
            DatasetStrategy(dataset_search),
            ExternalSearchStrategy(external_search),
            StaticFallbackStrategy(FallbackTable(), normalizer),
            DefaultStrategy(),
        ],
        concurrency=resolved_settings.enrichment_concurrency,
    )
    download_client = HttpxDownloadClient.create()
    refresh_service = DatasetRefreshService(
        download_client=download_client,
        source_url=resolved_settings.dataset_url,
        dataset_path=resolved_settings.dataset_path,
        download_timeout_seconds=resolved_settings.download_timeout_seconds,
        max_age_hours=resolved_settings.dataset_max_age_hours,
    )
    scheduler = (
        DatasetRefreshScheduler(refresh_service, cron=resolved_settings.refresh_cron)
        if resolved_settings.scheduler_enabled
        else None
    )

    async def close_resources() -> None:
        if scheduler is not None:
            scheduler.stop()
        await fdc_client.close()
        await download_client.close()

    return AppContainer(
        settings=resolved_settings,
        normalizer=normalizer,
        dataset_search=dataset_search,
        external_search=external_search,
        enrichment_service=enrichment_service,
        refresh_service=refresh_service,
        scheduler=scheduler,
        close_resources=close_resources,
    )
