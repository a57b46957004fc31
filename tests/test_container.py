"""Tests for container wiring."""

import asyncio

from nutrition_enricher.containers import build_container
from nutrition_enricher.services.enrichment import (
    DatasetStrategy,
    DefaultStrategy,
    ExternalSearchStrategy,
    StaticFallbackStrategy,
)


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.scheduler is None
    assert container.refresh_service.dataset_path == settings.dataset_path
    assert container.dataset_search.dataset_path == settings.dataset_path
    assert not container.external_search.enabled
    assert [type(strategy) for strategy in container.enrichment_service.strategies] == [
        DatasetStrategy,
        ExternalSearchStrategy,
        StaticFallbackStrategy,
        DefaultStrategy,
    ]
    asyncio.run(container.close_resources())


def test_build_container_with_scheduler(settings) -> None:
    settings.scheduler_enabled = True
    container = build_container(settings)

    assert container.scheduler is not None
    assert not container.scheduler.running
    asyncio.run(container.close_resources())
