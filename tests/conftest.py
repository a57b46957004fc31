"""Shared test fixtures."""

import asyncio
import csv
import gzip
import io
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from nutrition_enricher.adapters.download_client import (
    DatasetDownloadClient,
    ProgressCallback,
)
from nutrition_enricher.adapters.fdc_client import FdcClient
from nutrition_enricher.config import Settings
from nutrition_enricher.containers import AppContainer
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
from nutrition_enricher.services.normalizer import TermNormalizer
from nutrition_enricher.services.refresh import DatasetRefreshService

DATASET_HEADER = [
    "product_name",
    "categories",
    "brands",
    "energy_100g",
    "proteins_100g",
    "carbohydrates_100g",
    "fat_100g",
    "fiber_100g",
    "sugars_100g",
    "nutriscore_grade",
    "nova_group",
    "ingredients_text",
    "allergens_tags",
    "additives_tags",
]


def dataset_row(name: str, **values: object) -> dict[str, object]:
    """Build a dataset row with sensible macro defaults."""
    row: dict[str, object] = {
        "product_name": name,
        "categories": "",
        "brands": "",
        "energy_100g": 250,
        "proteins_100g": 10,
        "carbohydrates_100g": 30,
        "fat_100g": 8,
        "fiber_100g": 2,
        "sugars_100g": 4,
        "nutriscore_grade": "c",
        "nova_group": "3",
        "ingredients_text": "",
        "allergens_tags": "",
        "additives_tags": "",
    }
    row.update(values)
    return row


def render_dataset(
    rows: list[dict[str, object]], header: list[str] | None = None
) -> str:
    """Render rows as CSV text with a header line."""
    columns = header or DATASET_HEADER
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({column: row.get(column, "") for column in columns})
    return buffer.getvalue()


def write_dataset(
    path: Path, rows: list[dict[str, object]], extra_lines: list[str] | None = None
) -> Path:
    """Write a dataset file, optionally appending raw lines after the rows."""
    text = render_dataset(rows)
    for line in extra_lines or []:
        text += line + "\n"
    path.write_text(text, encoding="utf-8")
    return path


def gzip_bytes(text: str) -> bytes:
    """Compress text the way the dataset export is published."""
    return gzip.compress(text.encode("utf-8"))


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171477,
                    "description": "Chicken, broiler, breast, roasted",
                    "foodCategory": "Poultry Products",
                    "foodNutrients": [
                        {"nutrientId": 1008, "value": 165},
                        {"nutrientId": 1003, "value": 31},
                        {"nutrientId": 1004, "value": 3.6},
                        {"nutrientId": 1005, "value": 0},
                        {"nutrientId": 1093, "value": 74},
                    ],
                }
            ]
        }
    )
    error: Exception | None = None
    delay_seconds: float = 0.0
    queries: list[str] = field(default_factory=list)

    async def search_foods(
        self, query: str, page_size: int = 5, timeout: float = 10.0
    ) -> dict[str, object]:
        self.queries.append(query)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeDownloadClient(DatasetDownloadClient):
    """Fake download client that writes fixed bytes in chunks."""

    content: bytes = b""
    chunk_size: int = 16
    report_total: bool = True
    error: Exception | None = None
    gate: asyncio.Event | None = None
    urls: list[str] = field(default_factory=list)

    async def download(
        self, url: str, destination: Path, on_progress: ProgressCallback
    ) -> int:
        self.urls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        total = len(self.content) if self.report_total else None
        received = 0
        with destination.open("wb") as handle:
            for start in range(0, len(self.content), self.chunk_size):
                chunk = self.content[start : start + self.chunk_size]
                handle.write(chunk)
                received += len(chunk)
                on_progress(received, total)
                await asyncio.sleep(0)
                if self.error is not None:
                    raise self.error
        if self.error is not None:
            raise self.error
        return received


def build_enrichment(
    dataset_path: Path,
    fdc_client: FdcClient | None = None,
    external_enabled: bool = True,
) -> EnrichmentService:
    """Assemble the full strategy chain over test doubles."""
    normalizer = TermNormalizer()
    search = DatasetSearchService(dataset_path=dataset_path, normalizer=normalizer)
    external = ExternalSearchService(
        fdc_client=fdc_client or FakeFdcClient(payload={"foods": []}),
        normalizer=normalizer,
        cache=InMemoryCache(),
        timeout_seconds=0.5,
        retry_delay_seconds=0,
        enabled=external_enabled,
    )
    return EnrichmentService(
        strategies=[
            DatasetStrategy(search),
            ExternalSearchStrategy(external),
            StaticFallbackStrategy(normalizer=normalizer),
            DefaultStrategy(),
        ]
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        dataset_dir=tmp_path,
        dataset_filename="products.csv",
        dataset_url="https://data.test/products.csv.gz",
        refresh_on_startup=False,
        scheduler_enabled=False,
        external_search_enabled=False,
        fdc_api_key="key",
        environment="test",
    )


@pytest.fixture
def dataset_path(settings: Settings) -> Path:
    return write_dataset(
        settings.dataset_path,
        [
            dataset_row("Pizza Margherita", categories="Pizzas", brands="Napoli"),
            dataset_row("Basmati Rice", categories="Cereals", energy_100g=350),
        ],
    )


@pytest.fixture
def download_client() -> FakeDownloadClient:
    return FakeDownloadClient(
        content=gzip_bytes(render_dataset([dataset_row("Fresh Apple")]))
    )


@pytest.fixture
def container(
    settings: Settings, download_client: FakeDownloadClient
) -> AppContainer:
    normalizer = TermNormalizer()
    fdc_client = FakeFdcClient(payload={"foods": []})
    external_search = ExternalSearchService(
        fdc_client=fdc_client,
        normalizer=normalizer,
        cache=InMemoryCache(),
        enabled=False,
    )
    dataset_search = DatasetSearchService(
        dataset_path=settings.dataset_path, normalizer=normalizer
    )
    refresh_service = DatasetRefreshService(
        download_client=download_client,
        source_url=settings.dataset_url,
        dataset_path=settings.dataset_path,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        normalizer=normalizer,
        dataset_search=dataset_search,
        external_search=external_search,
        enrichment_service=build_enrichment(
            settings.dataset_path, fdc_client, external_enabled=False
        ),
        refresh_service=refresh_service,
        scheduler=None,
        close_resources=close_resources,
    )
