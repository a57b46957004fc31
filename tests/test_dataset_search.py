"""Tests for dataset search."""

import asyncio
from pathlib import Path

from nutrition_enricher.domain.nutrition import MatchSource
from nutrition_enricher.services.dataset_search import (
    DatasetSearchService,
    MatchWeights,
    record_from_row,
)
from tests.conftest import dataset_row, render_dataset, write_dataset


def test_search_matches_name_containing_term(dataset_path) -> None:
    service = DatasetSearchService(dataset_path=dataset_path)

    result = asyncio.run(service.search(["pizza"]))

    assert result.found
    assert result.source is MatchSource.DATASET
    assert result.record.product_name == "Pizza Margherita"
    assert result.score > 0.3


def test_search_uses_normalized_variants(dataset_path) -> None:
    service = DatasetSearchService(dataset_path=dataset_path)

    result = service.search_sync(["arroz"])

    assert result.record.product_name == "Basmati Rice"
    assert result.record.energy_kcal == 350


def test_search_below_threshold_returns_empty(dataset_path) -> None:
    service = DatasetSearchService(dataset_path=dataset_path)

    # Category-only matches earn just the nutrient bonuses.
    result = service.search_sync(["cereals"])

    assert not result.found
    assert result.score == 0.0


def test_search_without_candidates_returns_empty(dataset_path) -> None:
    service = DatasetSearchService(dataset_path=dataset_path)

    assert not service.search_sync(["quinoa"]).found
    assert not service.search_sync([]).found
    assert not service.search_sync(["  "]).found


def test_search_missing_dataset_returns_empty(tmp_path) -> None:
    service = DatasetSearchService(dataset_path=tmp_path / "missing.csv")

    assert not service.search_sync(["pizza"]).found


def test_search_ties_keep_first_row(tmp_path) -> None:
    path = write_dataset(
        tmp_path / "products.csv",
        [dataset_row("Pizza Napoletana"), dataset_row("Pizza Romana")],
    )
    service = DatasetSearchService(dataset_path=path)

    result = service.search_sync(["pizza"])

    assert result.record.product_name == "Pizza Napoletana"


def test_search_prefers_exact_name(tmp_path) -> None:
    path = write_dataset(
        tmp_path / "products.csv",
        [dataset_row("Apple pie"), dataset_row("Apple")],
    )
    service = DatasetSearchService(dataset_path=path)

    result = service.search_sync(["apple"])

    assert result.record.product_name == "Apple"
    assert result.score == 1.0


def test_search_scan_is_bounded(tmp_path) -> None:
    path = write_dataset(
        tmp_path / "products.csv",
        [dataset_row("Oat milk"), dataset_row("Dark chocolate")],
    )
    service = DatasetSearchService(dataset_path=path, max_scan_rows=1)

    assert not service.search_sync(["chocolate"]).found
    assert service.search_sync(["oat milk"]).found


def test_score_row_requires_candidate_field() -> None:
    service = DatasetSearchService(dataset_path=Path("unused.csv"))
    row = {"product_name": "", "categories": "", "proteins_100g": "5"}

    assert service.score_row(row, ["rice"]) == 0.0


def test_score_row_adds_weights() -> None:
    weights = MatchWeights()
    service = DatasetSearchService(dataset_path=Path("unused.csv"), weights=weights)
    row = {
        "product_name": "Rice",
        "energy-kcal_100g": "130",
        "proteins_100g": "",
    }

    score = service.score_row(row, ["rice"])

    expected = (
        weights.name_contains_term
        + weights.term_contains_name
        + weights.exact_name
        + weights.energy_bonus
    )
    assert score == expected


def test_record_from_row_reads_nutrients() -> None:
    row = {
        "product_name": "Greek yogurt",
        "energy-kcal_100g": "97",
        "energy_100g": "406",
        "proteins_100g": "9",
        "carbohydrates_100g": "3.6",
        "fat_100g": "5",
        "fiber_100g": "",
        "sugars_100g": "3.6",
        "salt_100g": "0.1",
        "nutriscore_grade": "b",
        "nova_group": "",
    }

    record = record_from_row(row)

    assert record.energy_kcal == 97
    assert record.protein_g == 9
    assert record.fiber_g is None
    assert record.salt_g == 0.1
    assert record.nutriscore_grade == "b"
    assert record.processing is None


def test_record_from_row_falls_back_to_energy_column() -> None:
    record = record_from_row({"product_name": "Bread", "energy_100g": "265"})

    assert record.energy_kcal == 265
    assert record.carbs_g is None


def test_search_cap_counts_malformed_lines(tmp_path) -> None:
    pizza_line = render_dataset([dataset_row("Pizza Margherita")]).splitlines()[1]
    path = write_dataset(
        tmp_path / "products.csv", [], extra_lines=["bad,row"] * 5 + [pizza_line]
    )
    service = DatasetSearchService(dataset_path=path, max_scan_rows=3)

    assert not service.search_sync(["pizza"]).found
    assert DatasetSearchService(dataset_path=path, max_scan_rows=6).search_sync(
        ["pizza"]
    ).found
