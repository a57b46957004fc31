"""Bounded best-match search over the bulk nutrition dataset."""

import asyncio
import logging
from collections.abc import Sequence
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path

from nutrition_enricher.adapters.dataset_file import iter_rows
from nutrition_enricher.domain.nutrition import FoodRecord, MatchResult, MatchSource
from nutrition_enricher.services.normalizer import TermNormalizer

_logger = logging.getLogger(__name__)

DEFAULT_MAX_SCAN_ROWS = 50_000


@dataclass(frozen=True)
class MatchWeights:
    """Scoring weights for dataset rows; tuned by hand."""

    name_contains_term: float = 0.5
    term_contains_name: float = 0.3
    exact_name: float = 0.2
    energy_bonus: float = 0.1
    protein_bonus: float = 0.1
    threshold: float = 0.3


@dataclass
class DatasetSearchService:
    """Scans the dataset file and keeps the best-scoring row.

    Only the first ``max_scan_rows`` data lines are read, malformed ones
    included, so the result is the best match within that window rather than
    across the whole file. Ties keep the row seen first.
    """

    dataset_path: Path
    normalizer: TermNormalizer = field(default_factory=TermNormalizer)
    weights: MatchWeights = field(default_factory=MatchWeights)
    max_scan_rows: int = DEFAULT_MAX_SCAN_ROWS
    delimiter: str = ","

    async def search(self, search_terms: Sequence[str]) -> MatchResult:
        """Return the best dataset match for ``search_terms``."""
        return await asyncio.to_thread(self.search_sync, search_terms)

    def search_sync(self, search_terms: Sequence[str]) -> MatchResult:
        """Blocking variant of :meth:`search`."""
        terms = self._expand(search_terms)
        if not terms:
            return MatchResult.empty()
        try:
            best_row, best_score = self._scan(terms)
        except OSError as exc:
            _logger.warning("Dataset unavailable at %s: %s", self.dataset_path, exc)
            return MatchResult.empty()
        if best_row is None or best_score <= self.weights.threshold:
            return MatchResult.empty()
        return MatchResult(
            record=record_from_row(best_row),
            score=min(best_score, 1.0),
            source=MatchSource.DATASET,
        )

    def _expand(self, search_terms: Sequence[str]) -> list[str]:
        terms: list[str] = []
        for term in search_terms:
            for variant in self.normalizer.variants(term):
                if variant not in terms:
                    terms.append(variant)
        return terms

    def _scan(self, terms: list[str]) -> tuple[dict[str, str] | None, float]:
        best_row: dict[str, str] | None = None
        best_score = 0.0
        rows = iter_rows(self.dataset_path, self.delimiter, self.max_scan_rows)
        with closing(rows):
            for row in rows:
                score = self.score_row(row, terms)
                if score > best_score:
                    best_score = score
                    best_row = row
        return best_row, best_score

    def score_row(self, row: dict[str, str], terms: list[str]) -> float:
        """Score one row against lower-cased terms; 0 when it is no candidate."""
        name = row.get("product_name", "").lower()
        fields = [
            value
            for value in (
                name,
                row.get("categories", "").lower(),
                row.get("brands", "").lower(),
            )
            if value
        ]
        if not any(
            term in value or value in term for term in terms for value in fields
        ):
            return 0.0

        weights = self.weights
        score = 0.0
        if name:
            for term in terms:
                if term in name:
                    score += weights.name_contains_term
                if name in term:
                    score += weights.term_contains_name
                if name == term:
                    score += weights.exact_name
        if (_energy(row) or 0.0) > 0:
            score += weights.energy_bonus
        if (_to_float(row.get("proteins_100g")) or 0.0) > 0:
            score += weights.protein_bonus
        return score


def record_from_row(row: dict[str, str]) -> FoodRecord:
    """Build a food record from a raw dataset row."""
    return FoodRecord(
        product_name=row.get("product_name", ""),
        categories=row.get("categories", ""),
        brands=row.get("brands", ""),
        energy_kcal=_energy(row),
        carbs_g=_to_float(row.get("carbohydrates_100g")),
        protein_g=_to_float(row.get("proteins_100g")),
        fat_g=_to_float(row.get("fat_100g")),
        fiber_g=_to_float(row.get("fiber_100g")),
        sugar_g=_to_float(row.get("sugars_100g")),
        salt_g=_to_float(row.get("salt_100g")),
        nutriscore_grade=row.get("nutriscore_grade") or None,
        processing=row.get("nova_group") or None,
        ingredients_text=row.get("ingredients_text", ""),
        allergens_tags=row.get("allergens_tags", ""),
        additives_tags=row.get("additives_tags", ""),
    )


def _energy(row: dict[str, str]) -> float | None:
    kcal = _to_float(row.get("energy-kcal_100g"))
    if kcal is not None and kcal > 0:
        return kcal
    return _to_float(row.get("energy_100g"))


def _to_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None
