"""Per-item fallback chain that resolves candidate items to macros."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from nutrition_enricher.domain.items import CandidateItem, EnrichedItem, MealAnalysis
from nutrition_enricher.domain.nutrition import (
    FoodRecord,
    MacroProfile,
    MatchResult,
    MatchSource,
    NutritionTotals,
)
from nutrition_enricher.services.dataset_search import DatasetSearchService
from nutrition_enricher.services.external_search import ExternalSearchService
from nutrition_enricher.services.fallback_table import DEFAULT_RECORD, FallbackTable
from nutrition_enricher.services.normalizer import TermNormalizer
from nutrition_enricher.services.scoring import nutrition_grade, nutrition_levels

_logger = logging.getLogger(__name__)


class ResolutionStrategy(Protocol):
    """One tier of the fallback chain."""

    name: str

    async def try_resolve(self, item: CandidateItem) -> MatchResult | None:
        """Return a match for ``item`` or ``None`` to defer to the next tier."""


@dataclass
class DatasetStrategy(ResolutionStrategy):
    """Searches the bulk dataset term by term."""

    search_service: DatasetSearchService
    name: str = "dataset"

    async def try_resolve(self, item: CandidateItem) -> MatchResult | None:
        for term in item.terms:
            result = await self.search_service.search([term])
            if result.found:
                return result
        return None


@dataclass
class ExternalSearchStrategy(ResolutionStrategy):
    """Single external lookup with the item's primary term."""

    external_search: ExternalSearchService
    name: str = "internet"

    async def try_resolve(self, item: CandidateItem) -> MatchResult | None:
        record = await self.external_search.lookup(item.primary_term)
        if record is None:
            return None
        return MatchResult(record=record, score=1.0, source=MatchSource.INTERNET)


@dataclass
class StaticFallbackStrategy(ResolutionStrategy):
    """Curated table keyed by well-known food names."""

    table: FallbackTable = field(default_factory=FallbackTable)
    normalizer: TermNormalizer = field(default_factory=TermNormalizer)
    name: str = "fallback"

    async def try_resolve(self, item: CandidateItem) -> MatchResult | None:
        for candidate in self._candidates(item):
            record = self.table.lookup(candidate)
            if record is not None:
                return MatchResult(
                    record=record, score=1.0, source=MatchSource.FALLBACK
                )
        return None

    def _candidates(self, item: CandidateItem) -> list[str]:
        names = [item.name, *item.terms]
        names += [self.normalizer.normalize(name) for name in names]
        return list(dict.fromkeys(names))


@dataclass
class DefaultStrategy(ResolutionStrategy):
    """Floor of the chain: generic values for anything left over."""

    record: FoodRecord = DEFAULT_RECORD
    name: str = "default"

    async def try_resolve(self, item: CandidateItem) -> MatchResult | None:
        return MatchResult(record=self.record, score=1.0, source=MatchSource.DEFAULT)


@dataclass
class EnrichmentService:
    """Resolves candidate items through an ordered list of strategies."""

    strategies: Sequence[ResolutionStrategy]
    concurrency: int = 4

    async def enrich(self, items: Sequence[CandidateItem]) -> list[EnrichedItem]:
        """Enrich items concurrently; the result keeps the input order."""
        semaphore = asyncio.Semaphore(max(self.concurrency, 1))

        async def run(item: CandidateItem) -> EnrichedItem:
            async with semaphore:
                return await self.enrich_item(item)

        return list(await asyncio.gather(*(run(item) for item in items)))

    async def enrich_item(self, item: CandidateItem) -> EnrichedItem:
        """Walk the chain until a strategy produces a record."""
        for strategy in self.strategies:
            try:
                result = await strategy.try_resolve(item)
            except Exception:
                _logger.exception(
                    "Strategy %s failed for item %r", strategy.name, item.name
                )
                continue
            if result is not None and result.record is not None:
                _logger.debug("Resolved %r via %s", item.name, result.source)
                return build_enriched_item(item, result)
        _logger.warning("No strategy resolved %r, using defaults", item.name)
        fallback = MatchResult(
            record=DEFAULT_RECORD, score=1.0, source=MatchSource.DEFAULT
        )
        return build_enriched_item(item, fallback)

    async def analyze(self, items: Sequence[CandidateItem]) -> MealAnalysis:
        """Enrich items and score the meal."""
        enriched = await self.enrich(items)
        totals = summarize(enriched)
        return MealAnalysis(
            items=enriched,
            totals=totals,
            grade=nutrition_grade(totals),
            levels=nutrition_levels(totals),
        )


def summarize(items: Sequence[EnrichedItem]) -> NutritionTotals:
    """Sum item macros without intermediate rounding."""
    totals = NutritionTotals()
    for item in items:
        totals = totals.add(item.macros)
    return totals


def build_enriched_item(item: CandidateItem, result: MatchResult) -> EnrichedItem:
    """Combine an item with the record that resolved it."""
    record = result.record or DEFAULT_RECORD
    return EnrichedItem(
        item=item,
        macros=resolve_macros(record, item),
        source=result.source,
        score=result.score,
        nutri_score=record.nutriscore_grade,
        processing=record.processing,
        ingredients=_split_list(record.ingredients_text),
        allergens=_split_list(record.allergens_tags),
        additives=_split_list(record.additives_tags),
    )


def resolve_macros(record: FoodRecord, item: CandidateItem) -> MacroProfile:
    """Record values first, then the item's own estimates, then defaults.

    Only missing values fall through; a measured zero is kept.
    """
    return MacroProfile(
        calories=_pick(record.energy_kcal, item.calories, DEFAULT_RECORD.energy_kcal),
        carbs_g=_pick(record.carbs_g, item.carbs, DEFAULT_RECORD.carbs_g),
        protein_g=_pick(record.protein_g, item.protein, DEFAULT_RECORD.protein_g),
        fat_g=_pick(record.fat_g, item.fat, DEFAULT_RECORD.fat_g),
        fiber_g=_pick(record.fiber_g, item.fiber, DEFAULT_RECORD.fiber_g),
        sugar_g=_pick(record.sugar_g, item.sugar, DEFAULT_RECORD.sugar_g),
        salt_g=_pick(record.salt_g),
    )


def _pick(*values: float | None) -> float:
    for value in values:
        if value is not None and value >= 0:
            return float(value)
    return 0.0


def _split_list(text: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in text.split(",") if part.strip())
