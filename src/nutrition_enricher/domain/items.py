"""Models for candidate and enriched meal items."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from nutrition_enricher.domain.nutrition import (
    MacroProfile,
    MatchSource,
    NutritionLevels,
    NutritionTotals,
)


class CandidateItem(BaseModel):
    """Food item proposed by the upstream extraction step."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    search_terms: tuple[str, ...] = Field(default=(), alias="searchTerms")
    quantity: float = Field(default=1.0, ge=0.0)
    unit: str = "serving"
    description: str | None = None
    brand: str | None = None
    category: str | None = None
    calories: float | None = Field(default=None, ge=0.0)
    carbs: float | None = Field(default=None, ge=0.0)
    protein: float | None = Field(default=None, ge=0.0)
    fat: float | None = Field(default=None, ge=0.0)
    fiber: float | None = Field(default=None, ge=0.0)
    sugar: float | None = Field(default=None, ge=0.0)

    @property
    def terms(self) -> tuple[str, ...]:
        """Non-blank search terms, falling back to the item name."""
        terms = tuple(term for term in self.search_terms if term.strip())
        return terms or (self.name,)

    @property
    def primary_term(self) -> str:
        """Best search term for single-shot lookups."""
        return self.terms[0]


@dataclass(frozen=True)
class EnrichedItem:
    """Candidate item with resolved macros and provenance."""

    item: CandidateItem
    macros: MacroProfile
    source: MatchSource
    score: float
    nutri_score: str | None = None
    processing: str | None = None
    ingredients: tuple[str, ...] = ()
    allergens: tuple[str, ...] = ()
    additives: tuple[str, ...] = ()


@dataclass(frozen=True)
class MealAnalysis:
    """Enriched items with aggregate totals and scoring."""

    items: list[EnrichedItem]
    totals: NutritionTotals
    grade: str
    levels: NutritionLevels
