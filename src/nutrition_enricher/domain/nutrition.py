"""Nutrition domain models."""

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class MacroProfile:
    """Resolved macronutrient values for a food item."""

    calories: float
    carbs_g: float
    protein_g: float
    fat_g: float
    fiber_g: float
    sugar_g: float
    salt_g: float = 0.0


@dataclass(frozen=True)
class FoodRecord:
    """Per-100g nutrition data for one product.

    Dataset rows map onto this shape one-to-one; the external search and the
    static fallback table produce records of the same shape so every tier
    hands the orchestrator the same type. Nutrient fields are ``None`` when
    the source does not provide a usable value.
    """

    product_name: str
    categories: str = ""
    brands: str = ""
    energy_kcal: float | None = None
    carbs_g: float | None = None
    protein_g: float | None = None
    fat_g: float | None = None
    fiber_g: float | None = None
    sugar_g: float | None = None
    salt_g: float | None = None
    nutriscore_grade: str | None = None
    processing: str | None = None
    ingredients_text: str = ""
    allergens_tags: str = ""
    additives_tags: str = ""


class MatchSource(StrEnum):
    """Fallback tier that resolved an item."""

    DATASET = "dataset"
    INTERNET = "internet"
    FALLBACK = "fallback"
    DEFAULT = "default"


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a lookup: the best record found and how well it matched."""

    record: FoodRecord | None
    score: float
    source: MatchSource

    @classmethod
    def empty(cls, source: MatchSource = MatchSource.DATASET) -> "MatchResult":
        """Return a result carrying no record."""
        return cls(record=None, score=0.0, source=source)

    @property
    def found(self) -> bool:
        """Whether a record was matched."""
        return self.record is not None


@dataclass(frozen=True)
class NutritionTotals:
    """Summed macros for a meal; values stay unrounded."""

    calories: float = 0.0
    carbs_g: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    salt_g: float = 0.0

    def add(self, macros: MacroProfile) -> "NutritionTotals":
        """Return new totals with ``macros`` added."""
        return NutritionTotals(
            calories=self.calories + macros.calories,
            carbs_g=self.carbs_g + macros.carbs_g,
            protein_g=self.protein_g + macros.protein_g,
            fat_g=self.fat_g + macros.fat_g,
            fiber_g=self.fiber_g + macros.fiber_g,
            sugar_g=self.sugar_g + macros.sugar_g,
            salt_g=self.salt_g + macros.salt_g,
        )

    def rounded(self) -> dict[str, int]:
        """Whole-number totals for display."""
        return {
            "calories": round(self.calories),
            "carbs": round(self.carbs_g),
            "protein": round(self.protein_g),
            "fat": round(self.fat_g),
            "fiber": round(self.fiber_g),
            "sugar": round(self.sugar_g),
        }


class Level(StrEnum):
    """Traffic-light classification of a nutrient amount."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class NutritionLevels:
    """Per-component level classification."""

    fat: Level
    saturated_fat: Level
    sugar: Level
    salt: Level

    def as_dict(self) -> dict[str, str]:
        """Serialize with the keys used by downstream consumers."""
        return {
            "fat": self.fat.value,
            "saturatedFat": self.saturated_fat.value,
            "sugar": self.sugar.value,
            "salt": self.salt.value,
        }


@dataclass(frozen=True)
class FallbackEntry:
    """Curated record matched by keyword."""

    keywords: tuple[str, ...]
    record: FoodRecord
