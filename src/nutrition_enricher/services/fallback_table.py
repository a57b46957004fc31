"""Curated nutrition data for common foods."""

from collections.abc import Sequence
from dataclasses import dataclass

from nutrition_enricher.domain.nutrition import FallbackEntry, FoodRecord

FALLBACK_ENTRIES: tuple[FallbackEntry, ...] = (
    FallbackEntry(
        keywords=("big mac", "burger"),
        record=FoodRecord(
            product_name="Burger",
            energy_kcal=550,
            carbs_g=45,
            protein_g=25,
            fat_g=30,
            fiber_g=3,
            sugar_g=9,
            nutriscore_grade="D",
            processing="Ultra-processed",
            ingredients_text=(
                "beef, bun, lettuce, cheese, pickles, onions, special sauce"
            ),
            allergens_tags="gluten, dairy",
            additives_tags="preservatives, flavor enhancers",
        ),
    ),
    FallbackEntry(
        keywords=("fries",),
        record=FoodRecord(
            product_name="French fries",
            energy_kcal=365,
            carbs_g=63,
            protein_g=4,
            fat_g=17,
            fiber_g=4,
            sugar_g=0,
            nutriscore_grade="C",
            processing="Processed",
            ingredients_text="potatoes, vegetable oil, salt",
            additives_tags="preservatives",
        ),
    ),
    FallbackEntry(
        keywords=("coca-cola", "cola", "soda"),
        record=FoodRecord(
            product_name="Cola",
            energy_kcal=140,
            carbs_g=39,
            protein_g=0,
            fat_g=0,
            fiber_g=0,
            sugar_g=39,
            nutriscore_grade="E",
            processing="Ultra-processed",
            ingredients_text=(
                "carbonated water, high fructose corn syrup, caramel color, "
                "phosphoric acid, natural flavors, caffeine"
            ),
            additives_tags="artificial colors, preservatives",
        ),
    ),
    FallbackEntry(
        keywords=("chicken breast", "grilled chicken"),
        record=FoodRecord(
            product_name="Chicken breast",
            energy_kcal=165,
            carbs_g=0,
            protein_g=31,
            fat_g=3.6,
            fiber_g=0,
            sugar_g=0,
            nutriscore_grade="A",
            processing="Unprocessed",
            ingredients_text="chicken breast",
        ),
    ),
    FallbackEntry(
        keywords=("broccoli",),
        record=FoodRecord(
            product_name="Broccoli",
            energy_kcal=55,
            carbs_g=11,
            protein_g=3.7,
            fat_g=0.6,
            fiber_g=5.2,
            sugar_g=2.6,
            nutriscore_grade="A",
            processing="Unprocessed",
            ingredients_text="broccoli",
        ),
    ),
    FallbackEntry(
        keywords=("brown rice",),
        record=FoodRecord(
            product_name="Brown rice",
            energy_kcal=216,
            carbs_g=45,
            protein_g=4.5,
            fat_g=1.8,
            fiber_g=3.5,
            sugar_g=0.8,
            nutriscore_grade="B",
            processing="Minimally processed",
            ingredients_text="brown rice",
        ),
    ),
    FallbackEntry(
        keywords=("mixed greens", "lettuce"),
        record=FoodRecord(
            product_name="Mixed greens",
            energy_kcal=15,
            carbs_g=3,
            protein_g=1.5,
            fat_g=0.2,
            fiber_g=1.2,
            sugar_g=1.2,
            nutriscore_grade="A",
            processing="Unprocessed",
            ingredients_text="mixed greens",
        ),
    ),
    FallbackEntry(
        keywords=("tomato",),
        record=FoodRecord(
            product_name="Tomato",
            energy_kcal=22,
            carbs_g=4.8,
            protein_g=1.1,
            fat_g=0.2,
            fiber_g=1.2,
            sugar_g=3.2,
            nutriscore_grade="A",
            processing="Unprocessed",
            ingredients_text="tomatoes",
        ),
    ),
    FallbackEntry(
        keywords=("cucumber",),
        record=FoodRecord(
            product_name="Cucumber",
            energy_kcal=16,
            carbs_g=3.6,
            protein_g=0.7,
            fat_g=0.1,
            fiber_g=0.5,
            sugar_g=1.7,
            nutriscore_grade="A",
            processing="Unprocessed",
            ingredients_text="cucumber",
        ),
    ),
    FallbackEntry(
        keywords=("olive oil",),
        record=FoodRecord(
            product_name="Olive oil",
            energy_kcal=120,
            carbs_g=0,
            protein_g=0,
            fat_g=14,
            fiber_g=0,
            sugar_g=0,
            nutriscore_grade="B",
            processing="Minimally processed",
            ingredients_text="olive oil",
        ),
    ),
)

DEFAULT_RECORD = FoodRecord(
    product_name="Generic food",
    energy_kcal=100,
    carbs_g=20,
    protein_g=5,
    fat_g=2,
    fiber_g=2,
    sugar_g=5,
    salt_g=0,
    nutriscore_grade="C",
    processing="Unknown",
    ingredients_text="unknown",
)


@dataclass(frozen=True)
class FallbackTable:
    """Keyword lookup over curated records; first matching entry wins."""

    entries: Sequence[FallbackEntry] = FALLBACK_ENTRIES

    def lookup(self, name: str) -> FoodRecord | None:
        """Return the curated record whose keyword occurs in ``name``."""
        lowered = name.lower()
        if not lowered.strip():
            return None
        for entry in self.entries:
            if any(keyword in lowered for keyword in entry.keywords):
                return entry.record
        return None
