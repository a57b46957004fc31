"""Nutrition grade and traffic-light levels for meal totals."""

from collections.abc import Sequence

from nutrition_enricher.domain.nutrition import Level, NutritionLevels, NutritionTotals

# No saturated fat measurement is available, so it is estimated from total fat.
SATURATED_FAT_RATIO = 0.3

ENERGY_BANDS = (335, 670, 1005, 1340, 1675)
SATURATED_FAT_BANDS = (1, 2, 3, 4, 5)
SUGAR_BANDS = (4.5, 9, 13.5, 18, 22.5)
SALT_BANDS = (0.3, 0.6, 0.9, 1.2, 1.5)

# Upper bound of the summed sub-scores for each letter.
GRADE_CUTS = (("A", 2), ("B", 10), ("C", 18), ("D", 26))

FAT_LEVELS = (3, 17.5)
SATURATED_FAT_LEVELS = (1.5, 5)
SUGAR_LEVELS = (5, 22.5)
SALT_LEVELS = (0.3, 1.5)


def estimated_saturated_fat(totals: NutritionTotals) -> float:
    """Saturated fat estimated as a fixed share of total fat."""
    return totals.fat_g * SATURATED_FAT_RATIO


def band_score(value: float, bands: Sequence[float]) -> int:
    """Number of band limits ``value`` exceeds (0 to ``len(bands)``)."""
    for points, limit in enumerate(bands):
        if value <= limit:
            return points
    return len(bands)


def nutrition_points(totals: NutritionTotals) -> int:
    """Sum of the energy, saturated fat, sugar and salt sub-scores."""
    return (
        band_score(totals.calories, ENERGY_BANDS)
        + band_score(estimated_saturated_fat(totals), SATURATED_FAT_BANDS)
        + band_score(totals.sugar_g, SUGAR_BANDS)
        + band_score(totals.salt_g or 0.0, SALT_BANDS)
    )


def nutrition_grade(totals: NutritionTotals) -> str:
    """Letter grade A (best) to E for the given totals."""
    points = nutrition_points(totals)
    for letter, upper in GRADE_CUTS:
        if points <= upper:
            return letter
    return "E"


def _level(value: float, limits: tuple[float, float]) -> Level:
    low, medium = limits
    if value <= low:
        return Level.LOW
    if value <= medium:
        return Level.MEDIUM
    return Level.HIGH


def nutrition_levels(totals: NutritionTotals) -> NutritionLevels:
    """Classify fat, saturated fat, sugar and salt independently."""
    return NutritionLevels(
        fat=_level(totals.fat_g, FAT_LEVELS),
        saturated_fat=_level(estimated_saturated_fat(totals), SATURATED_FAT_LEVELS),
        sugar=_level(totals.sugar_g, SUGAR_LEVELS),
        salt=_level(totals.salt_g or 0.0, SALT_LEVELS),
    )
