"""Best-effort nutrition lookup against USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nutrition_enricher.adapters.fdc_client import FdcClient
from nutrition_enricher.domain.nutrition import FoodRecord
from nutrition_enricher.services.cache import MISSING, Cache, InMemoryCache
from nutrition_enricher.services.normalizer import TermNormalizer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_NUTRIENT_IDS = {
    "calories": (1008,),
    "protein": (1003,),
    "fat": (1004,),
    "carbs": (1005,),
    "fiber": (1079,),
    "sugar": (2000, 1063),
    "sodium": (1093,),
}

# Salt is sodium (mg) scaled by the NaCl/Na mass ratio, expressed in grams.
_SODIUM_TO_SALT = 2.5 / 1000

_logger = logging.getLogger(__name__)


@dataclass
class ExternalSearchService:
    """Looks a food up in FDC; every failure degrades to ``None``."""

    fdc_client: FdcClient
    normalizer: TermNormalizer = field(default_factory=TermNormalizer)
    cache: Cache = field(default_factory=InMemoryCache)
    timeout_seconds: float = 10.0
    cache_ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    enabled: bool = True

    async def lookup(self, query: str) -> FoodRecord | None:
        """Return a record for ``query`` or ``None`` on any failure."""
        if not self.enabled or not query.strip():
            return None
        search_query = self.normalizer.normalize(query).strip().lower()
        cache_key = f"fdc:lookup:{search_query}"
        cached = self.cache.get(cache_key, MISSING)
        if cached is None or isinstance(cached, FoodRecord):
            return cached

        try:
            payload = await asyncio.wait_for(
                self._call_with_retry(
                    lambda: self.fdc_client.search_foods(
                        search_query, page_size=1, timeout=self.timeout_seconds
                    ),
                    action=f"search:{search_query}",
                ),
                timeout=self.timeout_seconds * (self.retry_attempts + 1),
            )
        except TimeoutError:
            _logger.warning("External search timed out: query=%s", search_query)
            return None
        except Exception as exc:  # noqa: BLE001
            _logger.warning("External search failed: query=%s: %s", search_query, exc)
            return None

        record = _record_from_payload(payload)
        if record is None:
            _logger.info("External search found nothing: query=%s", search_query)
        self.cache.set(cache_key, record, ttl_seconds=self.cache_ttl_seconds)
        return record

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.debug(
                    "External %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _record_from_payload(payload: object) -> FoodRecord | None:
    """Map the first FDC search hit to a record; ``None`` without energy."""
    if not isinstance(payload, dict):
        return None
    foods = payload.get("foods")
    if not isinstance(foods, list) or not foods or not isinstance(foods[0], dict):
        return None
    food = foods[0]
    values = _extract_nutrients(food.get("foodNutrients") or [])
    if not values.get("calories"):
        return None
    sodium = values.get("sodium")
    return FoodRecord(
        product_name=str(food.get("description") or ""),
        categories=str(food.get("foodCategory") or ""),
        brands=str(food.get("brandOwner") or ""),
        energy_kcal=values.get("calories"),
        carbs_g=values.get("carbs"),
        protein_g=values.get("protein"),
        fat_g=values.get("fat"),
        fiber_g=values.get("fiber"),
        sugar_g=values.get("sugar"),
        salt_g=sodium * _SODIUM_TO_SALT if sodium is not None else None,
        ingredients_text=str(food.get("ingredients") or ""),
    )


def _extract_nutrients(food_nutrients: list[object]) -> dict[str, float]:
    """Collect known nutrients; search hits use ``value``, details ``amount``."""
    by_id: dict[int, float] = {}
    for nutrient in food_nutrients:
        if not isinstance(nutrient, dict):
            continue
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient.get("nutrientId") or nutrient_info.get("id")
        amount = nutrient.get("value", nutrient.get("amount"))
        if isinstance(nutrient_id, int) and isinstance(amount, int | float):
            by_id.setdefault(nutrient_id, float(amount))

    values: dict[str, float] = {}
    for name, ids in _NUTRIENT_IDS.items():
        for nutrient_id in ids:
            if nutrient_id in by_id:
                values[name] = by_id[nutrient_id]
                break
    return values
