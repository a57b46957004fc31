"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from nutrition_enricher.api.dataset import router as dataset_router
from nutrition_enricher.api.models import EnrichRequest
from nutrition_enricher.app_logging import configure_logging
from nutrition_enricher.containers import AppContainer
from nutrition_enricher.domain.items import EnrichedItem, MealAnalysis


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        if state_container.scheduler is not None:
            state_container.scheduler.start()
        if state_container.settings.refresh_on_startup:
            info = state_container.refresh_service.dataset_info()
            if info.needs_update:
                logger.info("Dataset missing or stale, refreshing at startup")
                state_container.refresh_service.start_refresh()
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(dataset_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition/enrich")
    async def enrich(payload: EnrichRequest, request: Request) -> dict[str, object]:
        """Resolve candidate items to macros and score the meal."""
        state_container: AppContainer = request.app.state.container
        analysis = await state_container.enrichment_service.analyze(payload.items)
        return _serialize_analysis(analysis)

    return app


def _serialize_analysis(analysis: MealAnalysis) -> dict[str, object]:
    totals = analysis.totals.rounded()
    return {
        "items": [_serialize_item(item) for item in analysis.items],
        "totalCalories": totals["calories"],
        "totalCarbs": totals["carbs"],
        "totalProtein": totals["protein"],
        "totalFat": totals["fat"],
        "totalFiber": totals["fiber"],
        "totalSugar": totals["sugar"],
        "nutritionScore": analysis.grade,
        "nutritionLevels": analysis.levels.as_dict(),
    }


def _serialize_item(enriched: EnrichedItem) -> dict[str, object]:
    item = enriched.item
    macros = enriched.macros
    return {
        "name": item.name,
        "quantity": item.quantity,
        "unit": item.unit,
        "searchTerms": list(item.search_terms),
        "description": item.description,
        "brand": item.brand,
        "category": item.category,
        "calories": macros.calories,
        "carbs": macros.carbs_g,
        "protein": macros.protein_g,
        "fat": macros.fat_g,
        "fiber": macros.fiber_g,
        "sugar": macros.sugar_g,
        "salt": macros.salt_g,
        "nutriScore": enriched.nutri_score,
        "foodType": enriched.processing,
        "ingredients": list(enriched.ingredients),
        "allergens": list(enriched.allergens),
        "additives": list(enriched.additives),
        "source": enriched.source.value,
        "matchScore": enriched.score,
    }
