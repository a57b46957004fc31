"""Dataset status and refresh endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from nutrition_enricher.domain.refresh import RefreshOutcome

if TYPE_CHECKING:
    from nutrition_enricher.containers import AppContainer

router = APIRouter(prefix="/nutrition/dataset", tags=["dataset"])


@router.get("/status")
async def dataset_status(request: Request) -> dict[str, object]:
    """Return dataset freshness and the current refresh status."""
    container: AppContainer = request.app.state.container
    info = container.refresh_service.dataset_info()
    return {
        "needsUpdate": info.needs_update,
        "lastUpdate": info.last_modified.isoformat() if info.last_modified else None,
        "hoursSinceUpdate": (
            round(info.hours_since_update)
            if info.hours_since_update is not None
            else None
        ),
        "downloadStatus": container.refresh_service.status().as_dict(),
    }


@router.get("/progress")
async def dataset_progress(request: Request) -> dict[str, object]:
    """Return the refresh status snapshot."""
    container: AppContainer = request.app.state.container
    return {"downloadStatus": container.refresh_service.status().as_dict()}


@router.post("/update", status_code=status.HTTP_202_ACCEPTED)
async def dataset_update(request: Request) -> dict[str, object]:
    """Start a dataset refresh in the background."""
    container: AppContainer = request.app.state.container
    outcome = container.refresh_service.start_refresh()
    if outcome is RefreshOutcome.REJECTED_IN_PROGRESS:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Download already in progress",
        )
    return {
        "success": True,
        "message": "Download started",
        "downloadStatus": container.refresh_service.status().as_dict(),
    }
