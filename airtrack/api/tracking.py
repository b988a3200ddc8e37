"""Live tracking endpoints consumed by the map renderer."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status

from airtrack.models.views import RefreshResponse, SectorsResponse, SnapshotResponse
from airtrack.poller import Poller, PollOutcome
from airtrack.sectors import SectorCatalog
from airtrack.store import TrackingStore

router = APIRouter(prefix="/api/v1", tags=["tracking"])

logger = logging.getLogger("airtrack.api.tracking")


def _store(request: Request) -> TrackingStore:
    return request.app.state.store


def _catalog(request: Request) -> SectorCatalog:
    return request.app.state.catalog


@router.get("/snapshot", response_model=SnapshotResponse, summary="Current snapshot")
def get_snapshot(request: Request) -> SnapshotResponse:
    """Return the latest aircraft records and heading segments."""

    return SnapshotResponse.from_snapshot(_store(request).current())


@router.get("/sectors", response_model=SectorsResponse, summary="Sector catalog")
def get_sectors(request: Request) -> SectorsResponse:
    """Return the static airspace sectors."""

    return SectorsResponse(sectors=list(_catalog(request).sectors()))


@router.post("/refresh", response_model=RefreshResponse, summary="Refresh now")
async def refresh_now(request: Request) -> RefreshResponse:
    """Run the refresh pipeline immediately, outside the regular cadence."""

    poller: Poller | None = getattr(request.app.state, "poller", None)
    if poller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Poller not configured",
        )

    outcome = await poller.refresh_now()
    current = _store(request).current()
    logger.info("Manual refresh -> %s (snapshot %s)", outcome.value, current.sequence)
    return RefreshResponse(
        outcome=outcome.value,
        sequence=current.sequence,
        error=poller.last_error if outcome is PollOutcome.FAILED else None,
    )
