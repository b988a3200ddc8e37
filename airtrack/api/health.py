"""Health check endpoint."""

from fastapi import APIRouter, Request

from airtrack.config import settings
from airtrack.models.views import HealthResponse, PollerStatusModel

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse, summary="Health check")
def health_check(request: Request) -> HealthResponse:
    """Report liveness along with the refresh loop's state."""
    poller = getattr(request.app.state, "poller", None)
    poller_status = None
    if poller is not None:
        status = poller.status()
        poller_status = PollerStatusModel(
            state=status.state.value,
            running=status.running,
            interval_seconds=status.interval_seconds,
            consecutive_failures=status.consecutive_failures,
            last_success_at=status.last_success_at,
            last_error=status.last_error,
        )
    return HealthResponse(
        status="ok",
        env=settings.airtrack_env,
        sequence=request.app.state.store.current().sequence,
        poller=poller_status,
    )
