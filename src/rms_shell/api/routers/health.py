"""Health check endpoints."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rms_shell.api.dependencies import get_container
from rms_shell.bootstrap import ShellContainer

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    gate: str
    branding: str
    redis: str


def check_redis_health(container: ShellContainer) -> str:
    """Check Redis connectivity. Returns 'connected', 'disabled' or 'unavailable'."""
    redis_store = container.redis
    if redis_store is None:
        return "unavailable"
    if not redis_store.enabled:
        return "disabled"
    return "connected" if redis_store.ping() else "unavailable"


@router.get("/health", response_model=HealthResponse)
def health_check(
    container: ShellContainer = Depends(get_container),
) -> HealthResponse:
    """
    Report shell health.

    Note: the shell is 'healthy' even without Redis or branding (degraded
    mode). Missing Redis only means credentials and branding do not survive
    restarts; missing branding only means fallback names are shown.
    """
    return HealthResponse(
        status="healthy",
        gate=container.gate.state.value,
        branding="cached" if container.branding.has_branding_data() else "missing",
        redis=check_redis_health(container),
    )
