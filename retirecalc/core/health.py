"""Health-check helper used by the API."""

from retirecalc.config import Settings
from retirecalc.schemas.health import HealthResponse


def get_health(settings: Settings) -> HealthResponse:
    """Report liveness and whether the lead relay has its credentials."""
    return HealthResponse(status="ok", relayConfigured=settings.relay_configured)
