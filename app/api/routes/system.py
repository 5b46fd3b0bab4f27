from fastapi import APIRouter, Request
from api.dependencies.rate_limits import get_limiter
from infrastructure.services import DispatcherDep, PreferenceGateDep, SettingsDep

router = APIRouter(tags=["System"])
limiter = get_limiter()


# Load balancers poll these every few seconds, so the limit is generous.
@router.get("/version")
@limiter.limit("50/minute")
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Get the version of the application."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit("50/minute")
def get_health(request: Request):  # pylint: disable=unused-argument
    """Healthcheck endpoint."""
    return {"status": "ok"}


@router.get("/health/notifications")
@limiter.limit("50/minute")
def get_notifications_health(
    request: Request,  # pylint: disable=unused-argument
    dispatcher: DispatcherDep,
    gate: PreferenceGateDep,
):
    """Channel configuration and preference store health."""
    channels = dispatcher.health_check()
    preferences = gate.health_check()
    # Cache misses fall through to the store, so only the store counts.
    healthy = all(channels.values()) and preferences["store"]
    return {
        "status": "ok" if healthy else "degraded",
        "channels": channels,
        "preferences": preferences,
    }
