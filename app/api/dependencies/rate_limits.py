from typing import Iterator, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from api.dependencies.access import Principal, get_optional_principal
from infrastructure.rate_limiting import RateLimitDecision, build_policies
from infrastructure.services import RateLimiterDep, SettingsDep

# System endpoints (health, version) are limited per client IP with slowapi;
# notification endpoints use the fixed-window limiter below.
limiter = Limiter(
    key_func=get_remote_address,
)


async def rate_limit_handler(_request: Request, exc: Exception):
    """Custom rate limit handler that returns a 429 status code and a custom error message."""
    if isinstance(exc, RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"message": "Rate limit exceeded"},
        )


def setup_rate_limiter(app: FastAPI):
    """
    Setup rate limiting for the FastAPI application.
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter():
    """
    Returns the limiter instance.
    """
    return limiter


def client_identity(request: Request, principal: Optional[Principal]) -> str:
    """Counter identity: the user when authenticated, otherwise the client IP."""
    if principal is not None:
        return f"user:{principal.user_id}"

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return f"ip:{real_ip.strip()}"
    return f"ip:{get_remote_address(request)}"


def set_rate_limit_headers(response: Response, decision: RateLimitDecision) -> None:
    response.headers["X-RateLimit-Limit"] = str(decision.limit)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    response.headers["X-RateLimit-Reset"] = str(int(decision.reset_at))


def rate_limit(endpoint: str):
    """Build a dependency admitting requests against the `endpoint` policy.

    Rejections raise AdmissionRejected (429). For policies that skip
    successful requests the slot is handed back once the route completes
    without raising.
    """

    def dependency(
        request: Request,
        response: Response,
        limiter: RateLimiterDep,
        settings: SettingsDep,
        principal: Optional[Principal] = Depends(get_optional_principal),
    ) -> Iterator[Optional[RateLimitDecision]]:
        if not settings.rate_limits.enabled:
            yield None
            return

        policy = build_policies(settings.rate_limits)[endpoint]
        decision = limiter.check(client_identity(request, principal), policy)
        set_rate_limit_headers(response, decision)

        yield decision

        if policy.skip_successful:
            limiter.refund(decision.key, decision.reset_at)

    return dependency
