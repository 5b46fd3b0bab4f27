from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies.errors import setup_exception_handlers
from api.dependencies.rate_limits import setup_rate_limiter
from api.router import api_router
from infrastructure.logging import CORRELATION_HEADER, bind_request_context
from infrastructure.services import get_settings
from server.lifespan import lifespan


async def request_context_middleware(request: Request, call_next):
    """Bind a correlation id to every log emitted while handling the request."""
    with bind_request_context(
        correlation_id=request.headers.get(CORRELATION_HEADER),
        request_path=request.url.path,
        request_method=request.method,
    ) as correlation_id:
        response = await call_next(request)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(title="Notification Delivery Engine", lifespan=lifespan)
    setup_rate_limiter(app)
    setup_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_context_middleware)

    app.include_router(api_router)
    return app


handler = create_app()
