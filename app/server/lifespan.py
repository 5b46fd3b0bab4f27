from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, TYPE_CHECKING
import threading

import schedule
from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.services import (
    get_bulk_dispatcher,
    get_delivery_log,
    get_dispatcher,
    get_rate_limiter,
    get_retry_worker,
    get_settings,
)
from jobs import scheduled_tasks

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(
        log_level=settings.LOG_LEVEL, is_production=settings.is_production
    )


def _log_engine_config(settings: "Settings", logger: BoundLogger) -> None:
    notifications = settings.notifications
    logger.info(
        "engine_configuration",
        environment=settings.PREFIX or "production",
        channels=get_dispatcher().health_check(),
        cache_backend=settings.cache.backend,
        deferred_retry_enabled=notifications.deferred_retry_enabled,
        retry_tick_seconds=settings.retry.tick_interval_seconds,
        rate_limits_enabled=settings.rate_limits.enabled,
        bulk_max_size=notifications.bulk_max_size,
        log_retention_days=notifications.log_retention_days,
    )


def _start_scheduled_tasks(
    settings: "Settings",
    logger: BoundLogger,
) -> Optional[threading.Event]:
    if not settings.SCHEDULER_ENABLED:
        logger.info("scheduled_tasks_skipped", reason="scheduler_disabled")
        return None

    scheduler = schedule.Scheduler()
    scheduled_tasks.init(
        scheduler,
        retry_worker=get_retry_worker(),
        rate_limiter=get_rate_limiter(),
        delivery_log=get_delivery_log(),
        settings=settings,
    )
    stop_event = scheduled_tasks.run_continuously(scheduler)
    logger.info("scheduled_tasks_started", job_count=len(scheduler.get_jobs()))
    return stop_event


def _stop_scheduled_tasks(stop_event: Optional[threading.Event]) -> None:
    if stop_event is None:
        return
    stop_event.set()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _log_engine_config(settings, logger)

    app.state.scheduled_stop_event = _start_scheduled_tasks(settings, logger)

    yield

    logger.info("application_shutdown")

    _stop_scheduled_tasks(app.state.scheduled_stop_event)
    get_bulk_dispatcher().shutdown(wait=False)
    get_dispatcher().shutdown(wait=False)
    logger.info("dispatch_pools_stopped")
