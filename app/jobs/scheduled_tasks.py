import threading
import time

import schedule

from infrastructure.logging import get_module_logger

logger = get_module_logger()


def safe_run(job):
    def wrapper(*args, **kwargs):
        try:
            return job(*args, **kwargs)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "safe_run_error",
                error=str(e),
                function=job.__name__,
                module=job.__module__,
                job_args=args,
                job_kwargs=kwargs,
                exc_info=True,
            )
            return None

    wrapper.__name__ = job.__name__
    return wrapper


def init(scheduler: schedule.Scheduler, retry_worker, rate_limiter, delivery_log, settings):
    """Register the engine's periodic jobs on `scheduler`."""
    logger.info("scheduled_tasks_initialized")

    scheduler.every(settings.retry.tick_interval_seconds).seconds.do(
        safe_run(process_retry_queue), retry_worker=retry_worker
    )
    scheduler.every(settings.rate_limits.sweep_interval_seconds).seconds.do(
        safe_run(sweep_rate_limits), rate_limiter=rate_limiter
    )
    scheduler.every().day.at("03:00").do(
        safe_run(purge_delivery_log),
        delivery_log=delivery_log,
        retention_days=settings.notifications.log_retention_days,
    )
    scheduler.every(5).minutes.do(safe_run(scheduler_heartbeat))


def process_retry_queue(retry_worker):
    stats = retry_worker.process_due()
    if stats["processed"]:
        logger.info("retry_queue_tick_completed", **stats)
    return stats


def sweep_rate_limits(rate_limiter):
    removed = rate_limiter.sweep()
    if removed:
        logger.debug("rate_limit_records_swept", removed=removed)
    return removed


def purge_delivery_log(delivery_log, retention_days):
    return delivery_log.purge_older_than(retention_days)


def scheduler_heartbeat():
    logger.info(
        "running_scheduler_heartbeat", module="scheduled_tasks", time=time.ctime()
    )


def run_continuously(scheduler: schedule.Scheduler, interval=1):
    """Continuously run, while executing pending jobs at each
    elapsed time interval.
    @return cease_continuous_run: threading. Event which can
    be set to cease continuous run. Please note that it is
    *intended behavior that run_continuously() does not run
    missed jobs*. For example, if you've registered a job that
    should run every minute and you set a continuous run
    interval of one hour then your job won't be run 60 times
    at each interval but only once.
    """
    cease_continuous_run = threading.Event()

    class ScheduleThread(threading.Thread):
        def run(self):
            while not cease_continuous_run.is_set():
                scheduler.run_pending()
                cease_continuous_run.wait(interval)

    continuous_thread = ScheduleThread(name="scheduler", daemon=True)
    continuous_thread.start()
    return cease_continuous_run
