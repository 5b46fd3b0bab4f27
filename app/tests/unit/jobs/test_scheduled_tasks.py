from unittest.mock import MagicMock, call, patch

import schedule

from infrastructure.configuration import Settings
from jobs import scheduled_tasks


def test_init():
    """init registers the retry tick, rate limit sweep, log purge and heartbeat."""
    scheduler = schedule.Scheduler()
    settings = Settings()

    scheduled_tasks.init(
        scheduler,
        retry_worker=MagicMock(),
        rate_limiter=MagicMock(),
        delivery_log=MagicMock(),
        settings=settings,
    )

    jobs = scheduler.get_jobs()
    assert len(jobs) == 4
    names = {job.job_func.__name__ for job in jobs}
    assert names == {
        "process_retry_queue",
        "sweep_rate_limits",
        "purge_delivery_log",
        "scheduler_heartbeat",
    }
    intervals = {
        job.job_func.__name__: (job.interval, job.unit) for job in jobs
    }
    assert intervals["process_retry_queue"] == (
        settings.retry.tick_interval_seconds,
        "seconds",
    )
    assert intervals["scheduler_heartbeat"] == (5, "minutes")
    assert intervals["purge_delivery_log"] == (1, "days")


def test_init_passes_services():
    """Every job gets its collaborator as a keyword argument."""
    scheduler = MagicMock()
    retry_worker = MagicMock()
    delivery_log = MagicMock()

    scheduled_tasks.init(
        scheduler,
        retry_worker=retry_worker,
        rate_limiter=MagicMock(),
        delivery_log=delivery_log,
        settings=Settings(),
    )

    scheduler.every().day.at.assert_has_calls(calls=[call("03:00")])
    do_calls = [c for c in scheduler.mock_calls if ".do(" in str(c)]
    assert len(do_calls) == 4
    retry_params = [c for c in scheduler.mock_calls if "retry_worker=" in str(c)]
    assert len(retry_params) == 1
    retention_params = [c for c in scheduler.mock_calls if "retention_days=90" in str(c)]
    assert len(retention_params) == 1


@patch("jobs.scheduled_tasks.logger")
def test_safe_run(mock_logger):
    """Test that safe_run properly handles exceptions."""

    def test_job(*args, **kwargs):
        raise RuntimeError("Test exception")

    wrapper = scheduled_tasks.safe_run(test_job)

    assert wrapper("a", retention_days=90) is None
    assert wrapper.__name__ == "test_job"
    mock_logger.error.assert_called_once_with(
        "safe_run_error",
        error="Test exception",
        function="test_job",
        module=test_job.__module__,
        job_args=("a",),
        job_kwargs={"retention_days": 90},
        exc_info=True,
    )


def test_safe_run_returns_result():
    wrapper = scheduled_tasks.safe_run(lambda value: value * 2)

    assert wrapper(21) == 42


@patch("jobs.scheduled_tasks.logger")
@patch("jobs.scheduled_tasks.time")
def test_scheduler_heartbeat(mock_time, mock_logger):
    """Test that scheduler_heartbeat logs the current time."""
    mock_time.ctime.return_value = "Thu Mar 17 14:30:00 2025"

    scheduled_tasks.scheduler_heartbeat()

    mock_logger.info.assert_called_once_with(
        "running_scheduler_heartbeat",
        module="scheduled_tasks",
        time=mock_time.ctime.return_value,
    )
    mock_time.ctime.assert_called_once()


@patch("jobs.scheduled_tasks.threading")
def test_run_continuously(threading_mock):
    cease_continuous_run = MagicMock()
    cease_continuous_run.is_set.return_value = True
    threading_mock.Event.return_value = cease_continuous_run

    result = scheduled_tasks.run_continuously(MagicMock(), interval=1)

    assert result == cease_continuous_run


def test_run_continuously_stops_on_event():
    scheduler = MagicMock()

    stop_event = scheduled_tasks.run_continuously(scheduler, interval=0.01)
    stop_event.set()

    assert stop_event.is_set()


@patch("jobs.scheduled_tasks.logger")
def test_process_retry_queue(mock_logger):
    retry_worker = MagicMock()
    retry_worker.process_due.return_value = {
        "processed": 2,
        "delivered": 1,
        "rescheduled": 1,
        "exhausted": 0,
        "dropped": 0,
    }

    stats = scheduled_tasks.process_retry_queue(retry_worker)

    assert stats["delivered"] == 1
    mock_logger.info.assert_called_once_with(
        "retry_queue_tick_completed", **retry_worker.process_due.return_value
    )


@patch("jobs.scheduled_tasks.logger")
def test_process_retry_queue_idle_tick_is_quiet(mock_logger):
    retry_worker = MagicMock()
    retry_worker.process_due.return_value = {"processed": 0}

    scheduled_tasks.process_retry_queue(retry_worker)

    mock_logger.info.assert_not_called()


def test_sweep_rate_limits():
    rate_limiter = MagicMock()
    rate_limiter.sweep.return_value = 3

    assert scheduled_tasks.sweep_rate_limits(rate_limiter) == 3


def test_purge_delivery_log():
    delivery_log = MagicMock()
    delivery_log.purge_older_than.return_value = 12

    assert scheduled_tasks.purge_delivery_log(delivery_log, retention_days=90) == 12
    delivery_log.purge_older_than.assert_called_once_with(90)
