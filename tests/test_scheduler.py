"""
APScheduler 래퍼 테스트

사용법:
    pytest tests/test_scheduler.py
"""

import threading
from datetime import datetime, timedelta, timezone

from conftest import make_application
from notifier.scheduler import AssessmentScheduler, AssessmentNotificationJob
from notifier.scheduler.scheduler import JOB_ID


class FakeJob:
    def __init__(self):
        self.ran = threading.Event()
        self.calls = 0
        self.is_running = False
        self.last_result = None

    def run_check(self):
        self.calls += 1
        self.last_result = {"checked": 0}
        self.ran.set()


def test_start_runs_immediately_then_on_interval():
    job = FakeJob()
    scheduler = AssessmentScheduler(job=job)
    try:
        scheduler.start()

        assert job.ran.wait(5)
        registered = scheduler.scheduler.get_job(JOB_ID)
        assert registered.trigger.interval == timedelta(minutes=5)
        assert registered.max_instances == 1
        assert registered.coalesce is True
    finally:
        scheduler.stop()

    assert scheduler.is_running is False


def test_start_without_immediate_run():
    job = FakeJob()
    scheduler = AssessmentScheduler(job=job, interval_seconds=600, run_immediately=False)
    try:
        scheduler.start()

        next_run = scheduler.scheduler.get_job(JOB_ID).next_run_time
        assert next_run > datetime.now(timezone.utc) + timedelta(seconds=500)
        assert job.calls == 0
    finally:
        scheduler.stop()


def test_start_twice_registers_one_job():
    scheduler = AssessmentScheduler(job=FakeJob(), run_immediately=False)
    try:
        scheduler.start()
        scheduler.start()

        assert len(scheduler.scheduler.get_jobs()) == 1
    finally:
        scheduler.stop()


def test_get_status():
    job = FakeJob()
    scheduler = AssessmentScheduler(job=job, interval_seconds=30, run_immediately=False)

    status = scheduler.get_status()
    assert status["is_running"] is False
    assert status["job_count"] == 0

    try:
        scheduler.start()
        status = scheduler.get_status()
    finally:
        scheduler.stop()

    assert status["is_running"] is True
    assert status["interval_seconds"] == 30
    assert status["job_count"] == 1
    assert status["jobs"][0]["id"] == JOB_ID
    assert status["jobs"][0]["next_run_time"] is not None
    assert status["last_result"] is None


def test_stop_without_start_is_noop():
    scheduler = AssessmentScheduler(job=FakeJob())
    scheduler.stop()
    assert scheduler.is_running is False


def test_run_once_returns_cycle_summary(store, sender, clock):
    store.add(make_application(1, 45))
    job = AssessmentNotificationJob(store=store, send_email=sender, clock=clock)
    scheduler = AssessmentScheduler(job=job)

    result = scheduler.run_once()

    assert result["reminders"] == 1
    assert sender.kinds_for("cand1@example.com") == ["reminder"]
    assert scheduler.is_running is False


class BlockingJob(FakeJob):
    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def run_check(self):
        self.is_running = True
        super().run_check()
        self.release.wait(10)
        self.is_running = False


def test_scheduler_thread_is_daemon_and_stop_does_not_wait():
    job = BlockingJob()
    scheduler = AssessmentScheduler(job=job)
    try:
        scheduler.start()
        assert job.ran.wait(5)
        assert scheduler.scheduler._thread.daemon is True

        stopped = threading.Event()
        stopper = threading.Thread(target=lambda: (scheduler.stop(), stopped.set()), daemon=True)
        stopper.start()

        assert stopped.wait(2)
        assert job.is_running is True
        assert scheduler.is_running is False
    finally:
        job.release.set()
        scheduler.stop()


def test_stop_unregisters_exit_hook(monkeypatch):
    from notifier.scheduler import scheduler as scheduler_module

    registered = []
    monkeypatch.setattr(scheduler_module.atexit, "register", registered.append)
    monkeypatch.setattr(scheduler_module.atexit, "unregister", registered.remove)

    scheduler = AssessmentScheduler(job=FakeJob(), run_immediately=False)
    assert registered == [scheduler.stop]

    scheduler.stop()
    assert registered == []
