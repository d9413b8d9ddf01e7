# notifier/scheduler/scheduler.py
"""
평가 알림 스케줄러 메인 클래스

APScheduler를 사용하여 5분마다 평가 알림 점검을 실행합니다.
"""

import atexit
import logging
import time
from datetime import datetime, timezone

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .jobs import AssessmentNotificationJob

logger = logging.getLogger(__name__)

JOB_ID = "assessment_notifications"


class AssessmentScheduler:
    """
    평가 알림 스케줄러

    기능:
    - 시작 즉시 1회 점검, 이후 POLL_INTERVAL마다 반복
    - 데몬 스레드에서 실행 (프로세스 종료를 막지 않음)
    - stop()으로 명시적 종료, 프로세스 종료 시 자동 정리
    """

    POLL_INTERVAL_SECONDS = 5 * 60

    def __init__(self, job: AssessmentNotificationJob = None, interval_seconds: int = None, run_immediately: bool = True):
        """
        스케줄러 초기화

        Args:
            job: 실행할 알림 작업 (기본: MongoDB + SMTP)
            interval_seconds: 실행 간격 (초 단위, 디버깅용)
            run_immediately: 시작하자마자 1회 실행할지 여부
        """
        self.job = job or AssessmentNotificationJob()
        self.interval_seconds = interval_seconds or self.POLL_INTERVAL_SECONDS
        self.run_immediately = run_immediately
        self.scheduler = BackgroundScheduler(daemon=True, timezone=pytz.utc)
        self.is_running = False

        atexit.register(self.stop)

    def start(self):
        """
        스케줄러 시작

        동작:
        - run_check를 interval_seconds 간격으로 등록
        - 동시에 두 번 실행되지 않도록 max_instances=1
        - 밀린 실행은 1번으로 합침 (coalesce)
        """
        if self.is_running:
            return

        options = {}
        if self.run_immediately:
            options["next_run_time"] = datetime.now(timezone.utc)

        self.scheduler.add_job(
            self.job.run_check,
            IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            name="평가 알림 점검",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            **options
        )

        self.scheduler.start()
        self.is_running = True

        logger.info("✅ 평가 알림 스케줄러 시작 (%d초 간격)", self.interval_seconds)
        self._log_next_run_time()

    def _log_next_run_time(self):
        for job in self.scheduler.get_jobs():
            if job.next_run_time:
                logger.info("📅 다음 실행 예정: %s (%s)", job.next_run_time.strftime("%Y-%m-%d %H:%M:%S"), job.name)

    def stop(self):
        """스케줄러 종료 (진행 중인 점검은 기다리지 않음)"""
        atexit.unregister(self.stop)
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("🛑 평가 알림 스케줄러 종료")

    def run_forever(self):
        """
        스케줄러를 영원히 실행 (데몬 모드)

        Ctrl+C로 종료할 때까지 대기합니다.
        """
        if not self.is_running:
            self.start()

        try:
            while True:
                time.sleep(1)
        except (KeyboardInterrupt, SystemExit):
            logger.info("종료 신호 감지됨")
            self.stop()

    def run_once(self):
        """즉시 1회 실행 (테스트용)"""
        self.job.run_check()
        return self.job.last_result

    def get_status(self):
        """
        스케줄러 상태 조회

        Returns:
            상태 정보 딕셔너리
        """
        jobs = self.scheduler.get_jobs() if self.is_running else []

        return {
            'is_running': self.is_running,
            'is_checking': self.job.is_running,
            'interval_seconds': self.interval_seconds,
            'job_count': len(jobs),
            'jobs': [
                {
                    'id': job.id,
                    'name': job.name,
                    'next_run_time': job.next_run_time.isoformat() if job.next_run_time else None
                }
                for job in jobs
            ],
            'last_result': self.job.last_result,
        }


# 편의 함수
def start_scheduler(daemon: bool = True, test: bool = False, interval: int = None):
    """
    스케줄러를 간단하게 시작하는 헬퍼 함수

    Args:
        daemon: 데몬 모드 (영구 실행)
        test: 테스트 모드 (즉시 1회 실행)
        interval: 실행 간격 (초, 디버깅용)

    Example:
        # 프로덕션 모드 (5분 간격)
        start_scheduler(daemon=True)

        # 테스트 모드
        start_scheduler(test=True)

        # 디버깅 모드 (30초마다)
        start_scheduler(daemon=True, interval=30)
    """
    scheduler = AssessmentScheduler(interval_seconds=interval)

    if test:
        return scheduler.run_once()
    if daemon:
        scheduler.start()
        scheduler.run_forever()
        return None

    scheduler.start()
    return scheduler
