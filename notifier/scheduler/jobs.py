# notifier/scheduler/jobs.py
"""
평가 알림 작업

스케줄러가 주기적으로 실행하는 작업(Job)을 정의합니다.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from notifier.schemas import (
    REMINDER,
    START,
    REMINDER_FLAG,
    START_ALERT_FLAG,
    ApplicationDoc,
    NotificationRequest,
)
from notifier.utils import (
    utcnow,
    parse_start_date,
    resolve_recipient,
    is_reminder_due,
    is_start_alert_due,
)

logger = logging.getLogger(__name__)


class AssessmentNotificationJob:
    """
    평가 알림 작업

    지원서마다 두 종류의 메일을 최대 1번씩만 보냅니다.
    - reminder: 시작까지 REMINDER_WINDOW 이내
    - start:    시작 후 START_ALERT_GRACE 이내

    발송에 성공한 뒤에만 플래그를 기록하므로,
    실패한 메일은 다음 주기에 다시 시도됩니다.
    """

    ACTIVE_STATUSES = ("pending", "available", "in_progress")
    REMINDER_WINDOW = timedelta(minutes=60)
    START_ALERT_GRACE = timedelta(minutes=15)
    DEFAULT_JOB_TITLE = "Assessment"

    def __init__(
        self,
        store=None,
        send_email: Callable = None,
        clock: Callable[[], datetime] = None,
        reminder_window: timedelta = None,
        start_alert_grace: timedelta = None,
    ):
        """
        Args:
            store: find_pending_notifications / mark_reminder_sent /
                   mark_start_alert_sent 를 가진 저장소 (기본: MongoDB)
            send_email: 메일 발송 함수 (기본: SMTP).
                        실제로 전송했을 때만 True를 반환해야 플래그를 기록함
            clock: 현재 시각 함수 (timezone-aware)
            reminder_window: 리마인더 구간 (기본 60분)
            start_alert_grace: 시작 알림 유예 구간 (기본 15분)
        """
        if store is None:
            from notifier.database import get_store
            store = get_store()
        if send_email is None:
            from notifier.notification.email_sender import send_assessment_notification_email
            send_email = send_assessment_notification_email

        self.store = store
        self.send_email = send_email
        self.clock = clock or utcnow
        self.reminder_window = self.REMINDER_WINDOW if reminder_window is None else reminder_window
        self.start_alert_grace = self.START_ALERT_GRACE if start_alert_grace is None else start_alert_grace

        self._lock = threading.Lock()
        self.last_result: Optional[Dict] = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def run_check(self) -> None:
        """
        1회 점검

        동작:
        1. 이전 점검이 아직 진행 중이면 아무것도 하지 않음
        2. 알림이 남은 지원서 조회
        3. 지원서별로 리마인더 / 시작 알림 판단 및 발송
        4. 지원서 단위 실패는 기록만 하고 다음 지원서로 진행
        """
        if not self._lock.acquire(blocking=False):
            logger.debug("이전 평가 알림 점검이 진행 중이라 이번 주기는 건너뜀")
            return

        try:
            result = {"checked": 0, "reminders": 0, "start_alerts": 0, "skipped": 0, "failures": 0}
            now = self.clock()
            applications = self.store.find_pending_notifications(self.ACTIVE_STATUSES)

            for application in applications:
                result["checked"] += 1
                try:
                    sent = self.process_application(application, now)
                except Exception:
                    result["failures"] += 1
                    logger.exception("지원서 %s 평가 알림 처리 실패", application.get("_id"))
                    continue

                if sent is None:
                    result["skipped"] += 1
                else:
                    result["reminders"] += sent.count(REMINDER)
                    result["start_alerts"] += sent.count(START)

            result["finished_at"] = self.clock().isoformat()
            self.last_result = result

            if result["reminders"] or result["start_alerts"] or result["failures"]:
                logger.info(
                    "평가 알림 점검 완료: %d건 확인, 리마인더 %d, 시작 알림 %d, 실패 %d",
                    result["checked"], result["reminders"], result["start_alerts"], result["failures"],
                )
            else:
                logger.debug("평가 알림 점검 완료: %d건 확인, 발송 없음", result["checked"])

        except Exception:
            logger.exception("평가 알림 스케줄러 오류")
        finally:
            self._lock.release()

    def process_application(self, application: ApplicationDoc, now: datetime) -> Optional[List[str]]:
        """
        지원서 1건 처리

        Args:
            application: populate 된 지원서 문서
            now: 이번 주기의 기준 시각

        Returns:
            발송한 알림 종류 리스트, 데이터가 부족해 건너뛰면 None
        """
        application_id = application.get("_id")
        job = application.get("jobId")
        if not isinstance(job, dict):
            logger.debug("지원서 %s: 채용 공고 없음 (스킵)", application_id)
            return None

        start_date = parse_start_date(job.get("assessmentStartDate"))
        if start_date is None:
            logger.debug("지원서 %s: assessmentStartDate 없음 또는 잘못된 값 (스킵)", application_id)
            return None

        recipient = resolve_recipient(application)
        if recipient is None:
            logger.debug("지원서 %s: 수신자 이메일 없음 (스킵)", application_id)
            return None

        email, name = recipient
        job_title = job.get("title") or self.DEFAULT_JOB_TITLE
        time_to_start = start_date - now
        sent = []

        if is_reminder_due(time_to_start, self.reminder_window) and application.get(REMINDER_FLAG) is not True:
            if self._notify(application_id, email, name, job_title, start_date, REMINDER):
                self.store.mark_reminder_sent(application_id)
                sent.append(REMINDER)

        if is_start_alert_due(time_to_start, self.start_alert_grace) and application.get(START_ALERT_FLAG) is not True:
            if self._notify(application_id, email, name, job_title, start_date, START):
                self.store.mark_start_alert_sent(application_id)
                sent.append(START)

        return sent

    def _notify(self, application_id, email: str, name: Optional[str], job_title: str, start_date: datetime, kind: str) -> bool:
        """메일 발송 후 실제 전송 여부 반환 (False면 플래그를 남기지 않음)"""
        request: NotificationRequest = {
            "email": email,
            "name": name,
            "job_title": job_title,
            "start_date": start_date,
            "kind": kind,
        }
        delivered = bool(self.send_email(**request))
        if not delivered:
            logger.info("지원서 %s: %s 메일 미전송 (플래그 기록 안 함)", application_id, kind)
        return delivered
