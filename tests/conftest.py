import copy
import os
from datetime import datetime, timedelta, timezone

import pytest

# .env가 테스트 설정을 덮어쓰지 않도록 (notifier.config import 전에 설정)
os.environ["DISABLE_DOTENV"] = "1"

from notifier.schemas import REMINDER_FLAG, START_ALERT_FLAG
from notifier.scheduler.jobs import AssessmentNotificationJob

NOW = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


def make_application(
    app_id,
    start_offset_minutes=None,
    *,
    start_date=None,
    status="pending",
    reminder_sent=None,
    start_alert_sent=None,
    guest=False,
    email=None,
    name=None,
    title="Backend Engineer",
):
    """
    populate 된 지원서 문서 생성

    start_offset_minutes: NOW 기준 평가 시작까지 남은 분 (음수면 이미 시작)
    """
    if start_date is None and start_offset_minutes is not None:
        start_date = NOW + timedelta(minutes=start_offset_minutes)

    application = {
        "_id": app_id,
        "assessmentStatus": status,
        "jobId": {"_id": f"job-{app_id}", "title": title, "assessmentStartDate": start_date},
        "isGuestApplication": guest,
    }
    if reminder_sent is not None:
        application[REMINDER_FLAG] = reminder_sent
    if start_alert_sent is not None:
        application[START_ALERT_FLAG] = start_alert_sent

    if guest:
        application["applicantEmail"] = email if email is not None else f"guest{app_id}@example.com"
        application["applicantName"] = name if name is not None else f"Guest {app_id}"
    else:
        application["candidateId"] = {
            "_id": f"cand-{app_id}",
            "email": email if email is not None else f"cand{app_id}@example.com",
            "name": name if name is not None else f"Candidate {app_id}",
        }
    return application


class FakeApplicationStore:
    """MongoDB 없이 ApplicationStore와 같은 인터페이스를 흉내내는 저장소"""

    def __init__(self, applications=None):
        self.applications = {}
        for application in applications or []:
            self.add(application)
        self.find_calls = 0
        self.updates = []
        self.find_error = None
        self.fail_updates_for = set()

    def add(self, application):
        self.applications[application["_id"]] = application

    def find_pending_notifications(self, statuses):
        self.find_calls += 1
        if self.find_error is not None:
            raise self.find_error
        return [
            copy.deepcopy(a)
            for a in self.applications.values()
            if a.get("assessmentStatus") in statuses
            and (a.get(REMINDER_FLAG) is not True or a.get(START_ALERT_FLAG) is not True)
        ]

    def mark_reminder_sent(self, application_id):
        self._set(application_id, REMINDER_FLAG)

    def mark_start_alert_sent(self, application_id):
        self._set(application_id, START_ALERT_FLAG)

    def _set(self, application_id, flag):
        if application_id in self.fail_updates_for:
            raise RuntimeError(f"update failed for {application_id}")
        self.applications[application_id][flag] = True
        self.updates.append((application_id, flag))

    def flags(self, application_id):
        application = self.applications[application_id]
        return bool(application.get(REMINDER_FLAG)), bool(application.get(START_ALERT_FLAG))


class RecordingSender:
    """발송 요청을 기록하는 가짜 메일 발송 함수"""

    def __init__(self):
        self.sent = []
        self.fail_for = set()

    def __call__(self, *, email, name, job_title, start_date, kind):
        if email in self.fail_for:
            raise ConnectionError(f"SMTP unavailable for {email}")
        self.sent.append({
            "email": email,
            "name": name,
            "job_title": job_title,
            "start_date": start_date,
            "kind": kind,
        })
        return True

    def kinds_for(self, email):
        return [s["kind"] for s in self.sent if s["email"] == email]


class MutableClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture()
def store():
    return FakeApplicationStore()


@pytest.fixture()
def sender():
    return RecordingSender()


@pytest.fixture()
def clock():
    return MutableClock()


@pytest.fixture()
def job(store, sender, clock):
    return AssessmentNotificationJob(store=store, send_email=sender, clock=clock)
