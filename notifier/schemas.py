from datetime import datetime
from typing import TypedDict, Any, Optional


# 알림 종류
REMINDER = "reminder"
START = "start"
NOTIFICATION_KINDS = (REMINDER, START)

# 지원서의 1회 발송 플래그 필드
REMINDER_FLAG = "assessmentReminderSent"
START_ALERT_FLAG = "assessmentStartAlertSent"


class JobRef(TypedDict, total=False):
    _id: Any
    title: str
    assessmentStartDate: Any  # datetime, ISO 문자열 또는 epoch ms


class CandidateRef(TypedDict, total=False):
    _id: Any
    email: str
    name: str


class ApplicationDoc(TypedDict, total=False):
    _id: Any
    assessmentStatus: str   # pending | available | in_progress | ...

    # 알림별 1회 발송 플래그
    assessmentReminderSent: bool
    assessmentStartAlertSent: bool

    # populate 된 참조 (참조가 끊기면 None)
    jobId: Optional[JobRef]
    candidateId: Optional[CandidateRef]

    # 게스트 지원
    isGuestApplication: bool
    applicantEmail: str
    applicantName: str


class NotificationRequest(TypedDict):
    email: str
    name: Optional[str]
    job_title: str
    start_date: datetime
    kind: str   # "reminder" | "start"
