"""
평가 알림 스케줄러

평가 시작 1시간 전 리마인더와 시작 알림 메일을
지원서마다 한 번씩만 자동으로 발송합니다.
"""

from .scheduler import AssessmentScheduler, start_scheduler
from .jobs import AssessmentNotificationJob

__all__ = [
    'AssessmentScheduler',
    'start_scheduler',
    'AssessmentNotificationJob',
]
