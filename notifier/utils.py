from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Tuple


def utcnow() -> datetime:
    """현재 시각 (timezone-aware UTC)"""
    return datetime.now(timezone.utc)


def parse_start_date(value: Any) -> Optional[datetime]:
    """
    assessmentStartDate 값을 timezone-aware datetime으로 변환합니다.

    Args:
        value: datetime, ISO 8601 문자열, 또는 epoch 밀리초

    Returns:
        UTC 기준 datetime, 값이 없거나 해석할 수 없으면 None

    예시:
        "2026-10-19T10:45:00Z"  → 2026-10-19 10:45:00+00:00
        1792406700000           → 2026-10-19 10:45:00+00:00
        "next monday"           → None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        # fromisoformat은 "Z" 접미사를 3.11 이전에는 받지 않음
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    # 몽고 드라이버가 naive datetime을 돌려주는 경우 UTC로 간주
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def resolve_recipient(application: dict) -> Optional[Tuple[str, Optional[str]]]:
    """
    지원서에서 수신자 (email, name)을 결정합니다.

    - 게스트 지원: applicantEmail / applicantName (candidateId는 무시)
    - 회원 지원: populate 된 candidateId의 email / name

    Returns:
        (email, name) 또는 이메일이 없으면 None
    """
    if application.get("isGuestApplication"):
        email = application.get("applicantEmail")
        name = application.get("applicantName")
    else:
        candidate = application.get("candidateId")
        if not isinstance(candidate, dict):
            return None
        email = candidate.get("email")
        name = candidate.get("name")

    if not email:
        return None
    return email, name


def is_reminder_due(time_to_start: timedelta, window: timedelta) -> bool:
    """시작 전 window 이내 (0 < t <= window)"""
    return timedelta(0) < time_to_start <= window


def is_start_alert_due(time_to_start: timedelta, grace: timedelta) -> bool:
    """시작 후 grace 이내 (-grace <= t <= 0), 정확히 0이면 시작 알림"""
    return -grace <= time_to_start <= timedelta(0)
