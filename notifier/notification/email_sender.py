# notifier/notification/email_sender.py
"""
평가(assessment) 알림 이메일 발송

두 종류의 메일만 보냅니다:
- reminder: 평가 시작 1시간 전 리마인더
- start:    평가가 열렸다는 시작 알림

SMTP 설정은 notifier.config (EMAIL_USER, EMAIL_PASS, SMTP_*)에서 읽습니다.
"""

import html
import logging
import smtplib
from datetime import datetime
from email.message import EmailMessage
from typing import Optional

import pytz

from notifier import config
from notifier.schemas import REMINDER, NOTIFICATION_KINDS

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Candidate"


def format_assessment_date(start_date: datetime) -> str:
    """
    시작 시각을 "Jan 5, 2026, 9:05 AM" 형식으로 변환

    ASSESSMENT_TIMEZONE 기준으로 표시합니다.
    """
    tz = pytz.timezone(config.ASSESSMENT_TIMEZONE)
    local = start_date.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local.strftime('%b')} {local.day}, {local.year}, {hour}:{local.minute:02d} {meridiem}"


def _texts(kind: str, job_title: str) -> dict:
    if kind == REMINDER:
        return {
            "subject": f"Reminder: {job_title} assessment starts soon",
            "intro": "Your assessment for {title} begins in one hour.",
            "action": "Review the instructions and ensure you are ready to begin on time.",
            "button": "Review Assessment Details",
        }
    return {
        "subject": f"{job_title} assessment is now open",
        "intro": "Your assessment for {title} is now open.",
        "action": "Log in now to start the assessment without delay.",
        "button": "Start Assessment",
    }


def build_assessment_email(
    *,
    email: str,
    name: Optional[str],
    job_title: str,
    start_date: datetime,
    kind: str,
) -> EmailMessage:
    """
    알림 메일 메시지 생성 (plain text + HTML)

    Args:
        email: 수신자 주소
        name: 수신자 이름 (없으면 "Candidate")
        job_title: 채용 공고 제목
        start_date: 평가 시작 시각
        kind: "reminder" | "start"
    """
    texts = _texts(kind, job_title)
    formatted_date = format_assessment_date(start_date)
    assessment_url = f"{config.FRONTEND_URL}/candidate/start-tech-assessment"
    support_email = config.SUPPORT_EMAIL
    display_name = name or DEFAULT_NAME

    title_html = html.escape(job_title)
    intro = texts["intro"].format(title=f"<strong>{title_html}</strong>")

    lines = [
        f"Hello {display_name},",
        "",
        texts["intro"].format(title=job_title),
        "",
        f"Assessment: {job_title}",
        f"Start Time: {formatted_date}",
        "",
        texts["action"],
        f"{texts['button']}: {assessment_url}",
        "",
        f"Need help? Contact support at {support_email}.",
    ]

    template = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 24px; background-color: #f7f7f9;">
      <div style="background-color: #ffffff; padding: 32px; border-radius: 12px; box-shadow: 0 12px 24px rgba(15, 23, 42, 0.08);">
        <h2 style="margin-top: 0; color: #1e293b; font-size: 22px;">Hello {html.escape(display_name)},</h2>
        <p style="color: #475569; font-size: 16px; line-height: 1.6;">{intro}</p>
        <div style="background-color: #0f172a; color: #f8fafc; padding: 16px 20px; border-radius: 10px; margin: 24px 0;">
          <p style="margin: 0; font-size: 15px; line-height: 1.6;"><strong>Assessment:</strong> {title_html}</p>
          <p style="margin: 8px 0 0; font-size: 15px; line-height: 1.6;"><strong>Start Time:</strong> {formatted_date}</p>
        </div>
        <p style="color: #475569; font-size: 15px; line-height: 1.6;">{texts["action"]}</p>
        <div style="text-align: center; margin: 32px 0 12px;">
          <a href="{assessment_url}" style="background: #2563eb; color: #ffffff; padding: 14px 26px; border-radius: 8px; text-decoration: none; font-weight: 600; display: inline-block;">{texts["button"]}</a>
        </div>
        <p style="color: #94a3b8; font-size: 14px; text-align: center;">Need help? Contact support at <a href="mailto:{support_email}" style="color: #2563eb;">{support_email}</a>.</p>
      </div>
    </div>
    """

    msg = EmailMessage()
    msg["Subject"] = texts["subject"]
    msg["From"] = config.EMAIL_USER
    msg["To"] = email
    msg.set_content("\n".join(lines))
    msg.add_alternative(template, subtype="html")
    return msg


def send_assessment_notification_email(
    *,
    email: str,
    name: Optional[str],
    job_title: str,
    start_date: datetime,
    kind: str,
) -> bool:
    """
    평가 알림 메일 발송

    Returns:
        실제로 전송했으면 True, EMAIL_DRY_RUN이라 생략했으면 False

    동작:
        - EMAIL_DRY_RUN이면 로그만 남기고 False
        - SMTP 설정이 없으면 RuntimeError
        - 전송 실패 시 smtplib 예외를 그대로 올림 (호출자가 처리)
    """
    if kind not in NOTIFICATION_KINDS:
        raise ValueError(f"Unknown notification kind: {kind!r}")

    msg = build_assessment_email(
        email=email,
        name=name,
        job_title=job_title,
        start_date=start_date,
        kind=kind,
    )

    if config.EMAIL_DRY_RUN:
        logger.info("[DRY-RUN] %s 메일 생략: to=%s subject=%s", kind, email, msg["Subject"])
        return False

    if not config.EMAIL_USER or not config.EMAIL_PASS:
        raise RuntimeError("SMTP is not configured (missing EMAIL_USER/EMAIL_PASS).")

    with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=config.SMTP_TIMEOUT_S) as smtp:
        smtp.ehlo()
        if config.SMTP_TLS:
            smtp.starttls()
            smtp.ehlo()
        smtp.login(config.EMAIL_USER, config.EMAIL_PASS)
        smtp.send_message(msg)

    logger.info("✅ %s 메일 발송: %s (%s)", kind, email, job_title)
    return True
