from .email_sender import send_assessment_notification_email, build_assessment_email, format_assessment_date

__all__ = [
    'send_assessment_notification_email',
    'build_assessment_email',
    'format_assessment_date',
]
