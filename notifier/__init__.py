"""
평가 알림 서비스

채용 포털의 지원서(MongoDB)를 주기적으로 확인하여
평가 리마인더와 시작 알림 메일을 발송합니다.
"""

__version__ = "1.0.0"
