# notifier/config.py
"""
환경 변수 설정

.env 파일을 읽어 모듈 상수로 노출합니다.
테스트에서는 DISABLE_DOTENV=1 로 .env 로딩을 건너뜁니다.
"""

import logging
import os

from dotenv import load_dotenv

if os.getenv("DISABLE_DOTENV") != "1":
    load_dotenv()


def _env_bool(name: str, default: str = "0") -> bool:
    v = (os.getenv(name, default) or default).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    try:
        return int((os.getenv(name) or "").strip() or default)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float((os.getenv(name) or "").strip() or default)
    except ValueError:
        return default


# -------------------- MongoDB --------------------
MONGODB_URI = (os.getenv("MONGODB_URI") or "mongodb://localhost:27017").strip()
MONGODB_DB = (os.getenv("MONGODB_DB") or "taleglobal").strip()

APPLICATIONS_COLLECTION = os.getenv("MONGODB_APPLICATIONS_COLLECTION", "applications")
JOBS_COLLECTION = os.getenv("MONGODB_JOBS_COLLECTION", "jobs")
CANDIDATES_COLLECTION = os.getenv("MONGODB_CANDIDATES_COLLECTION", "candidates")

# -------------------- Email (SMTP) --------------------
EMAIL_USER = (os.getenv("EMAIL_USER") or "").strip()
EMAIL_PASS = (os.getenv("EMAIL_PASS") or "").strip()
SMTP_HOST = (os.getenv("SMTP_HOST") or "smtp.gmail.com").strip()
SMTP_PORT = _env_int("SMTP_PORT", 587)
SMTP_TLS = _env_bool("SMTP_TLS", "1")
SMTP_TIMEOUT_S = _env_float("SMTP_TIMEOUT_S", 15.0)
EMAIL_DRY_RUN = _env_bool("EMAIL_DRY_RUN", "0")

FRONTEND_URL = (os.getenv("FRONTEND_URL") or "http://localhost:3000").rstrip("/")
SUPPORT_EMAIL = os.getenv("SUPPORT_EMAIL") or "support@taleglobal.com"

# 이메일에 표시되는 평가 시작 시각의 시간대
ASSESSMENT_TIMEZONE = os.getenv("ASSESSMENT_TIMEZONE", "UTC")

# -------------------- 서버 / 로깅 --------------------
PORT = _env_int("PORT", 5000)
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()


def setup_logging(level: str = None):
    """
    루트 로거 설정 (실행 스크립트에서 1회 호출)

    Args:
        level: 로그 레벨 이름 (기본: LOG_LEVEL 환경 변수)
    """
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # APScheduler의 실행 로그는 너무 많아서 WARNING 이상만
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
