# notifier/database.py
"""
MongoDB 연결 및 지원서(Application) 저장소

포털 백엔드가 사용하는 같은 MongoDB를 읽고,
알림 발송 플래그만 부분 업데이트합니다.

기능:
- 몽고 클라이언트 싱글톤 (연결 풀은 pymongo가 관리)
- 알림이 남아 있는 지원서 조회 (job / candidate populate)
- 발송 완료 플래그 기록
"""

import logging
from typing import Dict, Iterable, List, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from notifier import config
from notifier.schemas import ApplicationDoc, REMINDER_FLAG, START_ALERT_FLAG

logger = logging.getLogger(__name__)

# 전역 클라이언트 (싱글톤)
_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_is_connected = False


def _connection_options(uri: str) -> Dict:
    options = {
        "serverSelectionTimeoutMS": 5000,
        "socketTimeoutMS": 45000,
        "maxPoolSize": 10,
        "minPoolSize": 5,
        "maxIdleTimeMS": 30000,
        "retryWrites": True,
        "w": "majority",
        "tz_aware": True,
    }
    # Atlas (mongodb+srv) 전용 옵션
    if uri.startswith("mongodb+srv"):
        options["tls"] = True
        options["authSource"] = "admin"
    return options


def get_mongo_client() -> MongoClient:
    """몽고 클라이언트 반환 (없으면 생성)"""
    global _client
    if _client is None:
        uri = config.MONGODB_URI
        _client = MongoClient(uri, **_connection_options(uri))
        logger.info("MongoDB 클라이언트 생성 (%s)", "Atlas" if uri.startswith("mongodb+srv") else "local")
    return _client


def get_mongo_db() -> Database:
    global _db
    if _db is None:
        _db = get_mongo_client()[config.MONGODB_DB]
    return _db


def get_collection(name: str) -> Collection:
    return get_mongo_db()[name]


def test_mongo_connection() -> bool:
    """
    MongoDB 연결 확인 (ping)

    Returns:
        연결되면 True, 아니면 False
    """
    global _is_connected
    try:
        get_mongo_client().admin.command("ping")
        _is_connected = True
    except Exception as e:
        logger.error("MongoDB 연결 실패: %s", e)
        _is_connected = False
    return _is_connected


def is_db_connected() -> bool:
    """마지막 연결 확인 결과"""
    return _is_connected


class ApplicationStore:
    """
    지원서 저장소

    mongoose의 populate와 같은 모양으로 문서를 돌려줍니다:
    jobId / candidateId 필드가 참조 문서(dict)로 치환되고,
    참조 대상이 없으면 None이 됩니다.
    """

    JOB_FIELDS = {"title": 1, "assessmentStartDate": 1}
    CANDIDATE_FIELDS = {"email": 1, "name": 1}

    def __init__(
        self,
        applications: Collection = None,
        jobs: Collection = None,
        candidates: Collection = None,
    ):
        self.applications = applications if applications is not None else get_collection(config.APPLICATIONS_COLLECTION)
        self.jobs = jobs if jobs is not None else get_collection(config.JOBS_COLLECTION)
        self.candidates = candidates if candidates is not None else get_collection(config.CANDIDATES_COLLECTION)

    @staticmethod
    def pending_notification_filter(statuses: Iterable[str]) -> Dict:
        """알림이 하나라도 남아 있는 지원서 조건"""
        return {
            "assessmentStatus": {"$in": list(statuses)},
            "$or": [
                {REMINDER_FLAG: {"$ne": True}},
                {START_ALERT_FLAG: {"$ne": True}},
            ],
        }

    def find_pending_notifications(self, statuses: Iterable[str]) -> List[ApplicationDoc]:
        """
        알림 대상 지원서 조회

        Args:
            statuses: 대상 assessmentStatus 값들

        Returns:
            job / candidate가 populate 된 지원서 리스트 (조회 순서 유지)
        """
        applications = list(self.applications.find(self.pending_notification_filter(statuses)))
        if not applications:
            return []

        jobs = self._lookup(self.jobs, applications, "jobId", self.JOB_FIELDS)
        candidates = self._lookup(self.candidates, applications, "candidateId", self.CANDIDATE_FIELDS)

        for application in applications:
            application["jobId"] = jobs.get(application.get("jobId"))
            application["candidateId"] = candidates.get(application.get("candidateId"))
        return applications

    @staticmethod
    def _lookup(collection: Collection, applications: List[Dict], field: str, projection: Dict) -> Dict:
        ids = {a.get(field) for a in applications if a.get(field) is not None}
        if not ids:
            return {}
        cursor = collection.find({"_id": {"$in": list(ids)}}, projection)
        return {doc["_id"]: doc for doc in cursor}

    def mark_reminder_sent(self, application_id) -> None:
        self._set_flag(application_id, REMINDER_FLAG)

    def mark_start_alert_sent(self, application_id) -> None:
        self._set_flag(application_id, START_ALERT_FLAG)

    def _set_flag(self, application_id, flag: str) -> None:
        self.applications.update_one({"_id": application_id}, {"$set": {flag: True}})
        logger.debug("지원서 %s: %s = true", application_id, flag)


# 전역 저장소 인스턴스 (싱글톤)
_store_instance: Optional[ApplicationStore] = None


def get_store() -> ApplicationStore:
    """전역 ApplicationStore 반환"""
    global _store_instance
    if _store_instance is None:
        _store_instance = ApplicationStore()
    return _store_instance
