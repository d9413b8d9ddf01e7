import pytest

from web.app import create_app


class StubScheduler:
    def get_status(self):
        return {"is_running": True, "job_count": 1, "jobs": [], "last_result": {"checked": 2}}


@pytest.fixture()
def client():
    return create_app().test_client()


@pytest.mark.parametrize("path", ["/health", "/api/health"])
def test_health(client, path):
    res = client.get(path)

    assert res.status_code == 200
    assert res.get_json() == {"status": "OK", "message": "Tale Job Portal API is running"}


def test_scheduler_status_without_scheduler(client):
    res = client.get("/api/scheduler/status")

    assert res.status_code == 503
    assert res.get_json()["success"] is False


def test_scheduler_status():
    client = create_app(StubScheduler()).test_client()

    res = client.get("/api/scheduler/status")

    assert res.status_code == 200
    body = res.get_json()
    assert body["success"] is True
    assert body["scheduler"]["last_result"] == {"checked": 2}


def test_unknown_route(client):
    res = client.get("/api/nope")

    assert res.status_code == 404
    assert res.get_json() == {"success": False, "message": "Route not found"}
