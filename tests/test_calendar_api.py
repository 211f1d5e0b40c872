from studybuddy.api.deps import get_connector
from studybuddy.core.errors import CalendarRateLimitedError

from .fakes import FakeConnector, tagged_event

API = "/api/v1/google-calendar"


def test_status_reports_connection(client):
    r = client.get(f"{API}/status")
    assert r.status_code == 200
    assert r.json()["success"] is True
    assert r.json()["initialized"] is True


def test_status_when_not_connected(app, client):
    app.dependency_overrides[get_connector] = lambda: FakeConnector(None)
    assert client.get(f"{API}/status").json()["initialized"] is False


def test_sync_requires_connection(app, client):
    app.dependency_overrides[get_connector] = lambda: FakeConnector(None)
    r = client.post(f"{API}/sync")
    assert r.status_code == 503
    assert r.json()["success"] is False


def test_sync_returns_stats(client, calendar_client):
    calendar_client.events = [tagged_event("remote-1"), tagged_event("remote-2", event_id="e2")]

    r = client.post(f"{API}/sync")

    assert r.status_code == 200
    assert r.json()["stats"] == {"created": 2, "updated": 0, "deleted": 0}
    assert client.get("/api/v1/tasks/remote-1").status_code == 200


def test_sync_rejects_negative_horizon(client):
    r = client.post(f"{API}/sync", params={"horizonDays": -3})
    assert r.status_code == 400


def test_sync_surfaces_rate_limit(client, calendar_client):
    def limited(*args, **kwargs):
        raise CalendarRateLimitedError("rate limited", 5.0)

    calendar_client.list_events = limited
    r = client.post(f"{API}/sync")
    assert r.status_code == 503
    assert r.json() == {"success": False, "error": "rate limited"}


def test_sync_malformed_event_is_upstream_error(client, calendar_client):
    calendar_client.events = [tagged_event("t", status="archived")]
    r = client.post(f"{API}/sync")
    assert r.status_code == 500
    assert r.json()["success"] is False


def test_sync_task_creates_then_updates_event(client, calendar_client, make_task):
    task = make_task()

    r = client.post(f"{API}/sync-task/{task.id}")
    assert r.status_code == 200
    assert r.json()["eventId"] == "evt-1"
    assert client.get(f"/api/v1/tasks/{task.id}").json()["task"]["googleEventId"] == "evt-1"

    r = client.post(f"{API}/sync-task/{task.id}")
    assert r.json()["eventId"] == "evt-1"
    assert len(calendar_client.inserted) == 1
    assert len(calendar_client.updated) == 1


def test_sync_task_unknown(client):
    assert client.post(f"{API}/sync-task/nope").status_code == 404


def test_unsync_task(client, calendar_client, make_task):
    task = make_task(google_event_id="evt-3", google_calendar_id="primary")

    r = client.delete(f"{API}/sync-task/{task.id}")

    assert r.status_code == 200
    assert calendar_client.deleted == ["evt-3"]
    assert client.get(f"/api/v1/tasks/{task.id}").json()["task"]["googleEventId"] is None


def test_auth_url_and_code(client, connector):
    r = client.get(f"{API}/auth-url")
    assert r.json()["authUrl"].startswith("https://")

    assert client.post(f"{API}/auth-code", json={}).status_code == 400
    r = client.post(f"{API}/auth-code", json={"code": " 4/abc "})
    assert r.status_code == 200
    assert connector.codes == ["4/abc"]


def test_blank_event_title_is_an_upstream_error(client, calendar_client):
    calendar_client.events = [tagged_event("blank", summary=" \t ")]
    r = client.post(f"{API}/sync")
    assert r.status_code == 500
    assert client.get("/api/v1/tasks/blank").status_code == 404
