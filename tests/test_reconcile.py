from datetime import datetime, timedelta

import pytest

from studybuddy.core.errors import MalformedEventError, ValidationError
from studybuddy.db.crud import get_task, list_tasks
from studybuddy.db.models import Priority, Status
from studybuddy.services.reconcile import push_task, reconcile, remove_task_event

from .fakes import tagged_event

NOW = datetime(2030, 1, 5, 12, 0)


def test_unknown_task_id_creates_exactly_one_task(session, calendar, calendar_client):
    calendar_client.events = [tagged_event("remote-1", color_id="11")]

    stats = reconcile(session, calendar, now=NOW)

    assert stats.model_dump() == {"created": 1, "updated": 0, "deleted": 0}
    task = get_task(session, "remote-1")
    assert task.title == "Ôn tập Toán"
    assert task.deadline == datetime(2030, 1, 10, 9, 0)
    assert task.estimate_minutes == 120
    assert task.priority is Priority.high
    assert task.status is Status.todo
    assert task.google_event_id == "evt-remote"
    assert task.google_calendar_id == "primary"
    assert task.last_synced_at == NOW


def test_window_is_now_plus_horizon(session, calendar, calendar_client):
    reconcile(session, calendar, horizon_days=7, now=NOW)
    assert calendar_client.list_calls == [(NOW, NOW + timedelta(days=7))]


def test_negative_horizon_is_rejected(session, calendar, calendar_client):
    with pytest.raises(ValidationError):
        reconcile(session, calendar, horizon_days=-1, now=NOW)
    assert calendar_client.list_calls == []


def test_zero_horizon_is_allowed(session, calendar):
    assert reconcile(session, calendar, horizon_days=0, now=NOW).created == 0


def test_untagged_events_are_ignored(session, calendar, calendar_client):
    calendar_client.events = [{"id": "x", "summary": "Lunch", "start": {"dateTime": "2030-01-06T12:00:00Z"}}]
    stats = reconcile(session, calendar, now=NOW)
    assert stats.created == stats.updated == 0
    assert list_tasks(session) == []


def test_newer_remote_event_overwrites_task(session, calendar, calendar_client, make_task):
    task = make_task(title="Old", last_synced_at=datetime(2030, 1, 1, 0, 0), status=Status.todo)
    calendar_client.events = [
        tagged_event(task.id, summary="New", updated="2030-01-02T00:00:00Z", color_id="10", status="doing")
    ]

    stats = reconcile(session, calendar, now=NOW)

    assert stats.model_dump() == {"created": 0, "updated": 1, "deleted": 0}
    session.refresh(task)
    assert task.title == "New"
    assert task.priority is Priority.low
    assert task.status is Status.doing
    assert task.estimate_minutes == 120
    assert task.last_synced_at == NOW


@pytest.mark.parametrize("updated", ["2029-12-31T00:00:00Z", "2030-01-01T00:00:00Z"])
def test_older_or_equal_remote_event_is_a_noop(session, calendar, calendar_client, make_task, updated):
    synced = datetime(2030, 1, 1, 0, 0)
    task = make_task(title="Local", last_synced_at=synced)
    calendar_client.events = [tagged_event(task.id, summary="Remote", updated=updated)]

    stats = reconcile(session, calendar, now=NOW)

    assert stats.updated == 0
    session.refresh(task)
    assert task.title == "Local"
    assert task.last_synced_at == synced


def test_never_synced_task_counts_from_epoch(session, calendar, calendar_client, make_task):
    task = make_task(title="Local")
    calendar_client.events = [tagged_event(task.id, summary="Remote")]
    assert reconcile(session, calendar, now=NOW).updated == 1


def test_missing_remote_timestamp_never_updates(session, calendar, calendar_client, make_task):
    task = make_task(title="Local")
    calendar_client.events = [tagged_event(task.id, summary="Remote", updated=None)]
    assert reconcile(session, calendar, now=NOW).updated == 0


def test_remote_deletions_do_not_delete_local_tasks(session, calendar, calendar_client, make_task):
    make_task(google_event_id="gone")
    stats = reconcile(session, calendar, now=NOW)
    assert stats.deleted == 0
    assert len(list_tasks(session)) == 1


def test_sync_never_writes_to_calendar(session, calendar, calendar_client):
    calendar_client.events = [tagged_event("remote-1")]
    reconcile(session, calendar, now=NOW)
    assert calendar_client.inserted == calendar_client.updated == calendar_client.deleted == []


def test_malformed_event_aborts_the_pass(session, calendar, calendar_client):
    calendar_client.events = [
        tagged_event("ok-1", event_id="e1"),
        tagged_event("bad", event_id="e2", status="archived"),
    ]
    with pytest.raises(MalformedEventError):
        reconcile(session, calendar, now=NOW)
    assert list_tasks(session) == []


def test_projected_task_reconciles_back(session, calendar, calendar_client, make_task):
    from studybuddy.services.projection import task_to_event

    task = make_task(title="Ôn tập Toán", priority=Priority.high, estimate_minutes=120)
    body = task_to_event(task)
    body.update(id="evt-9", updated="2030-01-02T00:00:00Z")
    calendar_client.events = [body]
    task_id = task.id
    session.delete(task)
    session.commit()

    assert reconcile(session, calendar, now=NOW).created == 1
    again = get_task(session, task_id)
    assert again.priority is Priority.high
    assert again.estimate_minutes == 120
    assert again.deadline == datetime(2030, 1, 10, 9, 0)


def test_push_task_inserts_then_updates(session, calendar, calendar_client, make_task):
    task = make_task()

    event_id = push_task(session, calendar, task)
    assert event_id == "evt-1"
    assert task.google_event_id == "evt-1"
    assert task.google_calendar_id == "primary"
    assert task.last_synced_at is not None
    assert calendar_client.inserted[0]["extendedProperties"]["private"]["studyBuddyTaskId"] == task.id

    assert push_task(session, calendar, task) == "evt-1"
    assert [eid for eid, _ in calendar_client.updated] == ["evt-1"]
    assert len(calendar_client.inserted) == 1


def test_remove_task_event_clears_sync_fields(session, calendar, calendar_client, make_task):
    task = make_task(google_event_id="evt-7", google_calendar_id="primary")

    assert remove_task_event(session, calendar, task) is True
    assert calendar_client.deleted == ["evt-7"]
    assert task.google_event_id is None
    assert task.google_calendar_id is None
    assert task.last_synced_at is not None


def test_remove_task_event_without_event_is_a_noop(session, calendar, calendar_client, make_task):
    task = make_task()
    assert remove_task_event(session, calendar, task) is False
    assert calendar_client.deleted == []
