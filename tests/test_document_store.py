# /tests/test_document_store.py

import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from teacherboard.config import RetryPolicy
from teacherboard.core.exceptions import DocumentExistsError, DocumentNotFoundError, WriteFailure
from teacherboard.services.document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    document_path,
    join_path,
    parent_collection,
)


def _transient_error():
    return OperationalError("INSERT INTO documents ...", {}, Exception("database is locked"))


# --- Paths ---

def test_join_path_rejects_slashes_and_empty_segments():
    assert join_path("users", "t1", "notices") == "users/t1/notices"
    with pytest.raises(ValueError):
        join_path("users", "a/b")
    with pytest.raises(ValueError):
        join_path("users", "")


def test_document_path_appends_id_to_nested_collection():
    assert document_path("users/t1/notices", "n1") == "users/t1/notices/n1"
    with pytest.raises(ValueError):
        document_path("users/t1/notices", "a/b")
    with pytest.raises(ValueError):
        document_path("users/t1/notices", "")


def test_parent_collection_requires_a_document_path():
    assert parent_collection("users/t1/notices/n1") == ("users/t1/notices", "n1")
    with pytest.raises(ValueError):
        parent_collection("users/t1/notices")


# --- CRUD ---

def test_set_and_get_round_trip(store):
    store.set("sessions/ABC123", {"teacherId": "t1", "isActive": True})
    assert store.get("sessions/ABC123") == {"id": "ABC123", "teacherId": "t1", "isActive": True}
    assert store.get("sessions/NOPE00") is None


def test_set_with_merge_keeps_other_fields(store):
    store.set("sessions/ABC123", {"teacherId": "t1", "isActive": True})
    store.set("sessions/ABC123", {"isActive": False}, merge=True)
    assert store.get("sessions/ABC123")["teacherId"] == "t1"
    assert store.get("sessions/ABC123")["isActive"] is False


def test_set_without_merge_replaces_the_document(store):
    store.set("sessions/ABC123", {"teacherId": "t1", "isActive": True})
    store.set("sessions/ABC123", {"isActive": False})
    assert "teacherId" not in store.get("sessions/ABC123")


def test_create_refuses_to_overwrite(store):
    store.create("sessions/ABC123", {"teacherId": "t1"})
    with pytest.raises(DocumentExistsError):
        store.create("sessions/ABC123", {"teacherId": "t2"})
    assert store.get("sessions/ABC123")["teacherId"] == "t1"


def test_update_requires_an_existing_document(store):
    with pytest.raises(DocumentNotFoundError):
        store.update("sessions/ABC123", {"isActive": False})


def test_delete_reports_whether_anything_was_deleted(store):
    store.set("sessions/ABC123", {"teacherId": "t1"})
    assert store.delete("sessions/ABC123") is True
    assert store.delete("sessions/ABC123") is False


def test_server_timestamp_is_resolved_on_write(store):
    doc_id = store.add("users/t1/notices", {"title": "A", "createdAt": SERVER_TIMESTAMP})
    created_at = store.get(f"users/t1/notices/{doc_id}")["createdAt"]
    assert isinstance(created_at, str)
    assert created_at.startswith("20")


# --- Queries ---

def test_query_orders_newest_first_and_limits(store):
    ids = [store.add("users/t1/notices", {"title": str(i), "createdAt": SERVER_TIMESTAMP}) for i in range(5)]
    results = store.query("users/t1/notices", order_by="createdAt", descending=True, limit=3)
    assert [r["id"] for r in results] == list(reversed(ids))[:3]


def test_query_filters_on_boolean_fields_in_the_database(store):
    store.add("users/t1/notices", {"title": "on", "isActive": True})
    store.add("users/t1/notices", {"title": "off", "isActive": False})
    store.add("users/t1/notices", {"title": "unset"})
    results = store.query("users/t1/notices", where={"isActive": True})
    assert [r["title"] for r in results] == ["on"]


def test_query_is_scoped_to_one_collection(store):
    store.add("users/t1/notices", {"title": "mine"})
    store.add("users/t2/notices", {"title": "theirs"})
    store.add("users/t1/notices_archive", {"title": "other collection"})
    assert [r["title"] for r in store.query("users/t1/notices")] == ["mine"]


def test_query_sorts_non_timestamp_fields_with_missing_values_last(store):
    store.add("users/t1/prompts", {"title": "b", "usage": 1})
    store.add("users/t1/prompts", {"title": "none"})
    store.add("users/t1/prompts", {"title": "a", "usage": 5})
    results = store.query("users/t1/prompts", order_by=[("usage", True)])
    assert [r["title"] for r in results] == ["a", "b", "none"]


# --- Transactions and retries ---

def test_transaction_commits_all_writes_together(store):
    with store.transaction() as batch:
        batch.set("teachers/t1/session/current", {"sessionCode": "ABC123"})
        batch.create("sessions/ABC123", {"teacherId": "t1"})
    assert store.exists("teachers/t1/session/current")
    assert store.exists("sessions/ABC123")


def test_failed_transaction_leaves_nothing_behind(store):
    store.create("sessions/ABC123", {"teacherId": "someone-else"})
    with pytest.raises(DocumentExistsError):
        with store.transaction() as batch:
            batch.set("teachers/t1/session/current", {"sessionCode": "ABC123"})
            batch.create("sessions/ABC123", {"teacherId": "t1"})
    assert store.get("teachers/t1/session/current") is None
    assert store.get("sessions/ABC123")["teacherId"] == "someone-else"


def test_transient_errors_are_retried(store):
    real_insert = store.repo.insert
    calls = {"count": 0}

    def flaky_insert(*args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 1:
            raise _transient_error()
        return real_insert(*args, **kwargs)

    with patch.object(store.repo, "insert", side_effect=flaky_insert):
        store.set("sessions/ABC123", {"teacherId": "t1"})

    assert calls["count"] == 2
    assert store.exists("sessions/ABC123")


def test_write_failure_after_retries_are_exhausted(db_session):
    sleeps = []
    store = DocumentStore(db_session, retry_policy=RetryPolicy(max_retries=2, retry_delay_ms=150), sleep=sleeps.append)

    with patch.object(store.repo, "insert", side_effect=_transient_error()):
        with pytest.raises(WriteFailure):
            store.set("sessions/ABC123", {"teacherId": "t1"})

    assert sleeps == [0.15, 0.15]
    assert store.get("sessions/ABC123") is None


# --- Subscriptions ---

def test_subscribe_delivers_initial_and_updated_snapshots(store, hub):
    snapshots = []
    unsubscribe = store.subscribe("users/t1/notices", snapshots.append, order_by="createdAt", descending=True)
    store.add("users/t1/notices", {"title": "first"})
    store.add("users/t1/notices", {"title": "second"})

    assert [len(s) for s in snapshots] == [0, 1, 2]
    assert snapshots[-1][0]["title"] == "second"

    unsubscribe()
    store.add("users/t1/notices", {"title": "third"})
    assert len(snapshots) == 3
    assert hub.count() == 0


def test_document_subscription_sees_writes_from_another_store(store, hub, session_factory):
    snapshots = []
    store.subscribe("teachers/t1/session/current", snapshots.append)

    other_session = session_factory()
    try:
        DocumentStore(other_session, hub=hub).set("teachers/t1/session/current", {"isActive": True})
    finally:
        other_session.close()

    assert snapshots[0] is None
    assert snapshots[-1]["isActive"] is True


def test_a_failing_subscriber_does_not_fail_the_write(store):
    def broken(_snapshot):
        if _snapshot:
            raise RuntimeError("boom")

    store.subscribe("users/t1/notices", broken)
    store.add("users/t1/notices", {"title": "still saved"})
    assert len(store.query("users/t1/notices")) == 1
