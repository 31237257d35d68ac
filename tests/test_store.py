import sqlite3
from datetime import datetime, timezone

import pytest

import aegis.db
from aegis.db import (
    insert_submission,
    get_submission,
    get_latest_submission,
    require_submission,
    NotFoundError,
    StoreError,
    close_connection,
)
from aegis.config import ConfigurationError
from aegis.integrity import content_signature

PAYLOAD = {"labName": "OMEGA-LABS-SF", "modelName": "TITAN-V9", "compute": 5e24, "cbrnSafeguards": True}


def store(payload):
    return insert_submission(payload, content_signature(payload))


def test_insert_then_get_by_id_roundtrip():
    sub = store(PAYLOAD)
    fetched = get_submission(sub.id)
    assert fetched == sub
    assert fetched.labName == PAYLOAD["labName"]
    assert fetched.modelName == PAYLOAD["modelName"]
    assert fetched.compute == PAYLOAD["compute"]
    assert fetched.cbrnSafeguards is True
    assert fetched.signature == content_signature(PAYLOAD)
    assert fetched.createdAt.tzinfo is not None


def test_ids_increase():
    a = store(PAYLOAD)
    b = store(PAYLOAD)
    c = store(dict(PAYLOAD, compute=1.0))
    assert a.id < b.id < c.id
    assert a.signature == b.signature != c.signature


def test_get_unknown_is_none():
    assert get_submission(12345) is None
    assert get_submission(0) is None
    assert get_submission(-1) is None
    assert get_submission(2**64) is None


def test_require_unknown_raises():
    with pytest.raises(NotFoundError) as exc:
        require_submission(404)
    assert exc.value.submission_id == 404


def test_latest_empty_is_none():
    assert get_latest_submission() is None


def test_latest_follows_created_at():
    first = store(PAYLOAD)
    assert get_latest_submission() == first
    second = store(dict(PAYLOAD, modelName="TITAN-V10"))
    latest = get_latest_submission()
    assert latest.id == second.id
    assert latest.createdAt >= first.createdAt


def test_latest_tie_broken_by_id(monkeypatch):
    frozen = datetime(2026, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    monkeypatch.setattr(aegis.db, "utc_now", lambda: frozen)
    a = store(PAYLOAD)
    b = store(PAYLOAD)
    assert a.createdAt == b.createdAt == frozen
    assert get_latest_submission().id == b.id


def test_latest_prefers_later_created_at_over_id(monkeypatch):
    times = iter([
        datetime(2026, 5, 1, 12, 0, 1, tzinfo=timezone.utc),
        datetime(2026, 5, 1, 12, 0, 0, tzinfo=timezone.utc),
    ])
    monkeypatch.setattr(aegis.db, "utc_now", lambda: next(times))
    later = store(PAYLOAD)
    store(PAYLOAD)
    assert get_latest_submission().id == later.id


def test_sqlite_error_becomes_store_error(monkeypatch):
    def broken():
        raise sqlite3.OperationalError("database is locked")
    monkeypatch.setattr(aegis.db, "_get_connection", broken)
    with pytest.raises(StoreError) as exc:
        store(PAYLOAD)
    assert exc.value.operation == "insert"
    assert isinstance(exc.value.__cause__, sqlite3.OperationalError)
    with pytest.raises(StoreError):
        get_latest_submission()


def test_bad_database_url_becomes_store_error(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "mysql://nowhere/aegis")
    with pytest.raises(StoreError) as exc:
        get_submission(1)
    assert exc.value.operation == "get_by_id"
    assert isinstance(exc.value.__cause__, ConfigurationError)


def test_close_connection_then_reopen():
    first = store(PAYLOAD)
    close_connection()
    assert aegis.db._local.conn is None
    assert get_submission(first.id) == first
    assert aegis.db._local.conn is not None
