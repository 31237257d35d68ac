"""
Record store for the AEGIS compliance service.

Provides SQLite-based storage for lab submissions. A single append-only
table; records are never updated or deleted outside test resets.
"""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .config import ConfigurationError, database_path
from .models import Submission
from .util import utc_now

# Sortable text form; lexical order equals chronological order
CREATED_AT_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

# SQLite INTEGER range; ids outside it cannot exist
MAX_ID = 2**63 - 1

_SELECT_COLUMNS = (
    "SELECT id, lab_name, model_name, compute, cbrn_safeguards, signature, created_at "
    "FROM lab_submissions"
)

# Thread-local storage for connection pooling
_local = threading.local()


class StoreError(Exception):
    """Raised when the underlying database fails. Carries no detail for callers."""
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"record store failure during {operation}")


class NotFoundError(Exception):
    """Raised when a submission id does not resolve."""
    def __init__(self, submission_id: Any):
        self.submission_id = submission_id
        self.message = "Submission not found"
        super().__init__(f"submission {submission_id} not found")


def _get_connection() -> sqlite3.Connection:
    """
    Get a thread-local database connection.
    Connections are reused within the same thread and reopened when the
    configured database path changes.
    """
    path = database_path()
    conn = getattr(_local, 'conn', None)
    if conn is not None and getattr(_local, 'path', None) == path:
        return conn
    if conn is not None:
        conn.close()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.row_factory = sqlite3.Row
    _local.conn = conn
    _local.path = path
    return conn


@contextmanager
def _transaction():
    """
    Context manager for database transactions.
    Automatically commits on success, rolls back on failure.
    """
    conn = _get_connection()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise


@contextmanager
def _store_operation(operation: str):
    """Translate sqlite3 and database URL failures into StoreError, keeping the cause chained."""
    try:
        yield
    except (sqlite3.Error, ConfigurationError) as e:
        raise StoreError(operation) from e


def _format_created_at(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime(CREATED_AT_FORMAT)


def _parse_created_at(s: str) -> datetime:
    return datetime.strptime(s, CREATED_AT_FORMAT).replace(tzinfo=timezone.utc)


def _row_to_submission(row: sqlite3.Row) -> Submission:
    return Submission(
        id=row['id'],
        labName=row['lab_name'],
        modelName=row['model_name'],
        compute=row['compute'],
        cbrnSafeguards=bool(row['cbrn_safeguards']),
        signature=row['signature'],
        createdAt=_parse_created_at(row['created_at']),
    )


def init_db() -> None:
    """
    Initialize database schema with proper indexes.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    with _store_operation("init"), _transaction() as conn:
        conn.execute("""
        CREATE TABLE IF NOT EXISTS lab_submissions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            lab_name TEXT NOT NULL,
            model_name TEXT NOT NULL,
            compute REAL NOT NULL,
            cbrn_safeguards INTEGER NOT NULL DEFAULT 0,
            signature TEXT NOT NULL,
            created_at TEXT NOT NULL
        );""")
        conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_lab_submissions_created
        ON lab_submissions(created_at, id);""")


def insert_submission(payload: Mapping[str, Any], signature: str) -> Submission:
    """
    Persist a validated payload with its fingerprint.

    The store assigns ``id`` (AUTOINCREMENT, never reused) and ``createdAt``.

    Raises:
        StoreError: If the write fails
    """
    created_at = utc_now()
    with _store_operation("insert"), _transaction() as conn:
        cur = conn.execute(
            "INSERT INTO lab_submissions(lab_name, model_name, compute, cbrn_safeguards, "
            "signature, created_at) VALUES(?,?,?,?,?,?)",
            (
                payload["labName"],
                payload["modelName"],
                float(payload["compute"]),
                1 if payload["cbrnSafeguards"] else 0,
                signature,
                _format_created_at(created_at),
            )
        )
        row = conn.execute(_SELECT_COLUMNS + " WHERE id=?", (cur.lastrowid,)).fetchone()
    return _row_to_submission(row)


def get_latest_submission() -> Optional[Submission]:
    """Most recent submission by createdAt, ties broken by id. None when empty."""
    with _store_operation("get_latest"):
        conn = _get_connection()
        cur = conn.execute(_SELECT_COLUMNS + " ORDER BY created_at DESC, id DESC LIMIT 1")
        row = cur.fetchone()
    return _row_to_submission(row) if row else None


def get_submission(submission_id: int) -> Optional[Submission]:
    """Exact lookup by id. None when no record matches."""
    if not 0 < submission_id <= MAX_ID:
        return None
    with _store_operation("get_by_id"):
        conn = _get_connection()
        cur = conn.execute(_SELECT_COLUMNS + " WHERE id=?", (submission_id,))
        row = cur.fetchone()
    return _row_to_submission(row) if row else None


def require_submission(submission_id: int) -> Submission:
    """
    Like get_submission, but an unresolved id is an error.

    Raises:
        NotFoundError: If no record matches
        StoreError: If the read fails
    """
    submission = get_submission(submission_id)
    if submission is None:
        raise NotFoundError(submission_id)
    return submission


# ============================================================
# Test Support: Database Reset
# ============================================================

def reset_db() -> None:
    """
    Reset the database for test isolation.
    Clears the table and its id counter but preserves schema.
    """
    with _transaction() as conn:
        conn.execute("DELETE FROM lab_submissions")
        conn.execute("DELETE FROM sqlite_sequence WHERE name='lab_submissions'")


def close_connection() -> None:
    """Close the thread-local connection (for cleanup)."""
    if getattr(_local, 'conn', None) is not None:
        _local.conn.close()
        _local.conn = None
        _local.path = None
