from __future__ import annotations

import logging
import os
import sqlite3
import threading
from datetime import datetime, timedelta, timezone
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel

from app.core.config import settings

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

_TABLE_NAMES = {"claim_tests", "interview_sessions", "candidate_assessments"}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AssessmentStore(Protocol[RecordT]):
    def put(self, key: str, record: RecordT) -> None: ...

    def get(self, key: str) -> RecordT | None: ...

    def purge_expired(self) -> int: ...

    def clear(self) -> None: ...


class InMemoryStore(Generic[RecordT]):
    """Process-local keyed store. Entries never expire unless a TTL is given."""

    def __init__(self, ttl: timedelta | None = None) -> None:
        self._ttl = ttl if ttl and ttl.total_seconds() > 0 else None
        self._records: dict[str, tuple[RecordT, datetime | None]] = {}
        self._lock = threading.Lock()

    def put(self, key: str, record: RecordT) -> None:
        expires_at = _utc_now() + self._ttl if self._ttl else None
        with self._lock:
            self._records[key] = (record, expires_at)

    def get(self, key: str) -> RecordT | None:
        with self._lock:
            entry = self._records.get(key)
            if entry is None:
                return None
            record, expires_at = entry
            if expires_at is not None and expires_at <= _utc_now():
                del self._records[key]
                return None
            return record

    def purge_expired(self) -> int:
        if self._ttl is None:
            return 0
        now = _utc_now()
        with self._lock:
            expired = [key for key, (_, expires_at) in self._records.items() if expires_at and expires_at <= now]
            for key in expired:
                del self._records[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class SqliteStore(Generic[RecordT]):
    """Durable keyed store: one table per entity, JSON payload per row."""

    def __init__(self, *, db_path: str, table: str, model: type[RecordT], ttl: timedelta | None = None) -> None:
        if table not in _TABLE_NAMES:
            raise ValueError(f"Unsupported assessment table '{table}'.")
        self._db_path = db_path
        self._table = table
        self._model = model
        self._ttl = ttl if ttl and ttl.total_seconds() > 0 else None
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self._table} (
                record_id TEXT PRIMARY KEY,
                payload_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                expires_at TEXT
            );
            """
        )
        conn.execute(
            f"""
            CREATE INDEX IF NOT EXISTS idx_{self._table}_expiry
            ON {self._table} (expires_at);
            """
        )
        self._conn = conn
        return conn

    def put(self, key: str, record: RecordT) -> None:
        created_at = _utc_now()
        expires_at = (created_at + self._ttl).isoformat() if self._ttl else None
        with self._lock:
            conn = self._get_connection()
            conn.execute(
                f"""
                INSERT OR REPLACE INTO {self._table} (record_id, payload_json, created_at, expires_at)
                VALUES (?, ?, ?, ?)
                """,
                (key, record.model_dump_json(), created_at.isoformat(), expires_at),
            )

    def get(self, key: str) -> RecordT | None:
        with self._lock:
            conn = self._get_connection()
            row = conn.execute(
                f"SELECT payload_json, expires_at FROM {self._table} WHERE record_id = ?",
                (key,),
            ).fetchone()
        if not row:
            return None
        if row[1] and datetime.fromisoformat(row[1]) <= _utc_now():
            return None
        return self._model.model_validate_json(row[0])

    def purge_expired(self) -> int:
        if self._ttl is None:
            return 0
        with self._lock:
            conn = self._get_connection()
            cur = conn.execute(
                f"DELETE FROM {self._table} WHERE expires_at IS NOT NULL AND expires_at <= ?",
                (_utc_now().isoformat(),),
            )
            return cur.rowcount

    def clear(self) -> None:
        with self._lock:
            self._get_connection().execute(f"DELETE FROM {self._table}")

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


def build_store(table: str, model: type[RecordT], *, expires: bool = True) -> AssessmentStore[RecordT]:
    ttl = timedelta(hours=settings.assessment_ttl_hours) if expires and settings.assessment_ttl_hours > 0 else None
    if settings.assessment_store_backend == "sqlite":
        logger.info("assessment_store backend=sqlite table=%s path=%s", table, settings.assessment_db_path)
        return SqliteStore(db_path=settings.assessment_db_path, table=table, model=model, ttl=ttl)
    return InMemoryStore(ttl=ttl)
