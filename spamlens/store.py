"""
Email Store — Folder-Partitioned Message Records

Persists message-like records in SQLite, each filed in one of three
folders (inbox, spam, trash) and carrying the spam score and verdict
computed when it was stored. The spam engine never reads or writes
this store; callers copy AnalysisResult.score / is_spam into it.

Deleting is soft: the record moves to trash. delete_permanently()
is the only operation that removes a row.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

FOLDERS = ("inbox", "spam", "trash")
ATTACHMENT_TYPES = ("image", "document", "other")


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class EmailRecord:
    """A stored message."""
    id: str
    subject: str
    sender_name: str
    sender_email: str
    recipient: str
    content: str
    date: str               # ISO timestamp
    is_read: bool = False
    is_spam: bool = False
    spam_score: int = 0
    folder: str = "inbox"   # "inbox" | "spam" | "trash"
    has_attachment: bool = False
    attachment_type: Optional[str] = None
    attachment_url: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


_COLUMNS = tuple(f.name for f in fields(EmailRecord))
_BOOL_COLUMNS = ("is_read", "is_spam", "has_attachment")
_UPDATABLE = frozenset(_COLUMNS) - {"id"}


def _validate_folder(folder: str) -> None:
    if folder not in FOLDERS:
        raise ValueError(f"Unknown folder: {folder!r}. Expected one of {FOLDERS}")


def _row_to_record(row: sqlite3.Row) -> EmailRecord:
    data = dict(row)
    for col in _BOOL_COLUMNS:
        data[col] = bool(data[col])
    return EmailRecord(**data)


# ============================================================
# STORE
# ============================================================

class EmailStore:
    """SQLite-backed email store, safe to share between threads."""

    def __init__(self, db_path: str = "spamlens_emails.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS emails (
                    id TEXT PRIMARY KEY,
                    subject TEXT NOT NULL,
                    sender_name TEXT NOT NULL,
                    sender_email TEXT NOT NULL,
                    recipient TEXT NOT NULL,
                    content TEXT NOT NULL,
                    date TEXT NOT NULL,
                    is_read INTEGER NOT NULL DEFAULT 0,
                    is_spam INTEGER NOT NULL DEFAULT 0,
                    spam_score INTEGER NOT NULL DEFAULT 0,
                    folder TEXT NOT NULL DEFAULT 'inbox',
                    has_attachment INTEGER NOT NULL DEFAULT 0,
                    attachment_type TEXT,
                    attachment_url TEXT
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_folder
                ON emails(folder)
            """)
            conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # --- Reads ---

    def list_all(self) -> list[EmailRecord]:
        with self._get_conn() as conn:
            rows = conn.execute("SELECT * FROM emails ORDER BY date DESC").fetchall()
        return [_row_to_record(r) for r in rows]

    def list_by_folder(self, folder: str) -> list[EmailRecord]:
        """Records in one folder, newest first."""
        _validate_folder(folder)
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT * FROM emails WHERE folder = ? ORDER BY date DESC",
                (folder,),
            ).fetchall()
        return [_row_to_record(r) for r in rows]

    def get(self, email_id: str) -> Optional[EmailRecord]:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT * FROM emails WHERE id = ?", (email_id,),
            ).fetchone()
        return _row_to_record(row) if row else None

    def count(self) -> int:
        with self._get_conn() as conn:
            row = conn.execute("SELECT COUNT(*) FROM emails").fetchone()
            return row[0] if row else 0

    # --- Writes ---

    def upsert(self, record: EmailRecord) -> EmailRecord:
        """Insert the record, or replace the stored one with the same id."""
        _validate_folder(record.folder)
        values = [getattr(record, c) for c in _COLUMNS]
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._lock:
            with self._get_conn() as conn:
                conn.execute(
                    f"INSERT OR REPLACE INTO emails ({', '.join(_COLUMNS)}) "
                    f"VALUES ({placeholders})",
                    values,
                )
                conn.commit()
        return record

    def add(self, **data: Any) -> EmailRecord:
        """Create a record with a generated id and the current timestamp."""
        data.pop("id", None)
        data.pop("date", None)
        record = EmailRecord(
            id=uuid.uuid4().hex[:12],
            date=datetime.now(timezone.utc).isoformat(),
            **data,
        )
        self.upsert(record)
        logger.info(
            "Email stored",
            extra={"email_id": record.id, "folder": record.folder, "score": record.spam_score},
        )
        return record

    def update(self, email_id: str, **updates: Any) -> Optional[EmailRecord]:
        """Apply field updates. Returns the updated record, or None if missing."""
        unknown = set(updates) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        if "folder" in updates:
            _validate_folder(updates["folder"])
        if not updates:
            return self.get(email_id)

        assignments = ", ".join(f"{k} = ?" for k in updates)
        with self._lock:
            with self._get_conn() as conn:
                cur = conn.execute(
                    f"UPDATE emails SET {assignments} WHERE id = ?",
                    (*updates.values(), email_id),
                )
                conn.commit()
                if cur.rowcount == 0:
                    return None
        return self.get(email_id)

    def mark_spam(self, email_id: str, is_spam: bool) -> Optional[EmailRecord]:
        """Flag or unflag as spam, moving the record to spam or inbox."""
        return self.update(email_id, is_spam=is_spam, folder="spam" if is_spam else "inbox")

    def mark_read(self, email_id: str, is_read: bool) -> Optional[EmailRecord]:
        return self.update(email_id, is_read=is_read)

    def delete(self, email_id: str) -> Optional[EmailRecord]:
        """Soft delete — move to trash."""
        return self.update(email_id, folder="trash")

    def delete_permanently(self, email_id: str) -> bool:
        with self._lock:
            with self._get_conn() as conn:
                cur = conn.execute("DELETE FROM emails WHERE id = ?", (email_id,))
                conn.commit()
                return cur.rowcount > 0

    # --- Aggregates ---

    def statistics(self) -> dict:
        """Spam vs regular counts across every folder."""
        with self._get_conn() as conn:
            total, spam = conn.execute(
                "SELECT COUNT(*), COALESCE(SUM(is_spam), 0) FROM emails"
            ).fetchone()
        percentage = (spam / total) * 100 if total > 0 else 0.0
        return {
            "total_emails": total,
            "spam_emails": spam,
            "regular_emails": total - spam,
            "spam_percentage": round(percentage, 1),
        }

    def seed_samples(self) -> int:
        """Populate sample messages when the store is empty. Returns rows added."""
        if self.count() > 0:
            return 0
        from spamlens.samples import sample_emails
        records = sample_emails()
        for record in records:
            self.upsert(record)
        logger.info("Seeded %d sample emails", len(records))
        return len(records)


def get_email_store() -> EmailStore:
    """Factory — reads db path from config."""
    from spamlens.config import settings
    return EmailStore(db_path=settings.EMAIL_DB_PATH)
