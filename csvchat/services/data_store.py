from __future__ import annotations
import os
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Dict, Any
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from csvchat.models.schemas import UploadOutcome, UploadRejected

logger = logging.getLogger("store")


def audit_record(actor_email: str, outcome: UploadOutcome, file_name: str, size_bytes: int) -> Dict[str, Any]:
    # metadata only: no rows, no cells
    rejected = isinstance(outcome, UploadRejected)
    return {
        "ts": datetime.now(timezone.utc),
        "actor": actor_email,
        "file_name": file_name,
        "size_bytes": int(size_bytes),
        "outcome": outcome.kind.value if rejected else "accepted",
        "violation_count": len(outcome.violations) if rejected else 0,
    }


class InMemoryStore:
    def __init__(self, retention_days: int = 90):
        self.uploads: List[Dict[str, Any]] = []
        self.retention_days = retention_days

    def log_upload(self, actor_email: str, outcome: UploadOutcome, file_name: str, size_bytes: int):
        self.uploads.append(audit_record(actor_email, outcome, file_name, size_bytes))
        logger.info("logged upload attempt (in-memory only, metadata)")

    def recent(self, limit: int = 20) -> List[Dict[str, Any]]:
        return list(reversed(self.uploads[-limit:]))

    def purge_old(self):
        cutoff = datetime.now(timezone.utc) - timedelta(days=self.retention_days)
        self.uploads = [u for u in self.uploads if u["ts"] >= cutoff]


def get_sql_engine(url: str | None = None) -> Engine:
    url = url or os.getenv("AUDIT_DB_URL", "sqlite:///upload_audit.db")
    return create_engine(url, pool_pre_ping=True, pool_recycle=1800)


class SqlStore:
    def __init__(self, engine: Engine, retention_days: int = 90):
        self.engine = engine
        self.retention_days = retention_days
        self._init()

    def _init(self):
        with self.engine.begin() as conn:
            conn.execute(text("""
            CREATE TABLE IF NOT EXISTS upload_logs (
                id INTEGER PRIMARY KEY,
                ts TIMESTAMP NOT NULL,
                actor VARCHAR(256) NOT NULL,
                file_name VARCHAR(512) NOT NULL,
                size_bytes INTEGER NOT NULL,
                outcome VARCHAR(64) NOT NULL,
                violation_count INTEGER NOT NULL
            )
            """))

    def log_upload(self, actor_email: str, outcome: UploadOutcome, file_name: str, size_bytes: int):
        rec = audit_record(actor_email, outcome, file_name, size_bytes)
        with self.engine.begin() as conn:
            conn.execute(text("""
                INSERT INTO upload_logs(ts, actor, file_name, size_bytes, outcome, violation_count)
                VALUES (:ts, :actor, :file_name, :size_bytes, :outcome, :violation_count)
            """), {**rec, "ts": rec["ts"].isoformat()})
        logger.info("logged upload attempt outcome=%s (metadata only)", rec["outcome"])

    def recent(self, limit: int = 20) -> List[Dict[str, Any]]:
        with self.engine.connect() as conn:
            rows = conn.execute(text("""
                SELECT ts, actor, file_name, size_bytes, outcome, violation_count
                FROM upload_logs ORDER BY id DESC LIMIT :n
            """), {"n": int(limit)})
            return [dict(r._mapping) for r in rows]

    def purge_old(self):
        cutoff = datetime.now(timezone.utc) - timedelta(days=self.retention_days)
        with self.engine.begin() as conn:
            conn.execute(text("DELETE FROM upload_logs WHERE ts < :cutoff"), {"cutoff": cutoff.isoformat()})
        logger.info("purge executed for retention=%s days", self.retention_days)
