from datetime import datetime, timedelta, timezone
from sqlalchemy import text
from csvchat.models.schemas import Notification, UploadAccepted, UploadRejected
from csvchat.services.data_store import InMemoryStore, SqlStore, get_sql_engine
from csvchat.services.errors import FailureKind

NOTE = Notification(title="t", description="d")


def _rejected():
    return UploadRejected(
        attempt_id=2, kind=FailureKind.SECURITY_VALIDATION_FAILED, message="CSV file is empty",
        violations=["CSV file is empty"], notification=NOTE,
    )


def _accepted():
    return UploadAccepted(
        attempt_id=1, file_name="a.csv", size_bytes=10, total_rows=2,
        preview=[["id"], ["secret-value"]], notification=NOTE,
    )


def test_in_memory_store_keeps_metadata_only():
    store = InMemoryStore()
    store.log_upload("u@contoso.com", _accepted(), "a.csv", 10)
    store.log_upload("u@contoso.com", _rejected(), "b.csv", 0)
    recent = store.recent()
    assert [r["outcome"] for r in recent] == ["SecurityValidationFailed", "accepted"]
    assert recent[0]["violation_count"] == 1
    assert "secret-value" not in repr(store.uploads)


def test_in_memory_purge():
    store = InMemoryStore(retention_days=30)
    store.log_upload("u@contoso.com", _accepted(), "a.csv", 10)
    store.uploads[0]["ts"] = datetime.now(timezone.utc) - timedelta(days=31)
    store.log_upload("u@contoso.com", _accepted(), "b.csv", 10)
    store.purge_old()
    assert [u["file_name"] for u in store.uploads] == ["b.csv"]


def test_sql_store_roundtrip_and_purge():
    store = SqlStore(engine=get_sql_engine("sqlite://"), retention_days=30)
    store.log_upload("u@contoso.com", _accepted(), "a.csv", 10)
    store.log_upload("u@contoso.com", _rejected(), "b.csv", 0)
    old = (datetime.now(timezone.utc) - timedelta(days=60)).isoformat()
    with store.engine.begin() as conn:
        conn.execute(text(
            "INSERT INTO upload_logs(ts, actor, file_name, size_bytes, outcome, violation_count) "
            "VALUES (:ts, 'x@contoso.com', 'old.csv', 1, 'accepted', 0)"
        ), {"ts": old})
    assert len(store.recent()) == 3
    store.purge_old()
    recent = store.recent()
    assert [r["file_name"] for r in recent] == ["b.csv", "a.csv"]
    assert recent[0]["outcome"] == "SecurityValidationFailed"
