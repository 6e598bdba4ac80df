import pytest
from pydantic import ValidationError
from csvchat.models.settings import UploadLimits


def test_defaults():
    limits = UploadLimits()
    assert limits.max_file_size_bytes == 10_485_760
    assert limits.max_rows == 100_000
    assert limits.preview_rows == 5
    assert limits.allowed_extension == ".csv"
    assert limits.case_sensitive_extension is True


def test_from_env(monkeypatch):
    monkeypatch.setenv("MAX_ROWS", "500")
    monkeypatch.setenv("PREVIEW_ROWS", "3")
    monkeypatch.setenv("CASE_SENSITIVE_EXTENSION", "false")
    limits = UploadLimits.from_env()
    assert limits.max_rows == 500
    assert limits.preview_rows == 3
    assert limits.case_sensitive_extension is False
    assert limits.max_file_size_bytes == 10_485_760


@pytest.mark.parametrize("kwargs", [{"max_rows": 0}, {"preview_rows": -1}, {"allowed_extension": "csv"}])
def test_rejects_bad_values(kwargs):
    with pytest.raises(ValidationError):
        UploadLimits(**kwargs)
