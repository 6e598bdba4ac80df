from __future__ import annotations
import os
from pydantic import BaseModel, ConfigDict, PositiveInt, field_validator

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
MAX_ROWS = 100_000
PREVIEW_ROWS = 5


class UploadLimits(BaseModel):
    """
    Admission limits for CSV uploads.
    The extension check is case-sensitive by default (".CSV" is refused);
    set CASE_SENSITIVE_EXTENSION=false to accept any casing.
    """
    model_config = ConfigDict(frozen=True)

    max_file_size_bytes: PositiveInt = MAX_FILE_SIZE_BYTES
    max_rows: PositiveInt = MAX_ROWS
    preview_rows: PositiveInt = PREVIEW_ROWS
    allowed_extension: str = ".csv"
    case_sensitive_extension: bool = True

    @field_validator("allowed_extension")
    @classmethod
    def dotted(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(".") or len(v) < 2:
            raise ValueError("allowed_extension must look like '.csv'")
        return v

    @classmethod
    def from_env(cls) -> "UploadLimits":
        return cls(
            max_file_size_bytes=int(os.getenv("MAX_FILE_SIZE_BYTES", str(MAX_FILE_SIZE_BYTES))),
            max_rows=int(os.getenv("MAX_ROWS", str(MAX_ROWS))),
            preview_rows=int(os.getenv("PREVIEW_ROWS", str(PREVIEW_ROWS))),
            allowed_extension=os.getenv("ALLOWED_EXTENSION", ".csv"),
            case_sensitive_extension=os.getenv("CASE_SENSITIVE_EXTENSION", "true").lower() == "true",
        )
