from __future__ import annotations

from csvchat.models.schemas import CandidateFile
from csvchat.models.settings import UploadLimits
from csvchat.services.errors import FailureKind, IntakeError


def has_allowed_extension(name: str, limits: UploadLimits) -> bool:
    if limits.case_sensitive_extension:
        return name.endswith(limits.allowed_extension)
    return name.lower().endswith(limits.allowed_extension.lower())


def check_intake(file: CandidateFile, limits: UploadLimits) -> None:
    """Size first, then extension. Runs before any byte is parsed."""
    if file.size_bytes > limits.max_file_size_bytes:
        mb = limits.max_file_size_bytes / 1024 / 1024
        raise IntakeError(f"Maximum file size is {mb:g}MB", FailureKind.FILE_TOO_LARGE)
    if not has_allowed_extension(file.name, limits):
        raise IntakeError("Please upload a CSV file", FailureKind.INVALID_EXTENSION)
