from __future__ import annotations
from enum import Enum
from typing import List, Optional


class FailureKind(str, Enum):
    FILE_TOO_LARGE = "FileTooLarge"
    INVALID_EXTENSION = "InvalidExtension"
    PARSE_FAILURE = "ParseFailure"
    SECURITY_VALIDATION_FAILED = "SecurityValidationFailed"


class UploadError(ValueError):
    """Base for every user-recoverable upload rejection."""
    kind: FailureKind
    title = "Upload failed"

    def __init__(self, message: str, kind: Optional[FailureKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def message(self) -> str:
        return str(self)


class IntakeError(UploadError):
    def __init__(self, message: str, kind: FailureKind):
        if kind not in (FailureKind.FILE_TOO_LARGE, FailureKind.INVALID_EXTENSION):
            raise ValueError(f"not an intake failure: {kind}")
        super().__init__(message, kind)

    @property
    def title(self) -> str:
        if self.kind is FailureKind.FILE_TOO_LARGE:
            return "File too large"
        return "Invalid file type"


class ParseError(UploadError):
    kind = FailureKind.PARSE_FAILURE
    title = "Parse error"


class SecurityValidationError(UploadError):
    kind = FailureKind.SECURITY_VALIDATION_FAILED
    title = "Security validation failed"

    def __init__(self, violations: List[str]):
        if not violations:
            raise ValueError("SecurityValidationError needs at least one violation")
        super().__init__(violations[0])
        self.violations = list(violations)
