from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Literal, Optional, Union
from uuid import uuid4
from pydantic import BaseModel, ConfigDict, EmailStr, Field, NonNegativeInt, computed_field

from csvchat.services.errors import FailureKind

Row = List[str]
Table = List[Row]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CandidateFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    size_bytes: NonNegativeInt
    content: bytes = Field(default=b"", repr=False)
    content_type: Optional[str] = None

    @classmethod
    def from_upload(cls, uploaded) -> "CandidateFile":
        """Adapt a Streamlit UploadedFile (or anything with name/size/getvalue)."""
        data = uploaded.getvalue()
        size = getattr(uploaded, "size", None)
        return cls(
            name=uploaded.name,
            size_bytes=len(data) if size is None else int(size),
            content=data,
            content_type=getattr(uploaded, "type", None),
        )


class ValidationReport(BaseModel):
    violations: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not self.violations


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class UploadAccepted(BaseModel):
    status: Literal["accepted"] = "accepted"
    attempt_id: int
    file_name: str
    size_bytes: int
    preview: Table
    total_rows: int
    notification: Notification


class UploadRejected(BaseModel):
    status: Literal["rejected"] = "rejected"
    attempt_id: int
    kind: FailureKind
    message: str
    violations: List[str] = Field(default_factory=list)
    notification: Notification


UploadOutcome = Union[UploadAccepted, UploadRejected]


class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: f"msg-{uuid4().hex[:12]}")
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)


class ChatSession(BaseModel):
    id: str = Field(default_factory=lambda: f"session-{uuid4().hex[:12]}")
    title: str = "New Chat"
    created_at: datetime = Field(default_factory=_utcnow)
    messages: List[ChatMessage] = Field(default_factory=list)


class UserPrincipal(BaseModel):
    name: str
    email: EmailStr
    oid: str = ""
