from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Optional

from csvchat.models.schemas import ChatMessage, ChatSession

TITLE_MAX = 40


def new_session(sessions: List[ChatSession]) -> ChatSession:
    session = ChatSession()
    sessions.insert(0, session)
    return session


def find_session(sessions: List[ChatSession], session_id: Optional[str]) -> Optional[ChatSession]:
    return next((s for s in sessions if s.id == session_id), None)


def session_title_from(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= TITLE_MAX:
        return text
    return text[:TITLE_MAX - 1].rstrip() + "…"


def append_message(session: ChatSession, role: str, content: str) -> Optional[ChatMessage]:
    if role == "user" and not content.strip():
        return None
    msg = ChatMessage(role=role, content=content)
    session.messages.append(msg)
    if role == "user" and session.title == "New Chat":
        session.title = session_title_from(content.splitlines()[0] if content else content)
    return msg


def format_relative_date(ts: datetime, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    days = (now - ts).days
    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return ts.date().isoformat()
