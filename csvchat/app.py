from __future__ import annotations
import os
import logging
import streamlit as st

from csvchat.utils.logging_conf import setup_logging
from csvchat.models.schemas import CandidateFile, UploadAccepted, UploadRejected, UserPrincipal
from csvchat.models.settings import UploadLimits
from csvchat.components.chat_view import render_messages
from csvchat.components.file_card import render_file_card
from csvchat.services.assistant import SimulatedAssistant, format_upload_message
from csvchat.services.auth_easy_auth import OFFLINE_USER, get_user_from_easy_auth, is_domain_allowed
from csvchat.services.chat import append_message, find_session, format_relative_date, new_session
from csvchat.services.data_store import InMemoryStore, SqlStore, get_sql_engine
from csvchat.services.upload_pipeline import UploadPipeline
from csvchat.utils.session import get_or_init, get_state, open_session, set_state

setup_logging()
logger = logging.getLogger("app")

APP_ENV = os.getenv("APP_ENV", "local")
AUTH_MODE = os.getenv("AUTH_MODE", "offline")
ALLOWED_EMAIL_DOMAINS = [d.strip().lower() for d in os.getenv("ALLOWED_EMAIL_DOMAINS", "").split(",") if d.strip()]
USE_SQL_AUDIT = os.getenv("USE_SQL_AUDIT", "false").lower() == "true"
RETENTION_DAYS = int(os.getenv("RETENTION_DAYS", "90"))
ASSISTANT_REPLY_DELAY = float(os.getenv("ASSISTANT_REPLY_DELAY", "1.0"))
LIMITS = UploadLimits.from_env()

st.set_page_config(page_title="CSV Chat", layout="wide")


def require_auth() -> UserPrincipal:
    if AUTH_MODE == "easy_auth":
        try:
            user = get_user_from_easy_auth(dict(st.context.headers))
        except RuntimeError as ex:
            st.error(f"Sign-in required. {ex}")
            st.stop()
    else:
        user = OFFLINE_USER
    if not is_domain_allowed(user.email, ALLOWED_EMAIL_DOMAINS):
        st.error("Your email domain is not allowed to access this application.")
        st.stop()
    return user


@st.cache_resource
def get_store():
    if USE_SQL_AUDIT:
        return SqlStore(engine=get_sql_engine(), retention_days=RETENTION_DAYS)
    return InMemoryStore(retention_days=RETENTION_DAYS)


def render_sidebar(user: UserPrincipal, sessions):
    st.sidebar.write(f"Signed in as **{user.name}** ({user.email})")
    if st.sidebar.button("New Chat", use_container_width=True):
        open_session(new_session(sessions).id)
    st.sidebar.divider()
    if not sessions:
        st.sidebar.caption("No chats yet.")
    for s in sessions:
        label = f"{s.title} · {format_relative_date(s.created_at)}"
        if st.sidebar.button(label, key=f"open_{s.id}", use_container_width=True):
            open_session(s.id)


def handle_upload(user: UserPrincipal, pipeline: UploadPipeline):
    uploaded = st.file_uploader(
        "Upload CSV File", type=["csv"],
        key=f"uploader_{get_state('uploader_key') or 0}",
        help=f"Maximum file size: {LIMITS.max_file_size_bytes / 1024 / 1024:g}MB · "
             f"Maximum rows: {LIMITS.max_rows:,} · Only CSV format supported",
    )
    if uploaded is None or get_state("last_upload_id") == uploaded.file_id:
        return
    set_state("last_upload_id", uploaded.file_id)

    candidate = CandidateFile.from_upload(uploaded)
    with st.spinner("Validating..."):
        outcome = pipeline.run(candidate)
    get_store().log_upload(user.email, outcome, candidate.name, candidate.size_bytes)
    if isinstance(outcome, UploadRejected):
        set_state("pending_upload", None)
    else:
        set_state("pending_upload", outcome)
    set_state("last_notification", outcome.notification)


def render_notification():
    note = get_state("last_notification")
    if not note:
        return
    if note.variant == "destructive":
        st.error(f"**{note.title}**: {note.description}")
    else:
        st.success(f"**{note.title}**: {note.description}")


def reset_uploader():
    set_state("pending_upload", None)
    set_state("last_notification", None)
    set_state("uploader_key", (get_state("uploader_key") or 0) + 1)


def render_pending(session, assistant: SimulatedAssistant):
    pending: UploadAccepted | None = get_state("pending_upload")
    if pending is None:
        return
    render_file_card(pending)
    c1, c2 = st.columns([4, 1])
    if c1.button("Upload & Analyze", type="primary", use_container_width=True):
        append_message(session, "user", format_upload_message(pending))
        with st.spinner("Analyzing..."):
            append_message(session, "assistant", assistant.reply_to_upload(pending))
        reset_uploader()
        st.rerun()
    if c2.button("Clear", use_container_width=True):
        reset_uploader()
        st.rerun()


def main():
    user = require_auth()
    sessions = get_or_init("sessions", list)
    pipeline = get_or_init("pipeline", lambda: UploadPipeline(limits=LIMITS))
    assistant = SimulatedAssistant(delay_seconds=ASSISTANT_REPLY_DELAY)

    render_sidebar(user, sessions)
    session = find_session(sessions, get_state("current_session"))
    if session is None:
        st.info("Start a new chat from the sidebar to upload a CSV file.")
        return

    render_messages(session)

    with st.expander("Upload CSV File", expanded=get_state("pending_upload") is not None):
        handle_upload(user, pipeline)
        render_notification()
        render_pending(session, assistant)

    prompt = st.chat_input("Ask me anything about your data...")
    if prompt and append_message(session, "user", prompt):
        with st.spinner("Thinking..."):
            append_message(session, "assistant", assistant.reply_to_message(prompt))
        st.rerun()


if __name__ == "__main__":
    main()
