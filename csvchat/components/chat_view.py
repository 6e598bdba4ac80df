from __future__ import annotations
import streamlit as st

from csvchat.models.schemas import ChatSession


def render_messages(session: ChatSession):
    if not session.messages:
        st.subheader("Ready to analyze your data")
        st.caption("Upload a CSV file or ask me anything about data science")
        return
    for msg in session.messages:
        with st.chat_message(msg.role):
            st.text(msg.content)
            st.caption(msg.timestamp.strftime("%H:%M"))
