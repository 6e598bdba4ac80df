from __future__ import annotations
from typing import Callable
import streamlit as st


def get_state(key: str):
    return st.session_state.get(key)


def set_state(key: str, value):
    st.session_state[key] = value


def get_or_init(key: str, factory: Callable):
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def open_session(session_id: str):
    """Switch chats; anything pending from the previous chat is dropped."""
    st.session_state["current_session"] = session_id
    st.session_state["pending_upload"] = None
    st.session_state["last_notification"] = None
