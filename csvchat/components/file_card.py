from __future__ import annotations
import streamlit as st
import pandas as pd

from csvchat.models.schemas import UploadAccepted


def render_file_card(accepted: UploadAccepted):
    st.markdown(f"**{accepted.file_name}**")
    cols = st.columns(3)
    with cols[0]:
        st.metric("Size", f"{accepted.size_bytes / 1024:.2f} KB")
    with cols[1]:
        st.metric("Rows", f"{accepted.total_rows:,}")
    with cols[2]:
        st.metric("Columns", f"{max((len(r) for r in accepted.preview), default=0):,}")

    st.caption(f"Preview (first {len(accepted.preview)} rows):")
    if accepted.preview:
        st.dataframe(pd.DataFrame(accepted.preview), hide_index=True, use_container_width=True)
    st.caption("File has been validated and sanitized for security")
