"""Gemini API key panel."""

import streamlit as st

from src.services.errors import ValidationFailure
from src.ui.components.state import get_gate

API_KEY_DOCS_URL = "https://aistudio.google.com/apikey"


def _render_stored_mode(gate) -> None:
    if gate.ready and not gate.needs_input:
        col1, col2, col3 = st.columns([4, 1, 1])
        with col1:
            st.text_input(
                "Gemini API Key",
                value=gate.masked_key(),
                type="password",
                disabled=True,
            )
        with col2:
            st.write("")
            if st.button("변경", key="change_api_key"):
                gate.request_reselection()
                st.rerun()
        with col3:
            st.write("")
            if st.button("키 삭제", key="clear_api_key"):
                gate.clear_key()
                st.rerun()
        return

    with st.form("api_key_form", clear_on_submit=True):
        value = st.text_input(
            "Gemini API Key",
            type="password",
            placeholder="AIza로 시작하는 API 키를 입력하세요",
        )
        submitted = st.form_submit_button("저장", type="primary")

    if submitted:
        try:
            gate.save_key(value)
        except ValidationFailure as e:
            st.error(e.user_message)
        else:
            st.success("API 키가 저장되었습니다!")
            st.rerun()

    if gate.ready and st.button("취소", key="cancel_api_key_change"):
        gate.needs_input = False
        st.rerun()


def _render_host_mode(gate) -> None:
    if gate.ready:
        st.success("호스트에서 제공한 API 키를 사용합니다.")
    else:
        st.warning("API 키가 선택되지 않았습니다. .env 파일에 GOOGLE_API_KEY를 설정해주세요.")

    if st.button("API 키 다시 선택", key="open_key_selector"):
        gate.open_key_selector()
        st.rerun()


def render_api_key_panel() -> None:
    """Render the key input for whichever credential mode is configured."""
    gate = get_gate()

    with st.container(border=True):
        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown("**🔑 Gemini API Key**")
        with col2:
            st.markdown(f"[결제 문서 확인]({API_KEY_DOCS_URL})")

        if gate.mode == "host":
            _render_host_mode(gate)
        else:
            _render_stored_mode(gate)
