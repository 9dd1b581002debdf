"""Setup page - Step 1 of the workflow."""

import streamlit as st

from src.ui.components.api_key import render_api_key_panel
from src.ui.components.state import get_controller, get_state


def render_setup_page() -> None:
    """Render the screenshot upload page."""
    state = get_state()
    controller = get_controller()

    st.markdown(
        """
        <div style='text-align:center;'>
        <div style='font-size:5em;'>🪐</div>
        <h1 style='margin-bottom:0;'>쇼츠 명리 마스터</h1>
        <p style='color:gray;letter-spacing:0.3em;font-size:0.7em;'>ZODIAC FORTUNE VIDEO BACKGROUNDS</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

    render_api_key_panel()

    st.subheader("📁 레퍼런스 업로드")
    uploaded_file = st.file_uploader(
        "9:16 비율 숏츠 캡처",
        type=["png", "jpg", "jpeg", "webp", "gif", "bmp"],
        help="분석할 바이럴 쇼츠의 스크린샷을 올려주세요",
    )

    if uploaded_file is not None:
        controller.upload_image(uploaded_file.getvalue(), uploaded_file.type)

    if state.uploaded_image:
        _, col, _ = st.columns([1, 2, 1])
        with col:
            st.image(state.uploaded_image, use_container_width=True)

    if state.status_message and not state.is_busy:
        st.warning(state.status_message)

    if st.button(
        "기운 분석 및 대본 생성",
        type="primary",
        use_container_width=True,
        disabled=not state.has_image or state.is_busy,
    ):
        progress_bar = st.progress(0.0)
        status_text = st.empty()

        def progress_callback(message: str, progress: float):
            status_text.text(message)
            progress_bar.progress(progress)

        with st.spinner(state.status_message or "분석 중..."):
            controller.start_analysis(progress_callback=progress_callback)

        st.rerun()
