"""Main Streamlit application for Shorts Myeongri Master."""

import logging
import streamlit as st

# Configure logging to show INFO level for our services
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
# Reduce noise from other loggers
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("google_genai").setLevel(logging.WARNING)

from src.config import config
from src.models.schemas import WorkflowStep
from src.ui.components.state import (
    init_session_state,
    get_controller,
    get_state,
    reset_state,
)
from src.ui.components.wizard import render_wizard_progress
from src.ui.page_modules._setup import render_setup_page
from src.ui.page_modules._analysis import render_analysis_page
from src.ui.page_modules._viewer import render_viewer_page


def render_alert() -> None:
    """Show (once) the alert left by the last failed action."""
    controller = get_controller()
    message = controller.consume_alert()
    if message:
        st.error(message)
        if controller.state.needs_key_reselection:
            st.info("위의 API 키 설정에서 키를 다시 입력하거나 선택한 뒤 다시 시도해주세요.")


def main():
    """Main application entry point."""
    st.set_page_config(
        page_title="쇼츠 명리 마스터",
        page_icon="🪐",
        layout="wide",
    )

    init_session_state()

    errors = config.validate()
    if errors:
        st.error("Configuration errors:")
        for error in errors:
            st.error(f"- {error}")
        st.info("Please fix the settings in your .env file")
        st.stop()

    state = get_state()

    render_wizard_progress(state.current_step)
    render_alert()

    if state.current_step == WorkflowStep.SETUP:
        render_setup_page()
    elif state.current_step == WorkflowStep.ANALYSIS:
        render_analysis_page()
    elif state.current_step == WorkflowStep.VIEWER:
        render_viewer_page()

    st.markdown("---")
    if st.button("처음부터 다시 시작"):
        reset_state()
        st.rerun()

    st.markdown(
        """
        <div style='text-align: center; color: gray; font-size: 0.8em;'>
        쇼츠 명리 마스터 uses Gemini for screenshot analysis, Veo for background
        videos and Edge TTS for narration.
        </div>
        """,
        unsafe_allow_html=True,
    )


if __name__ == "__main__":
    main()
