"""Analysis page - Step 2 of the workflow."""

import streamlit as st

from src.config import config
from src.models.schemas import BirthYearOrder, SpeechScope, WorkflowStep
from src.services.birth_years import birth_years_for_display
from src.services.speech_player import SCOPE_SETTINGS, build_speech_text
from src.ui.components.effects import fire_bursts, render_birth_years
from src.ui.components.state import get_controller, get_speech_player, get_state


def render_analysis_page() -> None:
    """Render the analysis result and the script editor."""
    state = get_state()
    controller = get_controller()
    analysis = state.analysis

    if analysis is None:
        st.warning("먼저 스크린샷을 분석해주세요.")
        if st.button("업로드로 돌아가기"):
            controller.return_to(WorkflowStep.SETUP)
            st.rerun()
        return

    col_title, col_close = st.columns([5, 1])
    with col_title:
        st.caption("VIRAL SCRIPT COMPLETE")
        st.header(state.editable_title or analysis.suggested_title)
    with col_close:
        if st.button("✖ 닫기", use_container_width=True):
            get_speech_player().cancel()
            controller.return_to(WorkflowStep.SETUP)
            st.rerun()

    col_left, col_right = st.columns([1, 2])

    with col_left:
        if state.uploaded_image:
            st.image(state.uploaded_image, use_container_width=True)

        st.markdown("#### 명리학 비주얼 가이드")
        st.write(analysis.visual_style)

        with st.expander("바이럴 분석 상세", expanded=False):
            st.markdown(f"**훅:** {analysis.hook}")
            st.markdown(f"**페이싱:** {analysis.pacing}")
            st.markdown(f"**자막 전략:** {analysis.text_overlay_strategy}")
            st.markdown(f"**참여 유도:** {analysis.engagement_factor}")

    with col_right:
        title = st.text_input("제목", value=state.editable_title)
        if title != state.editable_title:
            controller.update_title(title)

        script = st.text_area("운세 대본", value=state.editable_script, height=500)
        if script != state.editable_script:
            controller.update_script(script)

        order = BirthYearOrder(config.display.birth_year_order)
        tokens = birth_years_for_display(state.editable_script, order)
        st.markdown(f"**대박 출생년도 ({len(tokens)}개)**")
        render_birth_years(tokens, floating=False)

        player = get_speech_player()
        label = "⏹ 멈추기" if player.is_playing else "🎙️ 대본 음성 재생"
        if st.button(label, use_container_width=True, disabled=not state.has_script):
            scope = SpeechScope(config.display.speech_scope)
            text = build_speech_text(scope, state.editable_script, state.editable_title)
            with st.spinner("음성을 합성하고 있습니다..."):
                utterance = player.toggle(text, SCOPE_SETTINGS[scope])
            if utterance:
                st.audio(utterance.audio, format="audio/mp3", autoplay=True)
                fire_bursts(utterance.completion_schedule())
            else:
                st.rerun()

        col_view, col_video = st.columns(2)
        with col_view:
            if st.button("🔮 운세 뷰어 미리보기", use_container_width=True, disabled=not state.has_script):
                player.cancel()
                controller.open_viewer()
                st.rerun()
        with col_video:
            if st.button(
                "12지신 쏟아지는 배경 영상 생성",
                type="primary",
                use_container_width=True,
                disabled=not state.has_script or state.is_busy,
            ):
                player.cancel()
                controller.queue_video_generation()
                st.session_state.pending_video_generation = True
                st.rerun()
