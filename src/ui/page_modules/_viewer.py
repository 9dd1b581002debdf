"""Viewer page - Step 3 of the workflow.

Shows the fortune viewer (title, birth years, blessing pig, TTS, money
shower) and the Veo background video, including the generating / failed
states of the video job.
"""

from pathlib import Path

import streamlit as st

from src.config import config
from src.models.schemas import (
    AppState,
    BirthYearOrder,
    CelebrationIntensity,
    SpeechScope,
    WorkflowStep,
)
from src.services.birth_years import birth_years_for_display
from src.services.celebration import completion_burst, money_shower
from src.services.session_controller import GENERATING_MESSAGE, SessionController
from src.services.speech_player import SCOPE_SETTINGS, build_speech_text
from src.ui.components.effects import (
    fire_bursts,
    render_birth_years,
    render_blessing_overlay,
    render_title,
)
from src.ui.components.state import (
    get_blessing_tracker,
    get_controller,
    get_speech_player,
    get_state,
)


def _run_video_generation(controller: SessionController) -> None:
    """Run the Veo job with a live progress display."""
    st.markdown(
        f"""
        <div style='text-align:center;padding:40px;'>
        <h2>{GENERATING_MESSAGE}</h2>
        <p style='color:gray;letter-spacing:0.4em;font-size:0.7em;'>CRAFTING HIGH-END MYSTICAL BACKGROUND...</p>
        </div>
        """,
        unsafe_allow_html=True,
    )
    progress_bar = st.progress(0.0)
    status_text = st.empty()

    def progress_callback(message: str, progress: float):
        status_text.text(message)
        progress_bar.progress(progress)

    with st.spinner("Veo가 영상을 생성하는 중입니다 (최대 10분)..."):
        controller.start_video_generation(progress_callback=progress_callback)
    st.rerun()


def _render_video_panel(controller: SessionController) -> None:
    state = controller.state

    if state.video_path and Path(state.video_path).exists():
        st.markdown("### 운세 배경 탄생")
        st.video(state.video_path, loop=True, autoplay=True)
        with open(state.video_path, "rb") as f:
            st.download_button(
                "📥 배경 저장",
                data=f.read(),
                file_name="premium-zodiac-background.mp4",
                mime="video/mp4",
                use_container_width=True,
            )
        st.caption(
            "💡 명리학적으로 가장 기운이 좋은 '황금 십이지신' 배경입니다. "
            "캡컷(CapCut)에서 위 영상을 불러온 뒤, 생성된 대본을 자막으로 입혀 바이럴 쇼츠를 완성하세요!"
        )
    elif state.video_failed:
        st.error("⚠️ API 권한 문제로 영상 생성에 실패했습니다. 유료 계정 키인지 다시 확인해주세요.")
        if st.button("다시 시도", key="retry_video", disabled=state.is_busy):
            controller.queue_video_generation()
            st.session_state.pending_video_generation = True
            st.rerun()
    else:
        if st.button(
            "12지신 쏟아지는 배경 영상 생성",
            key="viewer_generate_video",
            type="primary",
            use_container_width=True,
            disabled=not state.has_script or state.is_busy,
        ):
            controller.queue_video_generation()
            st.session_state.pending_video_generation = True
            st.rerun()


def _render_fortune_preview(state: AppState) -> None:
    display = config.display
    tracker = get_blessing_tracker()
    player = get_speech_player()

    render_title(state.editable_title)

    tokens = birth_years_for_display(
        state.editable_script, BirthYearOrder(display.birth_year_order)
    )
    render_birth_years(tokens, floating=display.floating_years)

    # Blessing pig: press twice quickly
    _, col_pig, _ = st.columns([2, 1, 2])
    with col_pig:
        if st.button("🐷", key="blessing_pig", use_container_width=True):
            bursts = tracker.press()
            if bursts:
                fire_bursts(bursts)
        st.caption("두 번 누르세요!")
    if tracker.overlay_visible():
        render_blessing_overlay(display.blessing_duration)
    if tracker.count:
        st.caption(f"받은 복: {tracker.count}번")

    col_tts, col_money = st.columns(2)
    with col_tts:
        label = "⏹ 멈추기" if player.is_playing else "▶ 음성 재생 (TTS)"
        if st.button(label, key="viewer_tts", use_container_width=True):
            scope = SpeechScope(display.speech_scope)
            text = build_speech_text(scope, state.editable_script, state.editable_title)
            with st.spinner("음성을 합성하고 있습니다..."):
                utterance = player.toggle(text, SCOPE_SETTINGS[scope])
            if utterance:
                st.audio(utterance.audio, format="audio/mp3", autoplay=True)
                if CelebrationIntensity(display.celebration_intensity) == CelebrationIntensity.SHOWER:
                    utterance.completion_bursts = money_shower()
                else:
                    utterance.completion_bursts = completion_burst()
                fire_bursts(utterance.completion_schedule())
            else:
                st.rerun()
    with col_money:
        if st.button("💰 돈 폭죽!", key="money_shower", use_container_width=True):
            fire_bursts(money_shower())


def render_viewer_page() -> None:
    """Render the viewer / generation page."""
    state = get_state()
    controller = get_controller()

    if st.session_state.pop("pending_video_generation", False):
        _run_video_generation(controller)
        return

    col_back, col_close = st.columns([1, 1])
    with col_back:
        if st.button("← 대본 편집으로", use_container_width=True):
            get_speech_player().cancel()
            controller.return_to(WorkflowStep.ANALYSIS)
            st.rerun()
    with col_close:
        if st.button("✖ 닫기", use_container_width=True):
            get_speech_player().cancel()
            controller.return_to(WorkflowStep.SETUP)
            st.rerun()

    col_video, col_preview = st.columns([1, 1])
    with col_video:
        _render_video_panel(controller)
    with col_preview:
        with st.container(border=True):
            _render_fortune_preview(state)
